"""Review selector abstractions and implementations.

This module defines the selector system used by the dashboard to decide
whether a design review matches the active filters. Selectors encapsulate
matching logic and can be composed using logical operators (AND / OR).

Selectors are pure, side-effect-free objects and are intended to be
reusable across different frontends such as CLI commands, automation
scripts, and tests.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Mapping

if TYPE_CHECKING:
    from dreview.core.reviews import Candidate, DesignReview


class ReviewSelector(ABC):
    """
    Abstract base class for all review selectors.

    A ReviewSelector encapsulates a single piece of matching logic that
    determines whether a given DesignReview satisfies a specific criterion.
    """

    @abstractmethod
    def matches(self, review: DesignReview) -> bool:
        """
        Determine whether the given review matches this selector.

        Args:
            review: DesignReview instance to evaluate.

        Returns:
            True if the review matches the selector criteria, False otherwise.
        """
        ...


class MatchAllSelector(ReviewSelector):
    """Selector used when no filter is active."""

    def matches(self, review: DesignReview) -> bool:
        return True


class SearchSelector(ReviewSelector):
    """
    Case-insensitive free-text search over the candidate name, the
    candidate designation and the problem description.
    """

    def __init__(self, term: str, candidates: Mapping[int, Candidate] | None = None):
        """
        Create a search selector.

        Args:
            term: Text to look for.
            candidates: Candidate lookup keyed by id, used to resolve names.
        """
        self.term = term.lower()
        self.candidates = candidates or {}

    def matches(self, review: DesignReview) -> bool:
        candidate = (
            self.candidates.get(review.candidate_id)
            if review.candidate_id is not None
            else None
        )
        name = candidate.name if candidate else f"Candidate {review.candidate_id}"
        haystacks = [name, review.problem_description]
        if candidate and candidate.designation:
            haystacks.append(candidate.designation)
        return any(self.term in h.lower() for h in haystacks)


class StatusSelector(ReviewSelector):
    """
    Selector that matches reviews with an exact remote status.
    """

    def __init__(self, status: str):
        self.status = status

    def matches(self, review: DesignReview) -> bool:
        return review.status == self.status


class AndSelector(ReviewSelector):
    """
    Composite selector that matches a review only if all child selectors match.
    """

    def __init__(self, selectors: list[ReviewSelector]):
        self.selectors = selectors

    def matches(self, review: DesignReview) -> bool:
        return all(s.matches(review) for s in self.selectors)


class OrSelector(ReviewSelector):
    """
    Composite selector that matches a review if any child selector matches.
    """

    def __init__(self, selectors: list[ReviewSelector]):
        self.selectors = selectors

    def matches(self, review: DesignReview) -> bool:
        return any(s.matches(review) for s in self.selectors)


def select_reviews(
    reviews: list[DesignReview], selector: ReviewSelector
) -> list[DesignReview]:
    """Return the reviews matched by ``selector``, keeping their order."""
    return [review for review in reviews if selector.matches(review)]

"""Terminal UI utilities for picking design reviews."""

from __future__ import annotations

from typing import Mapping

import questionary

from dreview.cli.common.output import out
from dreview.core.reviews import Candidate, DesignReview

_MAX_CANDIDATE_WIDTH = 32
_MAX_PROBLEM_WIDTH = 64


def _truncate(text: str, max_len: int) -> str:
    """Return text capped at max_len characters using an ASCII ellipsis."""
    if max_len <= 3 or len(text) <= max_len:
        return text[:max_len]
    return f"{text[: max_len - 3]}..."


def _candidate_name(
    review: DesignReview, candidates: Mapping[int, Candidate] | None
) -> str:
    candidate = (
        candidates.get(review.candidate_id)
        if candidates and review.candidate_id is not None
        else None
    )
    name = candidate.name if candidate else f"Candidate {review.candidate_id}"
    return _truncate(name, _MAX_CANDIDATE_WIDTH)


def _review_choice_title(
    review: DesignReview,
    candidates: Mapping[int, Candidate] | None,
    *,
    name_width: int,
) -> str:
    """Format one review as `<candidate>  <problem>  (id: <id>, <status>)`."""
    name = _candidate_name(review, candidates)
    problem = _truncate(review.problem_description, _MAX_PROBLEM_WIDTH)
    status = review.status or "unknown"
    return f"{name.ljust(name_width)}  {problem}  (id: {review.id}, {status})"


def select_review(
    reviews: list[DesignReview],
    candidates: Mapping[int, Candidate] | None = None,
) -> DesignReview | None:
    """Display a single-choice prompt to pick one review.

    Args:
        reviews: Reviews to choose from.
        candidates: Candidate lookup used to show names.

    Returns:
        The selected review, or None if nothing was selected.
    """
    name_width = max((len(_candidate_name(r, candidates)) for r in reviews), default=0)

    choices = [
        questionary.Choice(
            title=_review_choice_title(review, candidates, name_width=name_width),
            value=review,
        )
        for review in reviews
    ]
    return out.select_one("Select a design review:", choices)

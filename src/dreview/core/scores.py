"""Score normalisation and dashboard statistics.

Evaluation scores reach the dashboard on two different scales: older
evaluations are reported out of 10, newer ones out of 5. Everything the
dashboard displays or aggregates goes through ``normalize_score`` first so
that every number shown is on the canonical 0-5 scale.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Mapping

from dreview.core.reviews import Candidate, DesignReview

MAX_SCORE = 5.0

_COMPLETED_STATUSES = frozenset({"Completed", "Finalized"})
_PENDING_STATUSES = frozenset({"Pending", "In Progress"})


def normalize_score(raw: float | None) -> float:
    """
    Map a raw score of unknown scale onto the canonical 0-5 scale.

    Values above 5 are assumed to be out of 10 and are halved (capped at 5).
    Anything else is returned unchanged. ``None`` maps to 0; callers that
    need to tell "no score yet" from a real zero must check for ``None``
    before calling.

    The threshold is strict: 5 stays 5 while 5.1 becomes 2.55.
    """
    if raw is None:
        return 0.0
    if raw > MAX_SCORE:
        return min(MAX_SCORE, raw / 2)
    return raw


def review_score_out_of_five(review: DesignReview) -> float | None:
    """
    Return the canonical score of a review, or None if it has no score.

    The newest evaluation record wins over the score stored on the review.
    """
    raw = review.scores[0].overall_score if review.scores else review.overall_score
    if raw is None:
        return None
    return normalize_score(raw)


def score_rating(score: float) -> str:
    """Return the human rating label for a canonical score."""
    if score >= 4:
        return "Excellent"
    if score >= 3:
        return "Good"
    if score >= 2:
        return "Average"
    return "Needs Improvement"


def score_band(score: float) -> str:
    """Return the colour band ("high", "mid" or "low") of a canonical score."""
    if score >= 4:
        return "high"
    if score >= 3:
        return "mid"
    return "low"


@dataclass(frozen=True)
class DashboardSummary:
    """
    Aggregate figures shown at the top of the dashboard.

    Attributes:
        total: Number of reviews.
        completed: Reviews with status Completed or Finalized.
        pending: Reviews with status Pending or In Progress.
        average_score: Mean canonical score over scored reviews (0 if none).
    """

    total: int
    completed: int
    pending: int
    average_score: float


def summarize_reviews(reviews: Iterable[DesignReview]) -> DashboardSummary:
    """Compute the dashboard summary for a collection of reviews."""
    reviews = list(reviews)
    scores = [
        s for s in (review_score_out_of_five(r) for r in reviews) if s is not None
    ]
    return DashboardSummary(
        total=len(reviews),
        completed=sum(1 for r in reviews if r.status in _COMPLETED_STATUSES),
        pending=sum(1 for r in reviews if r.status in _PENDING_STATUSES),
        average_score=sum(scores) / len(scores) if scores else 0.0,
    )


def export_reviews(
    reviews: Iterable[DesignReview],
    candidates: Mapping[int, Candidate] | None = None,
) -> list[dict[str, Any]]:
    """
    Build the JSON export rows for a set of reviews.

    Args:
        reviews: Reviews to export.
        candidates: Optional candidate lookup keyed by candidate id.

    Returns:
        One JSON-serialisable dict per review, using the API's key names.
    """
    candidates = candidates or {}
    rows: list[dict[str, Any]] = []
    for review in reviews:
        candidate = (
            candidates.get(review.candidate_id)
            if review.candidate_id is not None
            else None
        )
        rows.append(
            {
                "id": review.id,
                "candidateId": review.candidate_id,
                "candidateName": candidate.name if candidate else None,
                "candidateDesignation": candidate.designation if candidate else None,
                "problemDescription": review.problem_description,
                "proposedArchitecture": review.proposed_architecture,
                "designTradeoffs": review.design_tradeoffs,
                "scalibilty": review.scalability,
                "securityMeasures": review.security_measures,
                "maintainability": review.maintainability,
                "status": review.status,
                "submissionDate": review.submission_date,
                "overallScore": review.overall_score,
                "scoreOutOfFive": review_score_out_of_five(review),
            }
        )
    return rows

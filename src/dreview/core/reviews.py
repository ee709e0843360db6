"""Core design review domain models.

This module defines the records the review API hands back (candidates,
design reviews, probing questions and evaluation scores). Every record is
an immutable dataclass built from a raw JSON payload through
``from_payload``. The payload parsing is deliberately forgiving: the remote
API omits keys freely and occasionally changes shape, and a missing field
must never crash a poller.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Protocol

from dreview.core.probes import JobId, ProbeResult


def _as_float(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _as_int(value: Any) -> int | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


@dataclass(frozen=True)
class Candidate:
    """
    Represents a candidate who submitted one or more design reviews.

    Attributes:
        id: Unique identifier of the candidate (None for unsaved records).
        name: Display name of the candidate.
        designation: Job title or role of the candidate.
    """

    id: int | None
    name: str
    designation: str = ""

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> Candidate:
        return cls(
            id=_as_int(payload.get("id")),
            name=str(payload.get("name") or ""),
            designation=str(payload.get("designation") or ""),
        )


@dataclass(frozen=True)
class Question:
    """
    A probing question generated for a design review.

    Attributes:
        id: Identifier of the question.
        question: Question text.
        difficulty: Difficulty rating on a 0-10 scale.
        answer: Candidate answer, or None while unanswered.
    """

    id: int | None
    question: str
    difficulty: int = 0
    answer: str | None = None

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> Question:
        answer = payload.get("answer")
        return cls(
            id=_as_int(payload.get("id")),
            question=str(payload.get("question") or ""),
            difficulty=_as_int(payload.get("difficulty")) or 0,
            answer=None if answer is None else str(answer),
        )


@dataclass(frozen=True)
class EvaluationScore:
    """
    Evaluation result for a design review.

    Sub-scores and the overall score are raw values as reported by the
    API; their scale is not guaranteed (see ``dreview.core.scores``).
    """

    overall_score: float | None
    technical_depth: float | None = None
    system_design: float | None = None
    tradeoff: float | None = None
    ownership: float | None = None
    feedback_summary: str = ""
    status: str | None = None
    reviewed_on: str | None = None

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> EvaluationScore:
        status = payload.get("status")
        reviewed_on = payload.get("reviewedOn")
        return cls(
            overall_score=_as_float(payload.get("overallscore")),
            technical_depth=_as_float(payload.get("technicalDepth")),
            system_design=_as_float(payload.get("systemDesign")),
            tradeoff=_as_float(payload.get("tradeoff")),
            ownership=_as_float(payload.get("ownership")),
            feedback_summary=str(payload.get("feedbackSummary") or ""),
            status=None if status is None else str(status),
            reviewed_on=None if reviewed_on is None else str(reviewed_on),
        )

    def sub_scores(self) -> dict[str, float | None]:
        """Return the four named sub-scores keyed by display label."""
        return {
            "Technical depth": self.technical_depth,
            "System design": self.system_design,
            "Trade-offs": self.tradeoff,
            "Ownership": self.ownership,
        }


@dataclass(frozen=True)
class DesignReview:
    """
    A design submission tracked by the dashboard.

    Attributes:
        id: Identifier of the design review (the polling job identifier).
        candidate_id: Identifier of the submitting candidate.
        problem_description: Free-text problem statement.
        proposed_architecture: Architecture the candidate proposed.
        design_tradeoffs: Trade-offs discussed by the candidate.
        scalability: Scalability notes (sent by the API as ``scalibilty``).
        security_measures: Security measures described by the candidate.
        maintainability: Maintainability notes.
        status: Remote workflow status (e.g. "Pending", "Questions Generated").
        submission_date: Submission timestamp as reported by the API.
        overall_score: Raw overall score stored on the review itself.
        scores: Evaluation score records, newest first.
        questions: Probing questions attached to the review.
    """

    id: int | None
    candidate_id: int | None
    problem_description: str = ""
    proposed_architecture: str = ""
    design_tradeoffs: str = ""
    scalability: str = ""
    security_measures: str = ""
    maintainability: str = ""
    status: str | None = None
    submission_date: str | None = None
    overall_score: float | None = None
    scores: tuple[EvaluationScore, ...] = field(default_factory=tuple)
    questions: tuple[Question, ...] = field(default_factory=tuple)

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> DesignReview:
        status = payload.get("status")
        submitted = payload.get("submissionDate")
        return cls(
            id=_as_int(payload.get("id")),
            candidate_id=_as_int(payload.get("candidate")),
            problem_description=str(payload.get("problemDescription") or ""),
            proposed_architecture=str(payload.get("proposedArchitecture") or ""),
            design_tradeoffs=str(payload.get("designTradeoffs") or ""),
            # the API spells this field "scalibilty"
            scalability=str(payload.get("scalibilty") or ""),
            security_measures=str(payload.get("securityMeasures") or ""),
            maintainability=str(payload.get("maintainability") or ""),
            status=None if status is None else str(status),
            submission_date=None if submitted is None else str(submitted),
            overall_score=_as_float(payload.get("overallScore")),
            scores=tuple(
                EvaluationScore.from_payload(s)
                for s in payload.get("scores") or []
                if isinstance(s, Mapping)
            ),
            questions=tuple(
                Question.from_payload(q)
                for q in payload.get("probing_questions") or []
                if isinstance(q, Mapping)
            ),
        )


def extract_questions(payload: Any) -> list[Mapping[str, Any]]:
    """
    Return the question records contained in a questions payload.

    The endpoint answers with ``{"questions": [...]}``; a bare list is
    accepted as well. Any other shape counts as "no questions yet".
    """
    if isinstance(payload, Mapping):
        payload = payload.get("questions")
    if not isinstance(payload, list):
        return []
    return [q for q in payload if isinstance(q, Mapping)]


class ReviewProbes(Protocol):
    """Interface for the remote queries the pollers depend on."""

    async def probe_questions(self, review_id: JobId) -> ProbeResult:
        """Query the generated questions of a review."""
        ...

    async def probe_evaluation(self, review_id: JobId) -> ProbeResult:
        """Query the evaluation result of a review."""
        ...


class ReviewsAdapter(ReviewProbes, Protocol):
    """Interface for the dashboard-level review operations."""

    async def list_reviews(self) -> list[DesignReview]:
        """Return all design reviews."""
        ...

    async def get_review(self, review_id: JobId) -> DesignReview:
        """Return one design review with its scores and questions."""
        ...

    async def list_candidates(self) -> list[Candidate]:
        """Return all candidates."""
        ...

    async def trigger_evaluation(self, review_id: JobId) -> None:
        """Ask the backend to start evaluating a review."""
        ...

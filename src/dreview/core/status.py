"""Job states and the rules that infer them from raw probe results.

The review API never returns an explicit job object. Progress has to be
read from indirect signals: whether a sub-resource exists, whether the
question list is populated, whether a score has been recorded. The rules
in this module are the only place where that shape-sniffing happens; each
turns one ``ProbeResult`` into an ``Inference`` the polling engine can
apply without knowing anything about payloads.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Mapping

from dreview.core.probes import NotFound, ProbeResult, TransportError
from dreview.core.reviews import EvaluationScore, Question, extract_questions
from dreview.core.scores import normalize_score

_FAILED_MARKERS = frozenset({"failed", "error"})


class JobState(str, Enum):
    """
    Logical state of a background job as inferred by a poller.

    Values:
        PENDING: Nothing observable has happened yet.
        PROCESSING: The remote side has started but not finished.
        COMPLETED: The job finished successfully.
        FAILED: The remote side reported the job as failed.
    """

    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (JobState.COMPLETED, JobState.FAILED)


@dataclass(frozen=True)
class PollSnapshot:
    """
    Externally observable state of one poller.

    Attributes:
        state: Current logical job state.
        progress: Progress estimate between 0 and 100.
        message: Human-readable status line.
        aux_count: Channel specific count (e.g. number of questions).
        error: Last surfaced error, or None.
        data: Parsed payload of the last successful probe, if the channel keeps one.
        attempts: Non-terminal probes counted against the retry budget so far.
    """

    state: JobState = JobState.PENDING
    progress: int = 0
    message: str = ""
    aux_count: int | None = None
    error: str | None = None
    data: Any = None
    attempts: int = 0


@dataclass(frozen=True)
class Inference:
    """
    Result of applying an inference rule to one probe result.

    A transient inference carries only an error: the engine keeps the
    previous state, progress and message and counts the attempt.
    """

    state: JobState | None = None
    progress: int = 0
    message: str = ""
    aux_count: int | None = None
    error: str | None = None
    data: Any = None
    transient: bool = False

    @classmethod
    def transient_failure(cls, message: str) -> Inference:
        return cls(error=message, transient=True)


InferenceRule = Callable[[ProbeResult], Inference]


def _hard_failure(payload: Any) -> Inference | None:
    """Return a FAILED inference if the payload explicitly reports failure."""
    if not isinstance(payload, Mapping):
        return None
    status = payload.get("status")
    if not isinstance(status, str) or status.strip().lower() not in _FAILED_MARKERS:
        return None
    reason = payload.get("error") or payload.get("message") or "Job failed"
    return Inference(
        state=JobState.FAILED,
        progress=0,
        message=str(reason),
        error=str(reason),
        data=payload,
    )


def infer_questions_status(result: ProbeResult) -> Inference:
    """
    Infer question generation progress from a questions probe.

    404 means the submission has not been picked up yet, an empty list
    means generation is running and a populated list means it finished.
    """
    if isinstance(result, TransportError):
        return Inference.transient_failure(result.message)
    if isinstance(result, NotFound):
        return Inference(
            state=JobState.PENDING,
            progress=0,
            message="Submission received, waiting for processing...",
        )

    failed = _hard_failure(result.payload)
    if failed is not None:
        return failed

    records = extract_questions(result.payload)
    if not records:
        return Inference(
            state=JobState.PROCESSING,
            progress=50,
            message="Generating questions...",
        )

    return Inference(
        state=JobState.COMPLETED,
        progress=100,
        message=f"{len(records)} questions generated successfully",
        aux_count=len(records),
        data=tuple(Question.from_payload(q) for q in records),
    )


def infer_job_status(result: ProbeResult) -> Inference:
    """
    Infer overall job progress.

    The backend exposes no dedicated job endpoint, so this reads the same
    signal as question generation. It is kept as its own rule so the two
    channels can diverge when the endpoints do.
    """
    return infer_questions_status(result)


def _evaluation_completed(payload: Mapping[str, Any]) -> bool:
    status = payload.get("status")
    if isinstance(status, str) and status.strip().lower() == "completed":
        return True
    return payload.get("overallscore") is not None


def infer_evaluation_status(result: ProbeResult) -> Inference:
    """Infer evaluation progress from an evaluation-result probe."""
    if isinstance(result, TransportError):
        return Inference.transient_failure(result.message)
    if isinstance(result, NotFound):
        return Inference(
            state=JobState.PENDING,
            progress=0,
            message="Evaluation not available yet",
        )

    failed = _hard_failure(result.payload)
    if failed is not None:
        return failed

    payload = result.payload if isinstance(result.payload, Mapping) else {}
    if not _evaluation_completed(payload):
        return Inference(
            state=JobState.PROCESSING,
            progress=50,
            message="Evaluating responses...",
        )

    score = EvaluationScore.from_payload(payload)
    if score.overall_score is None:
        message = "Evaluation completed"
    else:
        message = f"Evaluation completed: {normalize_score(score.overall_score):.1f}/5"
    return Inference(
        state=JobState.COMPLETED,
        progress=100,
        message=message,
        data=score,
    )

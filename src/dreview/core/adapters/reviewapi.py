"""Adapter around the design review HTTP API."""

from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping

import httpx

from dreview.core.errors import ReviewApiError
from dreview.core.probes import JobId, NotFound, Ok, ProbeResult, TransportError
from dreview.core.reviews import Candidate, DesignReview, Question, extract_questions
from dreview.core.settings import Settings

logger = logging.getLogger(__name__)


class ReviewApiAdapter:
    """
    Async client for the review API.

    Probe methods (``probe_*``) never raise for remote failures: they
    report them as ``NotFound`` or ``TransportError`` so pollers can count
    them. Every other method raises ``ReviewApiError``.

    The adapter owns its ``httpx.AsyncClient`` unless one is passed in;
    use it as an async context manager (or call ``aclose``) to release it.
    """

    def __init__(
        self,
        api_url: str,
        *,
        timeout: float = 30.0,
        http_client: httpx.AsyncClient | None = None,
    ):
        self.api_url = api_url.rstrip("/")
        self._client = http_client or httpx.AsyncClient(
            timeout=timeout,
            headers={"Content-Type": "application/json"},
        )
        self._owns_client = http_client is None

    @classmethod
    def from_settings(cls, settings: Settings) -> ReviewApiAdapter:
        return cls(settings.api_url, timeout=settings.http_timeout)

    async def __aenter__(self) -> ReviewApiAdapter:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    # ------------------------------------------------------------------
    # helpers
    # ------------------------------------------------------------------
    def _url(self, path: str) -> str:
        return f"{self.api_url}{path}"

    async def _probe(self, path: str) -> ProbeResult:
        """GET ``path`` and classify the outcome without raising."""
        try:
            response = await self._client.get(self._url(path))
        except httpx.HTTPError as exc:
            logger.debug(f"GET {path} failed: {exc!r}")
            return TransportError(str(exc) or exc.__class__.__name__)

        if response.status_code == 404:
            return NotFound()
        if not response.is_success:
            return TransportError(_status_message(response))
        try:
            return Ok(response.json())
        except ValueError as exc:
            return TransportError(f"Invalid JSON from {path}: {exc}")

    async def _request(
        self,
        method: str,
        path: str,
        json: Any = None,
    ) -> Any:
        """Send a request and return the decoded body (None if empty)."""
        try:
            response = await self._client.request(method, self._url(path), json=json)
        except httpx.HTTPError as exc:
            raise ReviewApiError(f"{method} {path} failed: {exc}") from exc

        if not response.is_success:
            raise ReviewApiError(_status_message(response), response.status_code)
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            return None

    # ------------------------------------------------------------------
    # probes
    # ------------------------------------------------------------------
    async def probe_questions(self, review_id: JobId) -> ProbeResult:
        """Query the generated questions of a design review."""
        return await self._probe(f"/design-review/{review_id}/questions/")

    async def probe_evaluation(self, review_id: JobId) -> ProbeResult:
        """Query the evaluation result of a design review."""
        return await self._probe(f"/design-review/{review_id}/evaluation/")

    # ------------------------------------------------------------------
    # commands and lookups
    # ------------------------------------------------------------------
    async def trigger_evaluation(self, review_id: JobId) -> None:
        """
        Ask the backend to evaluate a design review.

        The call returns as soon as the backend accepted the request; the
        outcome is observed through ``probe_evaluation``.
        """
        await self._request("POST", f"/design-review/{review_id}/evaluate/")
        logger.info(f"Evaluation triggered for design review {review_id}")

    async def list_reviews(self) -> list[DesignReview]:
        payload = await self._request("GET", "/design-review/")
        return [DesignReview.from_payload(p) for p in _records(payload)]

    async def get_review(self, review_id: JobId) -> DesignReview:
        payload = await self._request("GET", f"/design-review/{review_id}/")
        if not isinstance(payload, Mapping):
            raise ReviewApiError(f"Unexpected payload for design review {review_id}")
        return DesignReview.from_payload(payload)

    async def list_candidates(self) -> list[Candidate]:
        payload = await self._request("GET", "/candidate/")
        return [Candidate.from_payload(p) for p in _records(payload)]

    async def get_questions(self, review_id: JobId) -> list[Question]:
        """Return the questions of a review (empty if none were generated)."""
        result = await self.probe_questions(review_id)
        if isinstance(result, TransportError):
            raise ReviewApiError(result.message)
        if isinstance(result, NotFound):
            return []
        return [Question.from_payload(q) for q in extract_questions(result.payload)]

    async def answer_questions(
        self,
        review_id: JobId,
        answers: Iterable[tuple[int, str]],
    ) -> None:
        """Submit answers as (question id, answer) pairs."""
        body = {
            "answers": [
                {"questionId": question_id, "answer": answer}
                for question_id, answer in answers
            ]
        }
        await self._request("POST", f"/design-review/{review_id}/questions/answer/", body)


def _status_message(response: httpx.Response) -> str:
    return f"HTTP {response.status_code}: {response.reason_phrase}"


def _records(payload: Any) -> list[Mapping[str, Any]]:
    if not isinstance(payload, list):
        return []
    return [p for p in payload if isinstance(p, Mapping)]

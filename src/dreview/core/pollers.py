"""Poller instances used by the dashboard.

Three channels are tracked for a submitted design review. Each is the
generic polling engine bound to one probe and one inference rule:

- job status: is the submission processed as a whole?
- questions: have the probing questions been generated?
- evaluation: has the evaluation produced a score?

The channels run independently and may disagree for a while (for example
questions completed while job status still says processing). Consumers
should read the channel that matches what they care about.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterable

from dreview.core.polling import Listener, PollHandle, PollingPolicy, start_polling
from dreview.core.probes import JobId, Probe
from dreview.core.reviews import ReviewProbes
from dreview.core.status import (
    InferenceRule,
    PollSnapshot,
    infer_evaluation_status,
    infer_job_status,
    infer_questions_status,
)


class Channel(str, Enum):
    """Names of the polling channels of a design review."""

    JOB_STATUS = "job-status"
    QUESTIONS = "questions"
    EVALUATION = "evaluation"


@dataclass(frozen=True)
class ChannelSpec:
    """
    Static wiring of one channel.

    Attributes:
        label: Human label, also used in the "<label> timed out" error.
        probe: Selects the probe from the review adapter.
        rule: Inference rule applied to every probe result.
    """

    label: str
    probe: Callable[[ReviewProbes], Probe]
    rule: InferenceRule


CHANNELS: dict[Channel, ChannelSpec] = {
    Channel.JOB_STATUS: ChannelSpec(
        label="Job status check",
        probe=lambda adapter: adapter.probe_questions,
        rule=infer_job_status,
    ),
    Channel.QUESTIONS: ChannelSpec(
        label="Questions generation status check",
        probe=lambda adapter: adapter.probe_questions,
        rule=infer_questions_status,
    ),
    Channel.EVALUATION: ChannelSpec(
        label="Evaluation polling",
        probe=lambda adapter: adapter.probe_evaluation,
        rule=infer_evaluation_status,
    ),
}


class ReviewPoller:
    """
    One channel of one design review.

    Wraps a ``PollHandle`` and adds the lifecycle the dashboard needs:
    restarting after a failure and switching to another review, both of
    which begin again from a fresh PENDING snapshot.
    """

    def __init__(
        self,
        label: str,
        probe: Probe,
        rule: InferenceRule,
        policy: PollingPolicy | None = None,
    ):
        self.label = label
        self.policy = policy or PollingPolicy()
        self._probe = probe
        self._rule = rule
        self._listeners: list[Listener] = []
        self._handle: PollHandle | None = None
        self._job_id: JobId | None = None
        self._enabled = True

    @property
    def job_id(self) -> JobId | None:
        return self._job_id

    @property
    def handle(self) -> PollHandle | None:
        return self._handle

    @property
    def snapshot(self) -> PollSnapshot:
        """Current snapshot (PENDING before the first start)."""
        if self._handle is None:
            return PollSnapshot()
        return self._handle.snapshot

    @property
    def done(self) -> bool:
        return self._handle is None or self._handle.done

    def subscribe(self, listener: Listener) -> None:
        """Register a listener; it survives restarts and retargeting."""
        self._listeners.append(listener)
        if self._handle is not None:
            self._handle.subscribe(listener)

    def start(self, job_id: JobId | None, enabled: bool = True) -> PollHandle:
        """Start polling ``job_id``, replacing any running poll."""
        self.stop()
        self._job_id = job_id
        self._enabled = enabled
        self._handle = start_polling(
            self.label,
            job_id,
            self._probe,
            self._rule,
            self.policy,
            enabled=enabled,
        )
        for listener in self._listeners:
            self._handle.subscribe(listener)
        return self._handle

    def stop(self) -> None:
        if self._handle is not None:
            self._handle.stop()

    def restart(self) -> PollHandle:
        """Manual retry: poll the same review again from scratch."""
        return self.start(self._job_id, self._enabled)

    def retarget(self, job_id: JobId | None) -> PollHandle:
        """Track another review; state is never carried over."""
        if job_id == self._job_id and self._handle is not None:
            return self._handle
        return self.start(job_id, self._enabled)

    async def wait(self) -> PollSnapshot:
        if self._handle is None:
            return PollSnapshot()
        return await self._handle.wait()


def make_poller(
    channel: Channel,
    adapter: ReviewProbes,
    policy: PollingPolicy | None = None,
) -> ReviewPoller:
    """Build the poller of ``channel`` on top of ``adapter``."""
    spec = CHANNELS[channel]
    return ReviewPoller(spec.label, spec.probe(adapter), spec.rule, policy)


def job_status_poller(
    adapter: ReviewProbes, policy: PollingPolicy | None = None
) -> ReviewPoller:
    return make_poller(Channel.JOB_STATUS, adapter, policy)


def questions_poller(
    adapter: ReviewProbes, policy: PollingPolicy | None = None
) -> ReviewPoller:
    return make_poller(Channel.QUESTIONS, adapter, policy)


def evaluation_poller(
    adapter: ReviewProbes, policy: PollingPolicy | None = None
) -> ReviewPoller:
    return make_poller(Channel.EVALUATION, adapter, policy)


def watch_review(
    adapter: ReviewProbes,
    job_id: JobId,
    policy: PollingPolicy | None = None,
    channels: Iterable[Channel] | None = None,
) -> dict[Channel, ReviewPoller]:
    """
    Start independent pollers for a review.

    Args:
        adapter: Review API adapter providing the probes.
        job_id: Design review to track.
        policy: Polling policy shared (by value) by all channels.
        channels: Channels to start; all three when omitted.

    Returns:
        The started pollers keyed by channel.
    """
    selected = list(channels) if channels is not None else list(Channel)
    pollers: dict[Channel, ReviewPoller] = {}
    for channel in selected:
        poller = make_poller(channel, adapter, policy)
        poller.start(job_id)
        pollers[channel] = poller
    return pollers

"""Generic polling engine for long-running remote jobs.

A poller repeatedly calls a probe, feeds the raw result to an inference
rule and publishes the resulting ``PollSnapshot`` until the job reaches a
terminal state, the retry budget runs out or the caller stops it.

The engine runs on asyncio. Each poller is a single task, so probes of
one poller never overlap: the next probe is scheduled ``interval`` seconds
after the previous one has been applied. Independent pollers share
nothing and may run side by side on the same loop.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, replace
from typing import Callable

from dreview.core.probes import JobId, Probe, ProbeResult, TransportError
from dreview.core.status import Inference, InferenceRule, PollSnapshot

logger = logging.getLogger(__name__)

Listener = Callable[[PollSnapshot], None]


@dataclass(frozen=True)
class PollingPolicy:
    """
    Timing configuration for a poller.

    Attributes:
        interval: Seconds to wait between the end of one probe and the next.
        max_attempts: Non-terminal probes allowed before the poller gives up.
    """

    interval: float = 5.0
    max_attempts: int = 60

    def __post_init__(self) -> None:
        if self.interval < 0:
            raise ValueError("interval must be >= 0")
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")


class PollHandle:
    """
    Control surface and published state of one running poller.

    Handles are created by ``start_polling``; callers read ``snapshot``
    and call ``stop``. The snapshot is immutable and replaced wholesale
    after every probe.
    """

    def __init__(
        self,
        channel: str,
        job_id: JobId | None,
        probe: Probe,
        rule: InferenceRule,
        policy: PollingPolicy,
    ):
        self.channel = channel
        self.job_id = job_id
        self.policy = policy
        self.retry_count = 0
        self.probe_count = 0
        self._probe = probe
        self._rule = rule
        self._snapshot = PollSnapshot()
        self._listeners: list[Listener] = []
        self._task: asyncio.Task | None = None
        self._stopped = False

    @property
    def snapshot(self) -> PollSnapshot:
        """Return the most recently published snapshot."""
        return self._snapshot

    @property
    def done(self) -> bool:
        """True once the poller will not issue any further probe."""
        return self._task is None or self._task.done()

    @property
    def stopped(self) -> bool:
        """True if the poller was cancelled through ``stop``."""
        return self._stopped

    def subscribe(self, listener: Listener) -> None:
        """Register a callback invoked with every published snapshot."""
        self._listeners.append(listener)

    def stop(self) -> None:
        """
        Cancel the poller.

        Safe to call at any time and any number of times. No probe is
        started after this returns, and the result of a probe that is
        still in flight is discarded.
        """
        self._stopped = True
        if self._task is not None and not self._task.done():
            logger.debug(f"Stopping {self.channel} poller for {self.job_id}")
            self._task.cancel()

    async def wait(self) -> PollSnapshot:
        """Wait until the poller has finished and return its final snapshot."""
        if self._task is not None:
            await asyncio.wait({self._task})
            if not self._task.cancelled():
                self._task.result()
        return self._snapshot

    def _launch(self) -> None:
        self._task = asyncio.get_running_loop().create_task(
            self._run(), name=f"poll:{self.channel}:{self.job_id}"
        )

    async def _run(self) -> None:
        logger.debug(
            f"{self.channel} poller started for {self.job_id} "
            f"(interval: {self.policy.interval}s, max attempts: {self.policy.max_attempts})"
        )
        while True:
            result = await self._probe_once()
            if self._stopped:
                return

            self._apply(self._rule(result))
            # a listener may have stopped the poller
            if self._stopped:
                return

            if self._snapshot.state.is_terminal:
                logger.info(
                    f"{self.channel} for {self.job_id} reached {self._snapshot.state.value} "
                    f"after {self.probe_count} probe(s)"
                )
                return

            if self.retry_count >= self.policy.max_attempts:
                logger.warning(
                    f"{self.channel} for {self.job_id} gave up after {self.retry_count} attempts"
                )
                self._publish(replace(self._snapshot, error=f"{self.channel} timed out"))
                return

            await asyncio.sleep(self.policy.interval)
            if self._stopped:
                return

    async def _probe_once(self) -> ProbeResult:
        self.probe_count += 1
        try:
            result = await self._probe(self.job_id)
        except Exception as e:
            logger.warning(f"{self.channel} probe for {self.job_id} raised: {e!r}")
            return TransportError(str(e) or e.__class__.__name__)
        logger.debug(f"{self.channel} probe #{self.probe_count} for {self.job_id}: {result!r}")
        return result

    def _apply(self, inference: Inference) -> None:
        if inference.transient or inference.state is None:
            self.retry_count += 1
            logger.warning(
                f"{self.channel} attempt {self.retry_count}/{self.policy.max_attempts} "
                f"for {self.job_id} failed: {inference.error}"
            )
            self._publish(
                replace(self._snapshot, error=inference.error, attempts=self.retry_count)
            )
            return

        if not inference.state.is_terminal:
            self.retry_count += 1

        self._publish(
            PollSnapshot(
                state=inference.state,
                progress=inference.progress,
                message=inference.message,
                aux_count=inference.aux_count,
                error=inference.error,
                data=inference.data,
                attempts=self.retry_count,
            )
        )

    def _publish(self, snapshot: PollSnapshot) -> None:
        self._snapshot = snapshot
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception:
                logger.exception(f"{self.channel} listener failed for {self.job_id}")


def start_polling(
    channel: str,
    job_id: JobId | None,
    probe: Probe,
    rule: InferenceRule,
    policy: PollingPolicy | None = None,
    *,
    enabled: bool = True,
    on_update: Listener | None = None,
) -> PollHandle:
    """
    Start polling one channel for one job.

    Must be called from within a running event loop. The first probe runs
    right away; later probes follow ``policy.interval`` seconds after the
    previous one completed.

    Args:
        channel: Human label of the channel, used in logs and the timeout error.
        job_id: Identifier of the job to track. Falsy values disable polling.
        probe: Async callable performing one remote query.
        rule: Inference rule turning a probe result into a job state.
        policy: Interval and retry budget (defaults to 5s / 60 attempts).
        enabled: When False the poller does nothing and stays PENDING.
        on_update: Optional listener called with every published snapshot.

    Returns:
        The PollHandle controlling the new poller.
    """
    handle = PollHandle(channel, job_id, probe, rule, policy or PollingPolicy())
    if on_update is not None:
        handle.subscribe(on_update)

    if not enabled or not job_id:
        logger.debug(f"{channel} poller not started (enabled={enabled}, job_id={job_id!r})")
        return handle

    handle._launch()
    return handle


def stop_polling(handle: PollHandle) -> None:
    """Stop a poller; see ``PollHandle.stop``."""
    handle.stop()

import asyncio

import pytest

from dreview.core.polling import PollingPolicy
from dreview.core.pollers import (
    CHANNELS,
    Channel,
    evaluation_poller,
    job_status_poller,
    questions_poller,
    watch_review,
)
from dreview.core.probes import NotFound, Ok
from dreview.core.reviews import EvaluationScore
from dreview.core.status import JobState

FAST = PollingPolicy(interval=0, max_attempts=3)
QUESTIONS = Ok({"questions": [{"id": 1, "question": "q", "difficulty": 3}]})


def test_channels_have_distinct_labels():
    labels = [spec.label for spec in CHANNELS.values()]

    assert len(set(labels)) == len(labels) == 3


def test_snapshot_before_start_is_pending(fake_probes):
    poller = questions_poller(fake_probes(), FAST)

    assert poller.snapshot.state == JobState.PENDING
    assert poller.done


@pytest.mark.asyncio
async def test_watch_review_runs_all_channels(fake_probes):
    adapter = fake_probes(
        questions=[QUESTIONS, QUESTIONS],
        evaluation=[NotFound(), Ok({"overallscore": 9, "feedbackSummary": "ok"})],
    )

    pollers = watch_review(adapter, 42, FAST)
    results = {c: await p.wait() for c, p in pollers.items()}

    assert set(results) == set(Channel)
    assert all(s.state == JobState.COMPLETED for s in results.values())
    assert results[Channel.QUESTIONS].aux_count == 1
    assert isinstance(results[Channel.EVALUATION].data, EvaluationScore)
    # job status and questions each probe the questions endpoint on their own
    assert adapter.questions.calls == [42, 42]
    assert adapter.evaluation.calls == [42, 42]


@pytest.mark.asyncio
async def test_channels_may_disagree(fake_probes):
    adapter = fake_probes(evaluation=[], default=NotFound())
    adapter.questions.results = [QUESTIONS]

    pollers = watch_review(adapter, 1, FAST, channels=[Channel.QUESTIONS, Channel.EVALUATION])
    await asyncio.gather(*(p.wait() for p in pollers.values()))

    assert pollers[Channel.QUESTIONS].snapshot.state == JobState.COMPLETED
    assert pollers[Channel.EVALUATION].snapshot.state == JobState.PENDING
    assert pollers[Channel.EVALUATION].snapshot.error == "Evaluation polling timed out"
    assert Channel.JOB_STATUS not in pollers


@pytest.mark.asyncio
async def test_job_status_timeout_uses_channel_label(fake_probes):
    poller = job_status_poller(fake_probes(), FAST)

    poller.start(3)
    snapshot = await poller.wait()

    assert snapshot.error == "Job status check timed out"


@pytest.mark.asyncio
async def test_restart_begins_from_fresh_pending_snapshot(fake_probes):
    adapter = fake_probes()
    poller = questions_poller(adapter, FAST)

    poller.start(5)
    timed_out = await poller.wait()
    assert timed_out.error == "Questions generation status check timed out"

    adapter.questions.results = [QUESTIONS]
    seen = []
    poller.subscribe(seen.append)
    poller.restart()

    assert poller.snapshot.error is None
    assert poller.snapshot.state == JobState.PENDING
    snapshot = await poller.wait()
    assert snapshot.state == JobState.COMPLETED
    assert seen[-1] is snapshot
    assert adapter.questions.calls == [5, 5, 5, 5]


@pytest.mark.asyncio
async def test_retarget_switches_review_and_resets_state(fake_probes):
    adapter = fake_probes(evaluation=[Ok({"overallscore": 4})])
    poller = evaluation_poller(adapter, PollingPolicy(interval=10, max_attempts=3))

    poller.start(1)
    first = await poller.wait()
    assert first.state == JobState.COMPLETED

    poller.retarget(2)
    assert poller.job_id == 2
    assert poller.snapshot.state == JobState.PENDING
    poller.stop()
    await poller.wait()

    assert adapter.evaluation.calls[0] == 1
    assert set(adapter.evaluation.calls) <= {1, 2}


@pytest.mark.asyncio
async def test_start_disabled_does_not_probe(fake_probes):
    adapter = fake_probes()
    poller = questions_poller(adapter, FAST)

    poller.start(8, enabled=False)
    snapshot = await poller.wait()

    assert snapshot.state == JobState.PENDING
    assert adapter.questions.calls == []

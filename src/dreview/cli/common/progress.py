"""Live progress display for running pollers."""

from __future__ import annotations

import asyncio
from typing import Mapping

from rich.console import Group
from rich.live import Live
from rich.progress import (
    BarColumn,
    Progress,
    SpinnerColumn,
    TaskProgressColumn,
    TextColumn,
    TimeElapsedColumn,
)

from dreview.cli.common.output import console
from dreview.core.pollers import ReviewPoller
from dreview.core.status import JobState, PollSnapshot

_MAX_MESSAGE_WIDTH = 56
_REFRESH_SECONDS = 0.2


def _truncate(text: str, max_len: int) -> str:
    """Return text capped at max_len characters using an ASCII ellipsis."""
    if max_len <= 3 or len(text) <= max_len:
        return text[:max_len]
    return f"{text[: max_len - 3]}..."


def _style_for(state: JobState) -> str:
    if state == JobState.COMPLETED:
        return "green"
    if state == JobState.FAILED:
        return "red"
    if state == JobState.PROCESSING:
        return "cyan"
    return "yellow"


def _status_label(snapshot: PollSnapshot) -> str:
    """
    Render the status line of one channel.

    The message is shown for normal progress; a surfaced error replaces
    it so timeouts and transient failures stay visible.
    """
    if snapshot.error:
        return _truncate(f"! {snapshot.error}", _MAX_MESSAGE_WIDTH)
    return _truncate(snapshot.message or "Waiting to start...", _MAX_MESSAGE_WIDTH)


async def watch_with_progress(
    pollers: Mapping[str, ReviewPoller],
) -> dict[str, PollSnapshot]:
    """
    Render running pollers until all of them are done. Shows:
      - an overall bar (channels finished + failures)
      - one row per channel with its state, progress and message

    Returns the final snapshot of every channel.
    """
    overall = Progress(
        TextColumn("[bold]Overall[/]"),
        BarColumn(),
        TaskProgressColumn(),
        TextColumn("failures=[bold red]{task.fields[failures]}[/]"),
        TimeElapsedColumn(),
        console=console,
    )

    per_channel = Progress(
        SpinnerColumn(),
        TextColumn("[bold]{task.fields[channel]:<12}[/]"),
        BarColumn(bar_width=20),
        TextColumn(
            "[{task.fields[style]}]{task.fields[state]:<10}[/{task.fields[style]}]"
        ),
        TextColumn("{task.fields[status]}"),
        TimeElapsedColumn(),
        console=console,
    )

    overall_task_id = overall.add_task("overall", total=max(len(pollers), 1), failures=0)
    task_ids = {
        name: per_channel.add_task(
            "",
            total=100,
            channel=name,
            state=JobState.PENDING.value,
            style=_style_for(JobState.PENDING),
            status=_status_label(poller.snapshot),
        )
        for name, poller in pollers.items()
    }

    finished: set[str] = set()
    failures = 0

    with Live(Group(overall, per_channel), console=console, refresh_per_second=10):
        while True:
            for name, poller in pollers.items():
                snap = poller.snapshot
                per_channel.update(
                    task_ids[name],
                    completed=snap.progress,
                    state=snap.state.value,
                    style=_style_for(snap.state),
                    status=_status_label(snap),
                )

                if name in finished or not poller.done:
                    continue

                finished.add(name)
                if snap.state != JobState.COMPLETED:
                    failures += 1
                    overall.update(overall_task_id, failures=failures)
                # freeze the elapsed timer of this row
                per_channel.stop_task(task_ids[name])
                overall.advance(overall_task_id, 1)

            if len(finished) == len(pollers):
                break
            await asyncio.sleep(_REFRESH_SECONDS)

    return {name: poller.snapshot for name, poller in pollers.items()}

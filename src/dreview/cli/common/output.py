"""Output formatting utilities for the CLI."""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterable, Mapping

import questionary
from rich.console import Console
from rich.table import Table
from rich.theme import Theme

from dreview.cli.common.tui_style import (
    QUESTIONARY_STYLE_CONFIRM,
    QUESTIONARY_STYLE_SELECT,
)
from dreview.core.reviews import Candidate, DesignReview, EvaluationScore
from dreview.core.scores import (
    DashboardSummary,
    normalize_score,
    review_score_out_of_five,
    score_band,
    score_rating,
)
from dreview.core.status import JobState, PollSnapshot

_THEME = Theme(
    {
        "ok": "bold green",
        "warn": "yellow",
        "err": "bold red",
        "title": "bold cyan",
        "meta": "dim",
        "score.high": "green",
        "score.mid": "yellow",
        "score.low": "red",
    }
)

console = Console(theme=_THEME)

_STATE_STYLE = {
    JobState.COMPLETED: "ok",
    JobState.FAILED: "err",
    JobState.PROCESSING: "title",
    JobState.PENDING: "warn",
}


def format_score(score: float | None) -> str:
    """Render a canonical score as Rich markup coloured by band."""
    if score is None:
        return "[meta]N/A[/]"
    style = f"score.{score_band(score)}"
    return f"[{style}]{score:.1f}/5[/{style}]"


def format_state(state: JobState) -> str:
    style = _STATE_STYLE.get(state, "meta")
    return f"[{style}]{state.value.upper()}[/{style}]"


_PROMPT_MARK = "✦"
_PROMPT_POINTER = "❯"


@dataclass(frozen=True)
class Out:
    """Console facade used by every review command."""

    def _ask(self, prompt_fn, message: str, **kwargs):
        """Run a questionary prompt with the DREVIEW prefix."""
        return prompt_fn(f"[DREVIEW] {message}", **kwargs).ask()

    def _line(self, style: str, mark: str, msg: str) -> None:
        console.print(f"[{style}]{mark}[/] {msg}")

    def info(self, msg: str) -> None:
        self._line("title", "›", msg)

    def success(self, msg: str) -> None:
        self._line("ok", "✓", msg)

    def warn(self, msg: str) -> None:
        self._line("warn", "⚠", msg)

    def error(self, msg: str) -> None:
        self._line("err", "✗", msg)

    @contextmanager
    def status(self, msg: str):
        """Spinner shown while the review API is being queried."""
        with console.status(msg, spinner="dots"):
            yield

    def select_one(self, message: str, choices: list[questionary.Choice]):
        """
        Single-choice picker.

        Returns:
            The value of the picked choice, or None if there was nothing to
            pick or the prompt was cancelled.
        """
        if not choices:
            return None
        return self._ask(
            questionary.select,
            message,
            choices=choices,
            style=QUESTIONARY_STYLE_SELECT,
            qmark=_PROMPT_MARK,
            instruction="Use ↑/↓ then Enter",
            pointer=_PROMPT_POINTER,
        )

    def confirm(self, message: str, *, default: bool = False) -> bool:
        """Yes/no question; a cancelled prompt counts as "no"."""
        console.print("[meta]Answer y/n then Enter[/]")
        answer = self._ask(
            questionary.confirm,
            message,
            default=default,
            style=QUESTIONARY_STYLE_CONFIRM,
            qmark=_PROMPT_MARK,
            auto_enter=False,
        )
        return bool(answer)

    def reviews_table(
        self,
        reviews: Iterable[DesignReview],
        candidates: Mapping[int, Candidate] | None = None,
        title: str = "Design reviews",
    ) -> None:
        """Render reviews with their candidate, status and canonical score."""
        candidates = candidates or {}
        t = Table(title=title, show_lines=False)
        t.add_column("Review ID", style="ok", no_wrap=True)
        t.add_column("Candidate")
        t.add_column("Problem", overflow="ellipsis", max_width=48)
        t.add_column("Status", style="meta")
        t.add_column("Score", justify="right")

        for r in reviews:
            candidate = candidates.get(r.candidate_id) if r.candidate_id is not None else None
            name = candidate.name if candidate else f"Candidate {r.candidate_id}"
            t.add_row(
                str(r.id),
                name,
                r.problem_description,
                r.status or "",
                format_score(review_score_out_of_five(r)),
            )

        console.print(t)

    def summary(self, summary: DashboardSummary) -> None:
        """Print the dashboard summary figures."""
        average = summary.average_score if summary.total else None
        console.print(
            f"[meta]Total[/] {summary.total}  "
            f"[meta]Completed[/] {summary.completed}  "
            f"[meta]Pending[/] {summary.pending}  "
            f"[meta]Average score[/] {format_score(average)}"
        )

    def snapshots_table(
        self, snapshots: Mapping[str, PollSnapshot], title: str = "Polling status"
    ) -> None:
        """Render the final snapshot of each polling channel."""
        t = Table(title=title, show_lines=False)
        t.add_column("Channel", style="title", no_wrap=True)
        t.add_column("State")
        t.add_column("Progress", justify="right")
        t.add_column("Message")
        t.add_column("Error", style="err")

        for channel, snap in snapshots.items():
            t.add_row(
                channel,
                format_state(snap.state),
                f"{snap.progress}%",
                snap.message,
                snap.error or "",
            )

        console.print(t)

    def scorecard(self, score: EvaluationScore, title: str = "Evaluation") -> None:
        """Render an evaluation scorecard on the canonical scale."""
        overall = (
            normalize_score(score.overall_score)
            if score.overall_score is not None
            else None
        )
        t = Table(title=title, show_lines=False)
        t.add_column("Dimension", style="meta")
        t.add_column("Score", justify="right")

        t.add_row("[bold]Overall[/]", format_score(overall))
        for label, raw in score.sub_scores().items():
            t.add_row(label, format_score(None if raw is None else normalize_score(raw)))

        console.print(t)
        if overall is not None:
            console.print(f"[meta]Rating[/]: {score_rating(overall)}")
        if score.feedback_summary:
            console.print("[title]Feedback[/]")
            console.print(score.feedback_summary)


out = Out()

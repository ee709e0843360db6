"""Commands for tracking and evaluating design reviews."""

import asyncio
import json
from pathlib import Path

import typer

from dreview.cli.common.context import ReviewsAppContext, build_reviews_context
from dreview.cli.common.exits import die, exit_from_exc, ok_exit, warn_exit
from dreview.cli.common.logs import setup_logging
from dreview.cli.common.options import (
    ApiUrlOpt,
    ChannelOpt,
    ConfirmOpt,
    IntervalOpt,
    MaxAttemptsOpt,
    OutputOpt,
    SearchOpt,
    StatusOpt,
    VerboseOpt,
    WatchOpt,
)
from dreview.cli.common.output import out
from dreview.cli.common.progress import watch_with_progress
from dreview.cli.common.selector_builder import build_selector
from dreview.cli.tui import select_review
from dreview.core.errors import ReviewApiError
from dreview.core.pollers import Channel, evaluation_poller, watch_review
from dreview.core.reviews import (
    Candidate,
    DesignReview,
    EvaluationScore,
    ReviewsAdapter,
)
from dreview.core.scores import export_reviews, summarize_reviews
from dreview.core.selectors import select_reviews
from dreview.core.status import JobState, PollSnapshot

_SETTLED_STATUSES = frozenset({"Completed", "Reviewed", "Finalized"})

app = typer.Typer(
    help="Work with design reviews",
    no_args_is_help=False,
    invoke_without_command=True,
)


@app.callback()
def _init(
    ctx: typer.Context,
    api_url: str | None = ApiUrlOpt,
    interval: float | None = IntervalOpt,
    max_attempts: int | None = MaxAttemptsOpt,
    verbose: bool = VerboseOpt,
):
    """Initialize the review API context."""
    setup_logging(verbose)
    ctx.obj = build_reviews_context(
        api_url,
        interval=interval,
        max_attempts=max_attempts,
    )
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit(0)


async def _load_dashboard(
    appctx: ReviewsAppContext,
) -> tuple[list[DesignReview], dict[int, Candidate]]:
    async with appctx.open_adapter() as adapter:
        reviews, candidates = await asyncio.gather(
            adapter.list_reviews(),
            adapter.list_candidates(),
        )
    return reviews, {c.id: c for c in candidates if c.id is not None}


def _load_filtered(
    appctx: ReviewsAppContext,
    search: str | None,
    status: list[str],
) -> tuple[list[DesignReview], list[DesignReview], dict[int, Candidate]]:
    """Load reviews and candidates and apply the dashboard filters."""
    try:
        build_selector(search=search, statuses=status)
    except ValueError as e:
        die(str(e), code=1)

    try:
        with out.status("Loading design reviews..."):
            reviews, candidates = asyncio.run(_load_dashboard(appctx))
    except ReviewApiError as exc:
        exit_from_exc(exc, message=f"Could not load design reviews: {exc}")

    selector = build_selector(search=search, statuses=status, candidates=candidates)
    return reviews, select_reviews(reviews, selector), candidates


@app.command("list")
def list_reviews(
    ctx: typer.Context,
    search: str | None = SearchOpt,
    status: list[str] = StatusOpt,
):
    """
    List design reviews with their canonical (0-5) score.
    """
    appctx: ReviewsAppContext = ctx.obj
    reviews, matched, candidates = _load_filtered(appctx, search, status)

    if not matched:
        warn_exit("No design reviews found", code=0)

    out.reviews_table(matched, candidates, title="Design reviews")
    out.summary(summarize_reviews(reviews))


@app.command()
def export(
    ctx: typer.Context,
    output: Path | None = OutputOpt,
    search: str | None = SearchOpt,
    status: list[str] = StatusOpt,
):
    """
    Export design reviews as JSON.
    """
    appctx: ReviewsAppContext = ctx.obj
    _, matched, candidates = _load_filtered(appctx, search, status)

    payload = json.dumps(export_reviews(matched, candidates), indent=2)
    if output is None:
        typer.echo(payload)
        return

    output.write_text(payload + "\n")
    out.success(f"Exported {len(matched)} review(s) to {output}")


async def _fetch_review(
    adapter: ReviewsAdapter, review_id: int
) -> tuple[DesignReview, dict[int, Candidate]]:
    review, candidates = await asyncio.gather(
        adapter.get_review(review_id),
        adapter.list_candidates(),
    )
    return review, {c.id: c for c in candidates if c.id is not None}


async def _load_review(
    appctx: ReviewsAppContext, review_id: int
) -> tuple[DesignReview, dict[int, Candidate]]:
    async with appctx.open_adapter() as adapter:
        return await _fetch_review(adapter, review_id)


@app.command()
def show(
    ctx: typer.Context,
    review_id: int = typer.Argument(..., help="Design review ID"),
):
    """
    Show one design review and its latest evaluation scorecard.
    """
    appctx: ReviewsAppContext = ctx.obj

    try:
        with out.status(f"Loading design review {review_id}..."):
            review, candidates = asyncio.run(_load_review(appctx, review_id))
    except ReviewApiError as exc:
        if exc.status_code == 404:
            die(f"Design review {review_id} not found", code=1)
        exit_from_exc(exc, message=f"Could not load design review {review_id}: {exc}")

    out.reviews_table([review], candidates, title=f"Design review {review_id}")

    if not review.scores:
        warn_exit(f"Design review {review_id} has not been evaluated yet", code=0)

    out.scorecard(review.scores[0], title=f"Evaluation of design review {review_id}")


def _pick_review(appctx: ReviewsAppContext) -> int:
    """Let the user choose one of the reviews that are still in flight."""
    _, open_reviews, candidates = _load_filtered(appctx, None, [])
    open_reviews = [
        r for r in open_reviews if r.id is not None and r.status not in _SETTLED_STATUSES
    ]
    if not open_reviews:
        warn_exit("No design reviews in progress", code=0)

    picked = select_review(open_reviews, candidates)
    if picked is None:
        warn_exit("No design review selected", code=0)
    return picked.id


async def _watch(
    appctx: ReviewsAppContext,
    review_id: int,
    channels: list[Channel],
) -> dict[str, PollSnapshot]:
    async with appctx.open_adapter() as adapter:
        pollers = watch_review(adapter, review_id, appctx.settings.policy, channels)
        try:
            snapshots = await watch_with_progress(
                {channel.value: poller for channel, poller in pollers.items()}
            )
            for poller in pollers.values():
                await poller.wait()
        finally:
            for poller in pollers.values():
                poller.stop()
    return snapshots


@app.command()
def watch(
    ctx: typer.Context,
    review_id: int | None = typer.Argument(None, help="Design review ID"),
    channel: list[str] = ChannelOpt,
):
    """
    Poll question generation, job status and evaluation of a review.
    """
    appctx: ReviewsAppContext = ctx.obj

    try:
        channels = [Channel(c) for c in channel] or list(Channel)
    except ValueError:
        die(
            f"Unknown channel in {channel} "
            f"(expected: {', '.join(c.value for c in Channel)})",
            code=1,
        )

    if review_id is None:
        review_id = _pick_review(appctx)

    out.info(f"Watching design review {review_id}")
    snapshots = asyncio.run(_watch(appctx, review_id, channels))

    out.snapshots_table(snapshots, title=f"Design review {review_id}")

    failed = any(
        snap.state != JobState.COMPLETED or snap.error for snap in snapshots.values()
    )
    if failed:
        raise typer.Exit(1)


async def _evaluate(
    appctx: ReviewsAppContext,
    review_id: int,
    wait: bool,
) -> PollSnapshot | None:
    async with appctx.open_adapter() as adapter:
        await adapter.trigger_evaluation(review_id)
        if not wait:
            return None

        poller = evaluation_poller(adapter, appctx.settings.policy)
        poller.start(review_id)
        try:
            await watch_with_progress({Channel.EVALUATION.value: poller})
            return await poller.wait()
        finally:
            poller.stop()


@app.command()
def evaluate(
    ctx: typer.Context,
    review_id: int = typer.Argument(..., help="Design review ID"),
    confirm: bool = ConfirmOpt,
    watch: bool = WatchOpt,
):
    """
    Trigger the AI evaluation of a review and show its scorecard.
    """
    appctx: ReviewsAppContext = ctx.obj

    if confirm and not out.confirm(f"Start the evaluation of design review {review_id}?"):
        ok_exit("Cancelled")

    try:
        snapshot = asyncio.run(_evaluate(appctx, review_id, watch))
    except ReviewApiError as exc:
        exit_from_exc(exc, message=f"Could not trigger evaluation: {exc}")

    if snapshot is None:
        out.success(f"Evaluation triggered for design review {review_id}")
        return

    if snapshot.state == JobState.COMPLETED and isinstance(snapshot.data, EvaluationScore):
        out.scorecard(snapshot.data, title=f"Evaluation of design review {review_id}")
        return

    out.snapshots_table({Channel.EVALUATION.value: snapshot})
    raise typer.Exit(1)

"""Common CLI options for the CLI."""

import typer

ApiUrlOpt = typer.Option(
    None,
    "--api-url",
    help="Review API base URL (default: $DREVIEW_API_URL or http://localhost:8000/api)",
)

IntervalOpt = typer.Option(
    None,
    "--interval",
    "-i",
    help="Seconds between two probes (default: $DREVIEW_POLL_INTERVAL or 5)",
)

MaxAttemptsOpt = typer.Option(
    None,
    "--max-attempts",
    help="Probes without result before giving up (default: $DREVIEW_POLL_MAX_ATTEMPTS or 60)",
)

VerboseOpt = typer.Option(
    False,
    "--verbose",
    "-v",
    help="Show debug logging",
)

SearchOpt = typer.Option(
    None,
    "--search",
    "-s",
    help="Search candidate name, designation or problem description",
)

StatusOpt = typer.Option(
    [],
    "--status",
    help="Keep reviews with this status. This is reusable.",
    show_default=False,
)

ChannelOpt = typer.Option(
    [],
    "--channel",
    "-c",
    help="Channel to poll (job-status, questions, evaluation). This is reusable.",
    show_default=False,
)

ConfirmOpt = typer.Option(
    True,
    "--confirm/--no-confirm",
    help="Ask for confirmation before triggering the evaluation",
)

WatchOpt = typer.Option(
    True,
    "--watch/--no-watch",
    help="Wait until the evaluation result is available",
)

OutputOpt = typer.Option(
    None,
    "--output",
    "-o",
    help="Write the export to this file instead of stdout",
)

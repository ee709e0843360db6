"""CLI application for the design review dashboard."""

import typer

from dreview.cli.commands.reviews import app as reviews_app

app = typer.Typer(
    help="dreview - track and evaluate AI-reviewed design submissions",
    no_args_is_help=True,
)

app.add_typer(
    reviews_app,
    name="reviews",
    help="List, watch and evaluate design reviews.",
)


if __name__ == "__main__":
    app()

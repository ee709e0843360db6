"""Process exits for review commands.

Every command leaves through one of these helpers so that the final
message is always printed through ``out`` before typer exits.
"""

from typing import NoReturn

import typer

from dreview.cli.common.output import out


def ok_exit(msg: str | None = None) -> NoReturn:
    if msg:
        out.info(msg)
    raise typer.Exit(0)


def warn_exit(msg: str, code: int = 0) -> NoReturn:
    """Stop early without an error, e.g. when no review matches the filters."""
    out.warn(msg)
    raise typer.Exit(code)


def die(msg: str, code: int = 1) -> NoReturn:
    """Abort on invalid input or configuration."""
    out.error(msg)
    raise typer.Exit(code)


def exit_from_exc(exc: Exception, *, message: str, code: int = 1) -> NoReturn:
    """Abort after a review API failure, keeping ``exc`` as the cause."""
    out.error(message)
    raise typer.Exit(code) from exc

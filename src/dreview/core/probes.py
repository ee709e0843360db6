"""Raw probe results.

A probe is one remote query. Its outcome is reported as one of three
variants and is never interpreted here; turning a result into a job state
is the job of the inference rules in ``dreview.core.status``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Union

JobId = Union[int, str]


@dataclass(frozen=True)
class Ok:
    """The remote resource exists; ``payload`` is the decoded JSON body."""

    payload: Any


@dataclass(frozen=True)
class NotFound:
    """The remote resource does not exist (yet)."""


@dataclass(frozen=True)
class TransportError:
    """The query failed: network error, timeout or unexpected HTTP status."""

    message: str


ProbeResult = Union[Ok, NotFound, TransportError]

Probe = Callable[[JobId], Awaitable[ProbeResult]]

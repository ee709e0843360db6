"""Selector construction utilities.

This module translates dashboard filters (such as CLI arguments) into
concrete ReviewSelector instances. It centralizes validation and
composition logic so the rest of the application works with a single
selector abstraction.
"""

from typing import Iterable, Mapping

from dreview.core.reviews import Candidate
from dreview.core.selectors import (
    AndSelector,
    MatchAllSelector,
    OrSelector,
    ReviewSelector,
    SearchSelector,
    StatusSelector,
)

KNOWN_STATUSES = (
    "Pending",
    "Incomplete",
    "Completed",
    "Questions Generated",
    "In Progress",
    "Reviewed",
    "Finalized",
)


def build_selector(
    *,
    search: str | None,
    statuses: Iterable[str],
    candidates: Mapping[int, Candidate] | None = None,
) -> ReviewSelector:
    """
    Build a composite ReviewSelector from dashboard filters.

    Multiple statuses are combined with OR; the search term and the status
    filter are combined with AND. Without any filter every review matches.

    Args:
        search: Optional free-text search term.
        statuses: Remote statuses to keep (see KNOWN_STATUSES).
        candidates: Candidate lookup used by the search term.

    Returns:
        A ReviewSelector instance representing the composed filter.

    Raises:
        ValueError: If a status is not one of KNOWN_STATUSES.
    """
    selectors: list[ReviewSelector] = []

    if search and search.strip():
        selectors.append(SearchSelector(search.strip(), candidates))

    status_selectors: list[ReviewSelector] = []
    for status in statuses:
        if status not in KNOWN_STATUSES:
            raise ValueError(
                f"Unknown status: '{status}' (expected one of: {', '.join(KNOWN_STATUSES)})"
            )
        status_selectors.append(StatusSelector(status))

    if len(status_selectors) == 1:
        selectors.append(status_selectors[0])
    elif status_selectors:
        selectors.append(OrSelector(status_selectors))

    if not selectors:
        return MatchAllSelector()
    if len(selectors) == 1:
        return selectors[0]
    return AndSelector(selectors)

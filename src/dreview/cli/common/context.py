"""Application context management for the CLI."""

from dataclasses import dataclass

from dreview.cli.common.exits import die
from dreview.core.adapters.reviewapi import ReviewApiAdapter
from dreview.core.errors import ConfigError
from dreview.core.settings import Settings, load_settings


@dataclass
class ReviewsAppContext:
    """Application context holding the resolved review API settings."""

    settings: Settings

    def open_adapter(self) -> ReviewApiAdapter:
        """Return a new adapter; use it as an async context manager."""
        return ReviewApiAdapter.from_settings(self.settings)


def build_reviews_context(
    api_url: str | None,
    *,
    interval: float | None = None,
    max_attempts: int | None = None,
) -> ReviewsAppContext:
    """Build and return the application context for review commands.

    Args:
        api_url: Optional review API base URL overriding the environment.
        interval: Optional poll interval override, in seconds.
        max_attempts: Optional retry budget override.

    Returns:
        ReviewsAppContext: Context with the resolved settings.
    """
    try:
        settings = load_settings(
            api_url=api_url,
            poll_interval=interval,
            poll_max_attempts=max_attempts,
        )
    except ConfigError as exc:
        die(str(exc), code=1)
    return ReviewsAppContext(settings=settings)

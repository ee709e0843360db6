"""Runtime settings for the review API client and pollers.

Settings come from environment variables, with explicit arguments (CLI
flags) taking precedence. The API URL gets the same small normalisation
rules everywhere so that endpoint paths can be appended blindly.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from urllib.parse import urlparse

from dreview.core.errors import ConfigError
from dreview.core.polling import PollingPolicy

API_URL_ENV = "DREVIEW_API_URL"
POLL_INTERVAL_ENV = "DREVIEW_POLL_INTERVAL"
POLL_MAX_ATTEMPTS_ENV = "DREVIEW_POLL_MAX_ATTEMPTS"
HTTP_TIMEOUT_ENV = "DREVIEW_HTTP_TIMEOUT"

DEFAULT_API_URL = "http://localhost:8000/api"
DEFAULT_POLL_INTERVAL = 5.0
DEFAULT_POLL_MAX_ATTEMPTS = 60
DEFAULT_HTTP_TIMEOUT = 30.0


@dataclass(frozen=True)
class Settings:
    """
    Resolved runtime settings.

    Attributes:
        api_url: Base URL of the review API, without trailing slash.
        poll_interval: Seconds between two probes of a poller.
        poll_max_attempts: Retry budget of a poller.
        http_timeout: Transport timeout of a single HTTP request, in seconds.
    """

    api_url: str = DEFAULT_API_URL
    poll_interval: float = DEFAULT_POLL_INTERVAL
    poll_max_attempts: int = DEFAULT_POLL_MAX_ATTEMPTS
    http_timeout: float = DEFAULT_HTTP_TIMEOUT

    @property
    def policy(self) -> PollingPolicy:
        return PollingPolicy(
            interval=self.poll_interval,
            max_attempts=self.poll_max_attempts,
        )


def _sanitize_api_url(url: str) -> str:
    """
    Normalize and validate an API base URL.

    - Removes query strings (e.g. '?debug=1')
    - Removes trailing slashes
    - Requires a scheme and a host
    """
    url = url.strip().split("?", 1)[0].rstrip("/")
    parsed = urlparse(url)
    if not parsed.scheme or not parsed.netloc:
        raise ConfigError(f"API URL must include scheme and host: '{url}'")
    return url


def _env_float(name: str, default: float) -> float:
    """Return a non-negative float from the environment, or the default."""
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return max(float(raw), 0.0)
    except ValueError:
        return default


def _env_int(name: str, default: int) -> int:
    """Return a positive int from the environment, or the default."""
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return max(int(raw), 1)
    except ValueError:
        return default


def load_settings(
    api_url: str | None = None,
    poll_interval: float | None = None,
    poll_max_attempts: int | None = None,
) -> Settings:
    """
    Resolve settings from arguments and environment variables.

    Arguments win over environment variables, which win over defaults.

    Raises:
        ConfigError: If the API URL is malformed or a polling override is
            out of range.
    """
    url = api_url or os.getenv(API_URL_ENV) or DEFAULT_API_URL
    interval = (
        poll_interval
        if poll_interval is not None
        else _env_float(POLL_INTERVAL_ENV, DEFAULT_POLL_INTERVAL)
    )
    attempts = (
        poll_max_attempts
        if poll_max_attempts is not None
        else _env_int(POLL_MAX_ATTEMPTS_ENV, DEFAULT_POLL_MAX_ATTEMPTS)
    )
    if interval < 0:
        raise ConfigError("Poll interval must be >= 0")
    if attempts < 1:
        raise ConfigError("Max attempts must be >= 1")

    return Settings(
        api_url=_sanitize_api_url(url),
        poll_interval=interval,
        poll_max_attempts=attempts,
        http_timeout=_env_float(HTTP_TIMEOUT_ENV, DEFAULT_HTTP_TIMEOUT)
        or DEFAULT_HTTP_TIMEOUT,
    )

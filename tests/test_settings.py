import pytest

from dreview.core.errors import ConfigError
from dreview.core.polling import PollingPolicy
from dreview.core.settings import (
    API_URL_ENV,
    HTTP_TIMEOUT_ENV,
    POLL_INTERVAL_ENV,
    POLL_MAX_ATTEMPTS_ENV,
    load_settings,
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in (API_URL_ENV, POLL_INTERVAL_ENV, POLL_MAX_ATTEMPTS_ENV, HTTP_TIMEOUT_ENV):
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    settings = load_settings()

    assert settings.api_url == "http://localhost:8000/api"
    assert settings.policy == PollingPolicy(interval=5.0, max_attempts=60)
    assert settings.http_timeout == 30.0


def test_env_overrides(monkeypatch):
    monkeypatch.setenv(API_URL_ENV, "https://reviews.example.com/api/")
    monkeypatch.setenv(POLL_INTERVAL_ENV, "2.5")
    monkeypatch.setenv(POLL_MAX_ATTEMPTS_ENV, "10")

    settings = load_settings()

    assert settings.api_url == "https://reviews.example.com/api"
    assert settings.poll_interval == 2.5
    assert settings.poll_max_attempts == 10


def test_arguments_win_over_env(monkeypatch):
    monkeypatch.setenv(API_URL_ENV, "https://env.example.com/api")
    monkeypatch.setenv(POLL_INTERVAL_ENV, "9")

    settings = load_settings(api_url="http://cli.example.com/api?debug=1", poll_interval=1)

    assert settings.api_url == "http://cli.example.com/api"
    assert settings.poll_interval == 1


def test_malformed_env_values_fall_back_to_defaults(monkeypatch):
    monkeypatch.setenv(POLL_INTERVAL_ENV, "soon")
    monkeypatch.setenv(POLL_MAX_ATTEMPTS_ENV, "-4")
    monkeypatch.setenv(HTTP_TIMEOUT_ENV, "0")

    settings = load_settings()

    assert settings.poll_interval == 5.0
    assert settings.poll_max_attempts == 1
    assert settings.http_timeout == 30.0


@pytest.mark.parametrize("url", ["localhost:8000", "/api", "http://"])
def test_invalid_api_url_is_rejected(url):
    with pytest.raises(ConfigError, match="scheme and host"):
        load_settings(api_url=url)


def test_invalid_polling_overrides_are_rejected():
    with pytest.raises(ConfigError):
        load_settings(poll_max_attempts=0)
    with pytest.raises(ConfigError):
        load_settings(poll_interval=-1)

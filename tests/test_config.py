import logging
from pathlib import Path

import pytest

from focuscycle.core.config import AppSettings
from focuscycle.core.errors import InvalidConfigError


def test_defaults_from_empty_environment() -> None:
    settings = AppSettings.from_env({})

    assert settings.db_path == Path.cwd() / "focuscycle.db"
    assert settings.sessions_url == "http://localhost:3000/api/pomodoro"
    assert settings.sink_timeout == 5.0
    assert settings.log_level == logging.INFO
    assert settings.actor_id is None


def test_values_from_environment() -> None:
    settings = AppSettings.from_env(
        {
            "FOCUSCYCLE_DB_PATH": "/tmp/focus.db",
            "FOCUSCYCLE_API_URL": "https://focus.example/",
            "FOCUSCYCLE_SINK_TIMEOUT": "2.5",
            "FOCUSCYCLE_LOG_LEVEL": "debug",
            "FOCUSCYCLE_ACTOR_ID": "user-1",
            "FOCUSCYCLE_ACTOR_TOKEN": "tok",
        }
    )

    assert settings.db_path == Path("/tmp/focus.db")
    assert settings.sessions_url == "https://focus.example/api/pomodoro"
    assert settings.sink_timeout == 2.5
    assert settings.log_level == logging.DEBUG
    assert settings.actor_id == "user-1"
    assert settings.actor_token == "tok"


@pytest.mark.parametrize(
    "env",
    [
        {"FOCUSCYCLE_SINK_TIMEOUT": "soon"},
        {"FOCUSCYCLE_SINK_TIMEOUT": "0"},
        {"FOCUSCYCLE_LOG_LEVEL": "chatty"},
    ],
)
def test_malformed_values_are_rejected(env) -> None:
    with pytest.raises(InvalidConfigError):
        AppSettings.from_env(env)

"""Runtime settings read from the environment."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

from focuscycle.core.errors import InvalidConfigError


DEFAULT_API_URL = "http://localhost:3000"
SESSIONS_ENDPOINT = "/api/pomodoro"
DEFAULT_SINK_TIMEOUT = 5.0


@dataclass(slots=True)
class AppSettings:
    db_path: Path = Path("focuscycle.db")
    api_base_url: str = DEFAULT_API_URL
    sink_timeout: float = DEFAULT_SINK_TIMEOUT
    log_level: int = logging.INFO
    actor_id: str | None = None
    actor_token: str | None = None

    @property
    def sessions_url(self) -> str:
        return self.api_base_url.rstrip("/") + SESSIONS_ENDPOINT

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> AppSettings:
        env = os.environ if environ is None else environ

        raw_timeout = env.get("FOCUSCYCLE_SINK_TIMEOUT", str(DEFAULT_SINK_TIMEOUT))
        try:
            timeout = float(raw_timeout)
        except ValueError:
            raise InvalidConfigError(f"FOCUSCYCLE_SINK_TIMEOUT must be a number, got {raw_timeout!r}") from None
        if timeout <= 0:
            raise InvalidConfigError(f"FOCUSCYCLE_SINK_TIMEOUT must be positive, got {raw_timeout!r}")

        level_name = env.get("FOCUSCYCLE_LOG_LEVEL", "INFO").upper()
        level = logging.getLevelName(level_name)
        if not isinstance(level, int):
            raise InvalidConfigError(f"FOCUSCYCLE_LOG_LEVEL is not a logging level: {level_name!r}")

        return cls(
            db_path=Path(env.get("FOCUSCYCLE_DB_PATH") or Path.cwd() / "focuscycle.db"),
            api_base_url=env.get("FOCUSCYCLE_API_URL") or DEFAULT_API_URL,
            sink_timeout=timeout,
            log_level=level,
            actor_id=env.get("FOCUSCYCLE_ACTOR_ID") or None,
            actor_token=env.get("FOCUSCYCLE_ACTOR_TOKEN") or None,
        )

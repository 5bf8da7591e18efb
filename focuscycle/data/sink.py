from __future__ import annotations

import logging
from typing import Any, Protocol

import httpx

from focuscycle.core.cycle import SessionSummary
from focuscycle.core.errors import SinkSubmissionError
from focuscycle.core.identity import Actor


logger = logging.getLogger(__name__)


class SessionSink(Protocol):
    def record_session(self, summary: SessionSummary, actor: Actor) -> None: ...


def session_payload(summary: SessionSummary) -> dict[str, Any]:
    """Request body understood by the sessions endpoint."""
    return {
        "duration": summary.total_duration_seconds,
        "work_duration_seconds": summary.work_duration_seconds,
        "break_duration_seconds": summary.break_duration_seconds,
        "cycles_completed": summary.cycles_completed,
        "actor_id": summary.actor_id,
    }


class HttpSessionSink:
    """Posts completed sets to the sessions endpoint with a bounded timeout."""

    def __init__(self, url: str, timeout: float = 5.0, transport: httpx.BaseTransport | None = None) -> None:
        self.url = url
        self.timeout = timeout
        self._transport = transport

    def _headers(self, actor: Actor) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if actor.token:
            headers["Authorization"] = f"Bearer {actor.token}"
        return headers

    def record_session(self, summary: SessionSummary, actor: Actor) -> None:
        try:
            with httpx.Client(timeout=self.timeout, transport=self._transport) as client:
                response = client.post(self.url, json=session_payload(summary), headers=self._headers(actor))
                response.raise_for_status()
        except httpx.TimeoutException as exc:
            raise SinkSubmissionError(f"Session recording timed out after {self.timeout:g}s") from exc
        except httpx.HTTPStatusError as exc:
            detail = _error_detail(exc.response)
            raise SinkSubmissionError(
                f"Session recording rejected ({exc.response.status_code}): {detail}",
                status_code=exc.response.status_code,
            ) from exc
        except httpx.HTTPError as exc:
            raise SinkSubmissionError(f"Session recording failed: {exc}") from exc
        logger.debug("Sessions endpoint answered %s", response.status_code)


def _error_detail(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.reason_phrase or "no detail"
    if isinstance(body, dict) and isinstance(body.get("message"), str):
        return body["message"]
    return response.reason_phrase or "no detail"

from __future__ import annotations


class FocusCycleError(Exception):
    """Base class for errors raised by the focus-cycle engine."""


class InvalidConfigError(FocusCycleError, ValueError):
    pass


class InvalidStateError(FocusCycleError, RuntimeError):
    pass


class StorageCorruptError(FocusCycleError):
    """The durable snapshot slot holds something that cannot be rehydrated."""


class SinkSubmissionError(FocusCycleError):
    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code

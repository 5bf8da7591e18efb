from __future__ import annotations

import json
import logging
import sqlite3
from dataclasses import asdict, dataclass
from typing import Any

from focuscycle.core.cycle import CycleConfig, EngineState, PhaseKind
from focuscycle.core.errors import StorageCorruptError
from focuscycle.data.storage import Storage


ENGINE_SNAPSHOT_KEY = "focus-cycle-engine"
CYCLE_CONFIG_KEY = "cycle_config"

logger = logging.getLogger(__name__)

_INT_FIELDS = (
    "remaining_seconds",
    "completed_work_cycles_in_set",
    "accumulated_work_seconds",
    "accumulated_break_seconds",
    "work_minutes",
    "short_break_minutes",
    "long_break_minutes",
    "cycles_per_set",
)
_BOOL_FIELDS = ("running", "long_break_enabled")


@dataclass(frozen=True)
class EngineSnapshot:
    """Flat, JSON-ready copy of an ``EngineState`` and its config."""

    phase: str
    remaining_seconds: int
    running: bool
    completed_work_cycles_in_set: int
    accumulated_work_seconds: int
    accumulated_break_seconds: int
    work_minutes: int
    short_break_minutes: int
    long_break_minutes: int
    cycles_per_set: int
    long_break_enabled: bool

    @classmethod
    def from_state(cls, state: EngineState) -> EngineSnapshot:
        config = state.config
        return cls(
            phase=state.phase.value,
            remaining_seconds=state.remaining_seconds,
            running=state.running,
            completed_work_cycles_in_set=state.completed_work_cycles_in_set,
            accumulated_work_seconds=state.accumulated_work_seconds,
            accumulated_break_seconds=state.accumulated_break_seconds,
            work_minutes=config.work_minutes,
            short_break_minutes=config.short_break_minutes,
            long_break_minutes=config.long_break_minutes,
            cycles_per_set=config.cycles_per_set,
            long_break_enabled=config.long_break_enabled,
        )

    @classmethod
    def from_dict(cls, data: Any) -> EngineSnapshot:
        if not isinstance(data, dict):
            raise StorageCorruptError(f"Snapshot must be an object, got {type(data).__name__}")
        missing = [name for name in ("phase", *_INT_FIELDS, *_BOOL_FIELDS) if name not in data]
        if missing:
            raise StorageCorruptError(f"Snapshot is missing {', '.join(missing)}")
        for name in _INT_FIELDS:
            value = data[name]
            if isinstance(value, bool) or not isinstance(value, int):
                raise StorageCorruptError(f"Snapshot field {name} is not an integer: {value!r}")
        for name in _BOOL_FIELDS:
            if not isinstance(data[name], bool):
                raise StorageCorruptError(f"Snapshot field {name} is not a boolean: {data[name]!r}")
        if not isinstance(data["phase"], str):
            raise StorageCorruptError(f"Snapshot phase is not a string: {data['phase']!r}")
        return cls(**{name: data[name] for name in cls.__dataclass_fields__})

    @classmethod
    def from_json(cls, raw: str) -> EngineSnapshot:
        try:
            data = json.loads(raw)
        except (TypeError, json.JSONDecodeError) as exc:
            raise StorageCorruptError(f"Snapshot is not valid JSON: {exc}") from exc
        return cls.from_dict(data)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    def to_json(self) -> str:
        return json.dumps(self.to_dict())

    def to_state(self) -> EngineState:
        try:
            phase = PhaseKind(self.phase)
            config = CycleConfig(
                work_minutes=self.work_minutes,
                short_break_minutes=self.short_break_minutes,
                long_break_minutes=self.long_break_minutes,
                cycles_per_set=self.cycles_per_set,
                long_break_enabled=self.long_break_enabled,
            )
            state = EngineState(
                phase=phase,
                remaining_seconds=self.remaining_seconds,
                running=self.running,
                completed_work_cycles_in_set=self.completed_work_cycles_in_set,
                accumulated_work_seconds=self.accumulated_work_seconds,
                accumulated_break_seconds=self.accumulated_break_seconds,
                config=config,
            )
            state.check_invariants()
        except ValueError as exc:
            raise StorageCorruptError(f"Snapshot does not describe a reachable state: {exc}") from exc
        return state


class SnapshotStore:
    """The single durable slot holding the engine snapshot."""

    def __init__(self, storage: Storage, key: str = ENGINE_SNAPSHOT_KEY) -> None:
        self._storage = storage
        self._key = key

    def load(self) -> EngineState | None:
        """Rehydrated state, or ``None`` when the slot is empty or had to be discarded."""
        try:
            raw = self._storage.get_raw_setting(self._key)
        except sqlite3.DatabaseError as exc:
            logger.warning("Engine snapshot could not be read: %s", exc)
            return None
        if raw is None:
            return None
        try:
            return EngineSnapshot.from_json(raw).to_state()
        except StorageCorruptError as exc:
            logger.warning("Discarding corrupt engine snapshot: %s", exc)
            self.clear()
            return None

    def save(self, state: EngineState) -> None:
        self._storage.set_setting(self._key, EngineSnapshot.from_state(state).to_dict())

    def clear(self) -> None:
        self._storage.delete_setting(self._key)


def load_config_preference(storage: Storage) -> CycleConfig | None:
    data = storage.get_setting(CYCLE_CONFIG_KEY)
    if data is None:
        return None
    try:
        if not isinstance(data, dict):
            raise TypeError(f"expected an object, got {type(data).__name__}")
        return CycleConfig(**data)
    except (TypeError, ValueError) as exc:
        logger.warning("Ignoring saved cycle config: %s", exc)
        storage.delete_setting(CYCLE_CONFIG_KEY)
        return None


def save_config_preference(storage: Storage, config: CycleConfig) -> None:
    storage.set_setting(CYCLE_CONFIG_KEY, asdict(config))

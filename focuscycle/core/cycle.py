"""Work/break cycle state machine.

Every transition is a pure function of the current ``EngineState``; ``CycleEngine``
only keeps the latest value and hands back the event a transition produced. No I/O
happens here: persistence and session recording live in the coordinator.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Union

from focuscycle.core.errors import InvalidConfigError, InvalidStateError


class PhaseKind(str, Enum):
    WORK = "work"
    SHORT_BREAK = "short_break"
    LONG_BREAK = "long_break"

    @property
    def is_break(self) -> bool:
        return self is not PhaseKind.WORK


def max_completed_cycles(phase: PhaseKind, config: CycleConfig) -> int:
    # LongBreak is only entered with a full set; other phases sit below it.
    return config.cycles_per_set if phase == PhaseKind.LONG_BREAK else config.cycles_per_set - 1


_POSITIVE_FIELDS = ("work_minutes", "short_break_minutes", "long_break_minutes", "cycles_per_set")


@dataclass(frozen=True)
class CycleConfig:
    work_minutes: int = 25
    short_break_minutes: int = 5
    long_break_minutes: int = 15
    cycles_per_set: int = 4
    long_break_enabled: bool = True

    def __post_init__(self) -> None:
        for name in _POSITIVE_FIELDS:
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value < 1:
                raise InvalidConfigError(f"{name} must be a positive whole number, got {value!r}")
        if not isinstance(self.long_break_enabled, bool):
            raise InvalidConfigError(f"long_break_enabled must be a boolean, got {self.long_break_enabled!r}")

    def phase_duration(self, phase: PhaseKind) -> int:
        """Length of ``phase`` in seconds."""
        if phase == PhaseKind.WORK:
            return self.work_minutes * 60
        if phase == PhaseKind.SHORT_BREAK:
            return self.short_break_minutes * 60
        return self.long_break_minutes * 60


@dataclass(frozen=True)
class EngineState:
    phase: PhaseKind
    remaining_seconds: int
    running: bool
    completed_work_cycles_in_set: int
    accumulated_work_seconds: int
    accumulated_break_seconds: int
    config: CycleConfig

    @classmethod
    def initial(cls, config: CycleConfig | None = None) -> EngineState:
        config = config or CycleConfig()
        return cls(
            phase=PhaseKind.WORK,
            remaining_seconds=config.phase_duration(PhaseKind.WORK),
            running=False,
            completed_work_cycles_in_set=0,
            accumulated_work_seconds=0,
            accumulated_break_seconds=0,
            config=config,
        )

    @property
    def phase_duration(self) -> int:
        return self.config.phase_duration(self.phase)

    def check_invariants(self) -> None:
        """Raise ``ValueError`` when the counters contradict the config."""
        if not 0 <= self.remaining_seconds <= self.phase_duration:
            raise ValueError(
                f"remaining_seconds {self.remaining_seconds} outside 0..{self.phase_duration} for {self.phase.value}"
            )
        limit = max_completed_cycles(self.phase, self.config)
        if not 0 <= self.completed_work_cycles_in_set <= limit:
            raise ValueError(
                f"completed_work_cycles_in_set {self.completed_work_cycles_in_set} outside 0..{limit} for {self.phase.value}"
            )
        if self.accumulated_work_seconds < 0 or self.accumulated_break_seconds < 0:
            raise ValueError("accumulated seconds must not be negative")


@dataclass(frozen=True)
class SessionSummary:
    total_duration_seconds: int
    work_duration_seconds: int
    break_duration_seconds: int
    cycles_completed: int
    actor_id: str = ""


@dataclass(frozen=True)
class PhaseChanged:
    previous: PhaseKind
    current: PhaseKind


@dataclass(frozen=True)
class SetComplete:
    summary: SessionSummary


CycleEvent = Union[PhaseChanged, SetComplete]


def advance(state: EngineState) -> tuple[EngineState, CycleEvent | None]:
    """Apply one elapsed second. Paused states are returned unchanged."""
    if not state.running:
        return state, None
    remaining = state.remaining_seconds
    if remaining > 0:
        remaining -= 1
    if remaining > 0:
        return replace(state, remaining_seconds=remaining), None
    return complete_phase(replace(state, remaining_seconds=0))


def complete_phase(state: EngineState) -> tuple[EngineState, CycleEvent]:
    config = state.config
    if state.phase == PhaseKind.WORK:
        work_seconds = state.accumulated_work_seconds + config.phase_duration(PhaseKind.WORK)
        completed = state.completed_work_cycles_in_set + 1
        if completed >= config.cycles_per_set:
            if config.long_break_enabled:
                return (
                    replace(
                        state,
                        phase=PhaseKind.LONG_BREAK,
                        remaining_seconds=config.phase_duration(PhaseKind.LONG_BREAK),
                        completed_work_cycles_in_set=completed,
                        accumulated_work_seconds=work_seconds,
                    ),
                    PhaseChanged(PhaseKind.WORK, PhaseKind.LONG_BREAK),
                )
            return _close_set(state, work_seconds, state.accumulated_break_seconds, completed)
        return (
            replace(
                state,
                phase=PhaseKind.SHORT_BREAK,
                remaining_seconds=config.phase_duration(PhaseKind.SHORT_BREAK),
                completed_work_cycles_in_set=completed,
                accumulated_work_seconds=work_seconds,
            ),
            PhaseChanged(PhaseKind.WORK, PhaseKind.SHORT_BREAK),
        )

    break_seconds = state.accumulated_break_seconds + config.phase_duration(state.phase)
    if state.phase == PhaseKind.SHORT_BREAK:
        return (
            replace(
                state,
                phase=PhaseKind.WORK,
                remaining_seconds=config.phase_duration(PhaseKind.WORK),
                accumulated_break_seconds=break_seconds,
            ),
            PhaseChanged(PhaseKind.SHORT_BREAK, PhaseKind.WORK),
        )
    return _close_set(state, state.accumulated_work_seconds, break_seconds, state.completed_work_cycles_in_set)


def _close_set(
    state: EngineState, work_seconds: int, break_seconds: int, cycles: int
) -> tuple[EngineState, SetComplete]:
    summary = SessionSummary(
        total_duration_seconds=work_seconds + break_seconds,
        work_duration_seconds=work_seconds,
        break_duration_seconds=break_seconds,
        cycles_completed=cycles,
    )
    fresh = replace(
        state,
        phase=PhaseKind.WORK,
        remaining_seconds=state.config.phase_duration(PhaseKind.WORK),
        completed_work_cycles_in_set=0,
        accumulated_work_seconds=0,
        accumulated_break_seconds=0,
    )
    return fresh, SetComplete(summary)


def reconfigured(state: EngineState, config: CycleConfig) -> EngineState:
    if state.running:
        raise InvalidStateError("Pause the timer before changing its configuration")
    completed = state.completed_work_cycles_in_set
    kept = min(completed, max_completed_cycles(state.phase, config))
    work_seconds = state.accumulated_work_seconds
    if kept < completed:
        # Dropped cycles take their share of the focus time with them.
        work_seconds = work_seconds * kept // completed
    return replace(
        state,
        config=config,
        remaining_seconds=config.phase_duration(state.phase),
        completed_work_cycles_in_set=kept,
        accumulated_work_seconds=work_seconds,
    )


def format_clock(seconds: int) -> str:
    seconds = max(0, int(seconds))
    return f"{seconds // 60:02d}:{seconds % 60:02d}"


def progress(state: EngineState) -> float:
    total = state.phase_duration
    if total <= 0:
        return 0.0
    return max(0.0, min(1.0, (total - state.remaining_seconds) / total))


class CycleEngine:
    """Deterministic pomodoro cycle driven by an external one-second tick."""

    def __init__(self, config: CycleConfig | None = None, state: EngineState | None = None) -> None:
        self._state = state if state is not None else EngineState.initial(config)

    @property
    def state(self) -> EngineState:
        return self._state

    @property
    def config(self) -> CycleConfig:
        return self._state.config

    @property
    def phase(self) -> PhaseKind:
        return self._state.phase

    @property
    def remaining_seconds(self) -> int:
        return self._state.remaining_seconds

    @property
    def running(self) -> bool:
        return self._state.running

    @property
    def completed_work_cycles_in_set(self) -> int:
        return self._state.completed_work_cycles_in_set

    @property
    def current_cycle(self) -> int:
        """1-based Work cycle the set is on, for display."""
        return min(self._state.completed_work_cycles_in_set + 1, self._state.config.cycles_per_set)

    def start(self) -> bool:
        if self._state.running:
            return False
        self._state = replace(self._state, running=True)
        return True

    def pause(self) -> bool:
        if not self._state.running:
            return False
        self._state = replace(self._state, running=False)
        return True

    def toggle(self) -> bool:
        if self._state.running:
            self.pause()
        else:
            self.start()
        return self._state.running

    def reset(self) -> None:
        self._state = EngineState.initial(self._state.config)

    def reconfigure(self, config: CycleConfig) -> None:
        self._state = reconfigured(self._state, config)

    def tick(self) -> CycleEvent | None:
        self._state, event = advance(self._state)
        return event

"""Bridges the cycle engine to the durable snapshot slot and the session sink."""

from __future__ import annotations

import logging
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from dataclasses import dataclass, replace

from PyQt6.QtCore import QObject, pyqtSignal, pyqtSlot

from focuscycle.core.cycle import CycleConfig, CycleEngine, EngineState, PhaseChanged, SessionSummary, SetComplete
from focuscycle.core.errors import SinkSubmissionError
from focuscycle.core.identity import IdentityProbe
from focuscycle.core.ticker import QtTickSource, TickSource
from focuscycle.data.sink import SessionSink
from focuscycle.data.snapshots import SnapshotStore, load_config_preference, save_config_preference
from focuscycle.data.storage import Storage


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SubmissionOutcome:
    summary: SessionSummary
    recorded: bool


class SessionCoordinator(QObject):
    state_changed = pyqtSignal(object)
    phase_changed = pyqtSignal(object)
    set_completed = pyqtSignal(object)
    session_recorded = pyqtSignal(object)
    submission_failed = pyqtSignal(str)
    # Emitted from the sink worker; queued onto the GUI thread.
    _submission_finished = pyqtSignal(object)

    def __init__(
        self,
        storage: Storage,
        sink: SessionSink,
        identity: IdentityProbe,
        tick_source: TickSource | None = None,
        executor: Executor | None = None,
    ) -> None:
        super().__init__()
        self._storage = storage
        self._snapshots = SnapshotStore(storage)
        self._sink = sink
        self._identity = identity
        self._tick_source = tick_source if tick_source is not None else QtTickSource(self.tick, parent=self)
        self._executor = executor if executor is not None else ThreadPoolExecutor(
            max_workers=1, thread_name_prefix="session-sink"
        )
        self._engine = CycleEngine()
        self._recorded_sessions = 0
        self._submission_finished.connect(self._on_submission_finished)

    @property
    def state(self) -> EngineState:
        return self._engine.state

    @property
    def engine(self) -> CycleEngine:
        return self._engine

    @property
    def recorded_sessions(self) -> int:
        return self._recorded_sessions

    def restore(self) -> EngineState:
        """Rehydrates from the durable slot, or starts fresh from the saved preferences."""
        state = self._snapshots.load()
        if state is None:
            config = load_config_preference(self._storage) or CycleConfig()
            self._engine = CycleEngine(config)
            logger.info("Starting a fresh cycle (%s min work)", config.work_minutes)
        else:
            self._engine = CycleEngine(state=state)
            logger.info(
                "Resumed %s phase with %ss left (running=%s)",
                state.phase.value,
                state.remaining_seconds,
                state.running,
            )
        self._sync_tick_source()
        self.state_changed.emit(self._engine.state)
        return self._engine.state

    def start(self) -> None:
        if self._engine.start():
            self._commit()

    def pause(self) -> None:
        if self._engine.pause():
            self._commit()

    def toggle(self) -> None:
        self._engine.toggle()
        self._commit()

    def reset(self) -> None:
        self._engine.reset()
        self._snapshots.clear()
        self._sync_tick_source()
        self.state_changed.emit(self._engine.state)

    def reconfigure(self, config: CycleConfig) -> None:
        self._engine.reconfigure(config)
        save_config_preference(self._storage, config)
        self._commit()

    def tick(self) -> None:
        if not self._engine.running:
            return
        event = self._engine.tick()
        self._commit()
        if isinstance(event, PhaseChanged):
            logger.debug("Phase %s -> %s", event.previous.value, event.current.value)
            self.phase_changed.emit(event)
        elif isinstance(event, SetComplete):
            logger.info(
                "Set complete: %s cycles, %ss work, %ss break",
                event.summary.cycles_completed,
                event.summary.work_duration_seconds,
                event.summary.break_duration_seconds,
            )
            self.set_completed.emit(event.summary)
            self._submit(event.summary)

    def shutdown(self) -> None:
        self._tick_source.stop()
        self._executor.shutdown(wait=True)

    def _commit(self) -> None:
        self._snapshots.save(self._engine.state)
        self._sync_tick_source()
        self.state_changed.emit(self._engine.state)

    def _sync_tick_source(self) -> None:
        if self._engine.running and not self._tick_source.is_active:
            self._tick_source.start()
        elif not self._engine.running and self._tick_source.is_active:
            self._tick_source.stop()

    def _submit(self, summary: SessionSummary) -> None:
        future = self._executor.submit(self._record, summary)
        future.add_done_callback(self._submission_finished.emit)

    def _record(self, summary: SessionSummary) -> SubmissionOutcome:
        actor = self._identity.current_actor()
        if actor.is_guest:
            logger.debug("Guest actor; finished set is not recorded")
            return SubmissionOutcome(summary=summary, recorded=False)
        summary = replace(summary, actor_id=actor.id)
        self._sink.record_session(summary, actor)
        return SubmissionOutcome(summary=summary, recorded=True)

    @pyqtSlot(object)
    def _on_submission_finished(self, future: Future) -> None:
        exc = future.exception()
        if exc is None:
            outcome = future.result()
            if outcome.recorded:
                self._recorded_sessions += 1
                logger.info("Recorded session for %s", outcome.summary.actor_id)
                self.session_recorded.emit(outcome.summary)
            return
        if isinstance(exc, SinkSubmissionError):
            logger.warning("Finished session was not recorded: %s", exc)
            self.submission_failed.emit(str(exc))
            return
        logger.error("Recording the finished session failed", exc_info=exc)
        self.submission_failed.emit("Could not record the finished session.")

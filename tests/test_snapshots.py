import json
import sqlite3
from dataclasses import replace

import pytest

from focuscycle.core.cycle import CycleConfig, CycleEngine, EngineState, PhaseKind
from focuscycle.core.errors import StorageCorruptError
from focuscycle.data.snapshots import (
    CYCLE_CONFIG_KEY,
    ENGINE_SNAPSHOT_KEY,
    EngineSnapshot,
    SnapshotStore,
    load_config_preference,
    save_config_preference,
)
from focuscycle.data.storage import Storage


CONFIG = CycleConfig(work_minutes=1, short_break_minutes=1, long_break_minutes=2, cycles_per_set=2, long_break_enabled=True)


@pytest.fixture
def storage(tmp_path) -> Storage:
    storage = Storage(tmp_path / "focus.db")
    storage.init_db()
    return storage


def reachable_states() -> list[EngineState]:
    engine = CycleEngine(CONFIG)
    states = [engine.state]
    engine.start()
    for _ in range(400):
        engine.tick()
        states.append(engine.state)
    engine.pause()
    states.append(engine.state)
    return states


def test_snapshot_round_trip_for_reachable_states() -> None:
    for state in reachable_states():
        snapshot = EngineSnapshot.from_state(state)
        assert snapshot.to_state() == state
        assert EngineSnapshot.from_json(snapshot.to_json()).to_state() == state


def test_store_save_and_load(storage) -> None:
    store = SnapshotStore(storage)
    engine = CycleEngine(CONFIG)
    engine.start()
    for _ in range(100):
        engine.tick()

    store.save(engine.state)

    assert store.load() == engine.state
    assert storage.get_setting(ENGINE_SNAPSHOT_KEY)["phase"] == "short_break"


def test_store_load_empty_slot(storage) -> None:
    assert SnapshotStore(storage).load() is None


@pytest.mark.parametrize(
    "payload",
    [
        "{not json",
        json.dumps([1, 2, 3]),
        json.dumps({"phase": "work"}),
        json.dumps({**EngineSnapshot.from_state(EngineState.initial(CONFIG)).to_dict(), "phase": "nap"}),
        json.dumps({**EngineSnapshot.from_state(EngineState.initial(CONFIG)).to_dict(), "running": "yes"}),
        json.dumps({**EngineSnapshot.from_state(EngineState.initial(CONFIG)).to_dict(), "work_minutes": 0}),
        json.dumps({**EngineSnapshot.from_state(EngineState.initial(CONFIG)).to_dict(), "remaining_seconds": 61}),
        json.dumps({**EngineSnapshot.from_state(EngineState.initial(CONFIG)).to_dict(), "completed_work_cycles_in_set": 3}),
        json.dumps({**EngineSnapshot.from_state(EngineState.initial(CONFIG)).to_dict(), "completed_work_cycles_in_set": 2}),
        json.dumps(
            {
                **EngineSnapshot.from_state(EngineState.initial(CONFIG)).to_dict(),
                "phase": "short_break",
                "completed_work_cycles_in_set": 2,
            }
        ),
        json.dumps(
            {
                **EngineSnapshot.from_state(EngineState.initial(CONFIG)).to_dict(),
                "phase": "long_break",
                "completed_work_cycles_in_set": 3,
            }
        ),
        json.dumps({**EngineSnapshot.from_state(EngineState.initial(CONFIG)).to_dict(), "accumulated_work_seconds": -1}),
    ],
)
def test_corrupt_slot_is_discarded(storage, payload) -> None:
    with storage._transaction() as conn:  # noqa: SLF001 - tests may write raw rows
        conn.execute("INSERT INTO settings(key, value) VALUES (?, ?)", (ENGINE_SNAPSHOT_KEY, payload))

    assert SnapshotStore(storage).load() is None
    assert storage.get_raw_setting(ENGINE_SNAPSHOT_KEY) is None


def test_full_set_is_only_valid_in_long_break() -> None:
    long_break = EngineState(
        phase=PhaseKind.LONG_BREAK,
        remaining_seconds=120,
        running=False,
        completed_work_cycles_in_set=2,
        accumulated_work_seconds=120,
        accumulated_break_seconds=60,
        config=CONFIG,
    )
    assert EngineSnapshot.from_state(long_break).to_state() == long_break

    with pytest.raises(StorageCorruptError, match="outside 0..1 for work"):
        EngineSnapshot.from_state(replace(long_break, phase=PhaseKind.WORK, remaining_seconds=1)).to_state()


def test_unreadable_database_reads_as_empty_slot(storage, monkeypatch) -> None:
    def broken(key):
        raise sqlite3.DatabaseError("file is not a database")

    monkeypatch.setattr(storage, "get_raw_setting", broken)

    assert SnapshotStore(storage).load() is None


def test_from_dict_reports_missing_fields() -> None:
    with pytest.raises(StorageCorruptError, match="remaining_seconds"):
        EngineSnapshot.from_dict({"phase": PhaseKind.WORK.value})


def test_clear_empties_slot(storage) -> None:
    store = SnapshotStore(storage)
    store.save(EngineState.initial(CONFIG))
    store.clear()

    assert store.load() is None


def test_config_preference_round_trip(storage) -> None:
    assert load_config_preference(storage) is None

    save_config_preference(storage, CONFIG)

    assert load_config_preference(storage) == CONFIG


def test_bad_config_preference_is_dropped(storage) -> None:
    storage.set_setting(CYCLE_CONFIG_KEY, {"work_minutes": 0})

    assert load_config_preference(storage) is None
    assert storage.get_raw_setting(CYCLE_CONFIG_KEY) is None

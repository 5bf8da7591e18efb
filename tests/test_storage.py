from focuscycle.data.storage import Storage


def test_init_db_creates_file(tmp_path) -> None:
    db = tmp_path / "nested" / "focus.db"
    storage = Storage(db)
    storage.init_db()
    assert db.exists()


def test_set_get_setting(tmp_path) -> None:
    storage = Storage(tmp_path / "focus.db")
    storage.init_db()
    storage.set_setting("volume", 0)
    storage.set_setting("config", {"work_minutes": 50})

    assert storage.get_setting("volume") == 0
    assert storage.get_setting("config") == {"work_minutes": 50}
    assert storage.get_setting("missing", "x") == "x"


def test_set_setting_overwrites(tmp_path) -> None:
    storage = Storage(tmp_path / "focus.db")
    storage.init_db()
    storage.set_setting("slot", {"a": 1})
    storage.set_setting("slot", {"b": 2})

    assert storage.get_setting("slot") == {"b": 2}


def test_raw_setting_and_delete(tmp_path) -> None:
    storage = Storage(tmp_path / "focus.db")
    storage.init_db()
    with storage._transaction() as conn:  # noqa: SLF001 - tests may write raw rows
        conn.execute("INSERT INTO settings(key, value) VALUES (?, ?)", ("slot", "{broken"))

    assert storage.get_raw_setting("slot") == "{broken"
    assert storage.get_setting("slot") == "{broken"

    storage.delete_setting("slot")
    assert storage.get_raw_setting("slot") is None
    storage.delete_setting("slot")


def test_init_db_is_idempotent(tmp_path) -> None:
    storage = Storage(tmp_path / "focus.db")
    storage.init_db()
    storage.set_setting("kept", True)
    storage.init_db()

    assert storage.get_setting("kept") is True


def test_unreadable_file_is_moved_aside(tmp_path) -> None:
    db = tmp_path / "focus.db"
    db.write_bytes(b"definitely not sqlite " * 64)
    storage = Storage(db)

    storage.init_db()

    assert (tmp_path / "focus.db.corrupt").read_bytes().startswith(b"definitely not sqlite")
    storage.set_setting("kept", True)
    assert storage.get_setting("kept") is True


def test_module_docstring_is_exposed() -> None:
    import focuscycle.data.storage as storage_module

    assert storage_module.__doc__.startswith("SQLite key/value store")

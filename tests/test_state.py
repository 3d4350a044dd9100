# tests/test_state.py
import json
import stat
import tempfile
from pathlib import Path

import pytest

from patchwatch.errors import StateNotFoundError, StateParseError
from patchwatch.utils.state import PAGE, StateStore, WatchedItem, WatcherState

DOC = {
    "serviceOn": True,
    "failureCount": 1,
    "maxFailures": 3,
    "pushoverAppToken": "app",
    "pushoverUserToken": "user",
    "pushoverDevice": "phone",
    "gameClients": [
        {"name": "Live", "blizztrackId": "pro", "version": "1.0"},
        {"name": "PTR", "source": "page", "url": "https://example.com/ptr", "selector": "h1", "version": "2.0"},
    ],
}


def _write(path: Path, obj) -> Path:
    path.write_text(json.dumps(obj), encoding="utf-8")
    return path


def test_load_reads_all_fields(tmp_path: Path) -> None:
    state = StateStore(_write(tmp_path / "config.json", DOC)).load()

    assert state.enabled is True
    assert state.failure_count == 1
    assert state.max_failures == 3
    assert state.target.app_token == "app"
    assert state.target.device == "phone"
    assert [i.identifier for i in state.items] == ["pro", "https://example.com/ptr"]
    assert state.items[1].source == PAGE
    assert state.items[1].selector == "h1"


def test_load_then_save_reproduces_document(tmp_path: Path) -> None:
    doc = dict(DOC, notes="kept as-is")
    path = _write(tmp_path / "config.json", doc)
    store = StateStore(path)

    store.save(store.load())

    assert json.loads(path.read_text(encoding="utf-8")) == doc


def test_save_writes_changes_and_leaves_no_temp_files(tmp_path: Path) -> None:
    path = _write(tmp_path / "config.json", DOC)
    store = StateStore(path)
    state = store.load()
    state.items[0].version = "1.1"
    state.enabled = False

    store.save(state)

    saved = json.loads(path.read_text(encoding="utf-8"))
    assert saved["gameClients"][0]["version"] == "1.1"
    assert saved["serviceOn"] is False
    assert [p.name for p in tmp_path.iterdir()] == ["config.json"]


def test_save_creates_missing_parent(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "state.json"
    StateStore(path).save(WatcherState(items=[WatchedItem("Live", "pro", "1.0")]))

    assert StateStore(path).load().items[0].version == "1.0"


def test_missing_optional_keys_default(tmp_path: Path) -> None:
    state = StateStore(_write(tmp_path / "c.json", {"gameClients": [{"name": "Live", "blizztrackId": "pro"}]})).load()

    assert state.enabled is True
    assert state.failure_count == 0
    assert state.items[0].version == ""


def test_missing_file_is_not_found(tmp_path: Path) -> None:
    with pytest.raises(StateNotFoundError):
        StateStore(tmp_path / "nope.json").load()


@pytest.mark.parametrize("raw", [
    b"{not json",
    b"[1, 2, 3]",
    b"\xff\xfe\x00garbage",
    json.dumps({"serviceOn": "yes"}).encode(),
    json.dumps({"failureCount": "2"}).encode(),
    json.dumps({"gameClients": {"name": "Live"}}).encode(),
    json.dumps({"gameClients": [{"name": "Live", "version": 11}]}).encode(),
])
def test_malformed_document_is_parse_error(tmp_path: Path, raw: bytes) -> None:
    path = tmp_path / "config.json"
    path.write_bytes(raw)

    with pytest.raises(StateParseError):
        StateStore(path).load()


def test_round_trip_keeps_item_level_keys(tmp_path: Path) -> None:
    doc = dict(DOC, gameClients=[
        {"name": "Live", "blizztrackId": "pro", "version": "1.0", "source": "blizztrack", "note": "keep"},
        {"name": "PTR", "source": "page", "url": "https://example.com/ptr", "selector": "h1",
         "version": "2.0", "owner": "qa"},
    ])
    path = _write(tmp_path / "config.json", doc)
    store = StateStore(path)

    store.save(store.load())

    assert json.loads(path.read_text(encoding="utf-8")) == doc


def test_save_keeps_file_mode(tmp_path: Path) -> None:
    path = _write(tmp_path / "config.json", DOC)
    path.chmod(0o644)
    store = StateStore(path)

    store.save(store.load())

    assert stat.S_IMODE(path.stat().st_mode) == 0o644


def test_failed_write_leaves_no_temp_file(tmp_path: Path, monkeypatch) -> None:
    path = _write(tmp_path / "config.json", DOC)
    store = StateStore(path)
    state = store.load()
    real_tmp = tempfile.NamedTemporaryFile

    def failing_tmp(*args, **kwargs):
        fh = real_tmp(*args, **kwargs)

        def disk_full(data):
            raise OSError("disk full")

        fh.write = disk_full
        return fh

    monkeypatch.setattr(tempfile, "NamedTemporaryFile", failing_tmp)
    with pytest.raises(OSError):
        store.save(state)

    assert [p.name for p in tmp_path.iterdir()] == ["config.json"]
    assert json.loads(path.read_text(encoding="utf-8")) == DOC


def test_null_fields_fall_back_to_defaults(tmp_path: Path) -> None:
    doc = {"serviceOn": None, "failureCount": None, "maxFailures": None, "gameClients": None}

    state = StateStore(_write(tmp_path / "config.json", doc)).load()

    assert state.enabled is True
    assert state.failure_count == 0
    assert state.max_failures == 3
    assert state.items == []

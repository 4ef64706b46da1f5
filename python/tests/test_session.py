"""
Tests for TodoSession: command application, persistence and the audit trail.
"""

import pytest

from thingstodo import (
    Add,
    AppSettings,
    Clear,
    CodecError,
    Debug,
    Edit,
    List,
    ListFiltered,
    Remove,
    SetStatus,
    TodoSession,
    TodoStore,
    get_codec,
    save_store,
)
from thingstodo.errors import (
    AlreadyExistsError,
    CollisionError,
    InputInvalidError,
    NotFoundError,
)
from thingstodo.harness import HarnessReport
from thingstodo.oplog import read_oplog
from thingstodo.selftest import DiffSelfTestResult
from thingstodo.session import EMPTY_LIST_TEXT


@pytest.fixture
def settings(tmp_path):
    return AppSettings(
        data_dir=str(tmp_path / "store"),
        diagnostic_dir=str(tmp_path / "diag"),
        oplog_path=str(tmp_path / "ops.jsonl"),
        seed=11,
    )


@pytest.fixture
def session(settings):
    s = TodoSession(TodoStore({"buy milk": False, "walk dog": True}), settings)
    yield s
    s.close()


# =============================================================================
# Category 1: Mutating commands
# =============================================================================


class TestMutations:
    def test_add(self, session):
        result = session.apply(Add("file taxes"))
        assert result.ok
        assert result.action == "Add"
        assert session.store["file taxes"] is False

    def test_add_duplicate_is_returned_not_raised(self, session):
        result = session.apply(Add("buy milk"))
        assert not result.ok
        assert isinstance(result.error, AlreadyExistsError)
        assert result.text == "Todo already exists with that name"

    def test_remove(self, session):
        assert session.apply(Remove("buy milk")).ok
        assert "buy milk" not in session.store

    def test_remove_missing(self, session):
        result = session.apply(Remove("nope"))
        assert isinstance(result.error, NotFoundError)
        assert len(session.store) == 2

    def test_edit_overwrites_by_default(self, session):
        assert session.apply(Edit("walk dog", "buy milk")).ok
        assert session.store.to_dict() == {"buy milk": True}

    def test_strict_edit(self, settings):
        settings.strict_edit = True
        with TodoSession(TodoStore({"a": False, "b": True}), settings) as s:
            result = s.apply(Edit("a", "b"))
            assert isinstance(result.error, CollisionError)
            assert s.store.to_dict() == {"a": False, "b": True}

    def test_set_status_upserts(self, session):
        assert session.apply(SetStatus("new", True)).ok
        assert session.store["new"] is True

    def test_clear(self, session):
        result = session.apply(Clear())
        assert result.ok
        assert result.text == "Cleared 2 entries."
        assert session.store.is_empty()


# =============================================================================
# Category 2: Listing
# =============================================================================


class TestListing:
    def test_list(self, session):
        result = session.apply(List())
        assert result.items == [("buy milk", False), ("walk dog", True)]
        assert "[ ] 'buy milk'" in result.text
        assert "[X] 'walk dog'" in result.text

    def test_list_empty(self, settings):
        with TodoSession(settings=settings) as s:
            result = s.apply(List())
        assert result.ok
        assert result.items == []
        assert result.text == EMPTY_LIST_TEXT

    def test_list_filtered(self, session):
        session.apply(Add("another"))
        result = session.apply(ListFiltered(False))
        assert result.names == ["another", "buy milk"]
        assert result.text.startswith("Incomplete Todos")

    def test_list_filtered_none(self, session):
        session.apply(SetStatus("walk dog", False))
        result = session.apply(ListFiltered(True))
        assert result.names == []
        assert result.text == "There are no completed todos in the database."


# =============================================================================
# Category 3: Debug commands
# =============================================================================


class TestDebug:
    def test_encoding_runs_harness(self, session, settings, tmp_path):
        result = session.apply(Debug("encoding"))
        assert result.ok
        assert isinstance(result.data, HarnessReport)
        assert result.data.all_passed
        assert (tmp_path / "diag" / "MsgPack.dat").exists()
        assert "Serialization Size Results" in result.text

    def test_diff_selftest(self, session):
        result = session.apply(Debug("diff"))
        assert result.ok
        assert isinstance(result.data, DiffSelfTestResult)
        assert result.data.seed == 11
        assert result.data.ok

    def test_diff_selftest_empty_store(self, settings):
        with TodoSession(settings=settings) as s:
            result = s.apply(Debug("diff"))
        assert isinstance(result.error, InputInvalidError)

    def test_unknown_debug(self, session):
        result = session.apply(Debug("launch"))
        assert not result.ok
        assert isinstance(result.error, InputInvalidError)


# =============================================================================
# Category 4: Persistence and lifecycle
# =============================================================================


class TestLifecycle:
    def test_open_missing_file_starts_empty(self, settings):
        s = TodoSession.open(settings)
        assert s.store.is_empty()
        s.close()

    def test_save_and_reopen(self, session, settings):
        path = session.save()
        assert path.name == "data.msgpack"
        reopened = TodoSession.open(settings)
        assert reopened.store.diff(session.store).identical
        reopened.close()

    def test_context_manager_saves(self, settings):
        with TodoSession.open(settings) as s:
            s.apply(Add("persist me"))
        with TodoSession.open(settings) as s:
            assert "persist me" in s.store

    def test_context_manager_skips_save_on_error(self, settings):
        with pytest.raises(RuntimeError):
            with TodoSession.open(settings) as s:
                s.apply(Add("lost"))
                raise RuntimeError("abort")
        assert s.closed
        with TodoSession.open(settings) as s2:
            assert "lost" not in s2.store

    def test_corrupt_file_raises(self, settings, tmp_path):
        store_dir = tmp_path / "store"
        store_dir.mkdir()
        (store_dir / "data.msgpack").write_bytes(b"\xc1")
        with pytest.raises(CodecError):
            TodoSession.open(settings)

    def test_corrupt_file_empty_fallback(self, settings, tmp_path):
        store_dir = tmp_path / "store"
        store_dir.mkdir()
        (store_dir / "data.msgpack").write_bytes(b"\xc1")
        s = TodoSession.open(settings, on_load_error="empty")
        assert s.store.is_empty()
        s.close()

    def test_configured_codec(self, settings, tmp_path):
        settings.default_codec = "Json"
        save_store(TodoStore({"x": True}), get_codec("Json"), settings.data_dir)
        with TodoSession.open(settings) as s:
            assert s.store.to_dict() == {"x": True}
        assert (tmp_path / "store" / "data.json.bak").exists()

    def test_summary(self, session):
        assert session.summary() == "Todo-List contains 2 entries."


# =============================================================================
# Category 5: Audit trail
# =============================================================================


class TestAuditTrail:
    def test_commands_logged(self, settings, tmp_path):
        with TodoSession.open(settings) as s:
            s.apply(Add("a"))
            s.apply(Add("a"))
        records = read_oplog(tmp_path / "ops.jsonl")
        ops = [r["op"] for r in records]
        assert ops == ["load", "command", "command", "save"]
        assert records[1]["ok"] is True
        assert records[2]["ok"] is False
        assert records[2]["error"] == "Todo already exists with that name"

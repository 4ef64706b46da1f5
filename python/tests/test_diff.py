"""Tests for the structural diff engine."""

from thingstodo import TodoStore, diff
from thingstodo.diff import IDENTICAL, Missing, StatusMismatch, describe_entry


# =============================================================================
# Category 1: Identical snapshots
# =============================================================================


class TestIdentical:
    def test_both_empty(self):
        assert diff({}, {}).identical

    def test_equal_stores(self):
        s = TodoStore({"a": True, "b": False})
        result = s.diff(s.copy())
        assert result.identical
        assert len(result) == 0
        assert result == IDENTICAL

    def test_reflexive(self):
        s = TodoStore({"a": True})
        assert s.diff(s).identical


# =============================================================================
# Category 2: Entries
# =============================================================================


class TestEntries:
    def test_missing_from_that(self):
        result = diff({"a": True}, {})
        assert list(result) == [Missing(name="a", this_has=True)]

    def test_missing_from_this(self):
        result = diff({}, {"a": True})
        (entry,) = list(result)
        assert entry == Missing(name="a", this_has=False)
        assert entry.that_has is True

    def test_status_mismatch(self):
        result = diff({"a": True}, {"a": False})
        assert list(result) == [StatusMismatch(name="a", this_status=True, that_status=False)]

    def test_one_entry_per_name(self):
        this = {"a": True, "b": False, "c": True}
        that = {"b": True, "c": True, "d": False}
        result = diff(this, that)
        assert [e.name for e in result] == ["a", "b", "d"]
        assert len(result) == 3

    def test_flip_and_add_yield_two_entries(self):
        store = TodoStore({"buy milk": False, "walk dog": True})
        other = store.copy()
        other.set_status("buy milk", True)
        other.add("call mom", False)
        # "buy milk" sorts before "call mom".
        assert list(store.diff(other)) == [
            StatusMismatch(name="buy milk", this_status=False, that_status=True),
            Missing(name="call mom", this_has=False),
        ]

    def test_sorted_by_name(self):
        this = {"z": True, "m": True}
        that = {"a": False}
        assert [e.name for e in diff(this, that)] == ["a", "m", "z"]

    def test_symmetry(self):
        this = {"a": True, "b": False}
        that = {"b": True, "c": False}
        forward = {e.name: e for e in diff(this, that)}
        backward = {e.name: e for e in diff(that, this)}
        assert forward.keys() == backward.keys()
        assert forward["a"].this_has and not backward["a"].this_has
        assert forward["b"].this_status == backward["b"].that_status

    def test_inputs_untouched(self):
        this = {"a": True}
        that = {"b": False}
        diff(this, that)
        assert this == {"a": True}
        assert that == {"b": False}


# =============================================================================
# Category 3: Descriptions
# =============================================================================


class TestDescribe:
    def test_missing_description(self):
        assert describe_entry(Missing("x", True)) == "Todo 'x' is in this but not that."
        assert describe_entry(Missing("x", False)) == "Todo 'x' is in that but not this."

    def test_mismatch_description(self):
        msg = describe_entry(StatusMismatch("x", True, False))
        assert msg == "Todo 'x' is marked as complete in this but incomplete in that."

    def test_result_describe(self):
        assert diff({"a": True}, {}).describe() == ["Todo 'a' is in this but not that."]

"""Tests for the injected-change diff self-test."""

import pytest

from thingstodo import TodoStore
from thingstodo.errors import InputInvalidError
from thingstodo.selftest import run_diff_selftest


def _store(n):
    return TodoStore({f"todo {i}": i % 2 == 0 for i in range(n)})


class TestDiffSelfTest:
    def test_empty_store_rejected(self):
        with pytest.raises(InputInvalidError) as excinfo:
            run_diff_selftest(TodoStore())
        assert "at least 1 entry" in str(excinfo.value)

    def test_single_item_store(self):
        result = run_diff_selftest(_store(1), seed=3)
        assert len(result.changes) == 1
        assert result.ok

    @pytest.mark.parametrize("seed", range(20))
    def test_oracle_agrees_with_diff(self, seed):
        result = run_diff_selftest(_store(12), seed=seed)
        assert result.baseline_identical
        assert result.count_matches
        assert 1 <= len(result.changes) <= 11

    def test_original_untouched(self):
        store = _store(8)
        before = store.to_dict()
        run_diff_selftest(store, seed=1)
        assert store.to_dict() == before

    def test_seed_reproducible(self):
        a = run_diff_selftest(_store(10), seed=99)
        b = run_diff_selftest(_store(10), seed=99)
        assert a.changes == b.changes
        assert a.diff == b.diff

    def test_seed_recorded_when_random(self):
        result = run_diff_selftest(_store(5))
        assert isinstance(result.seed, int)

    def test_render(self):
        result = run_diff_selftest(_store(6), seed=5)
        text = result.render()
        assert text.startswith("Diff self-test (seed=5)")
        assert "Diff against cloned copy returned Identical." in text
        assert f"Made {len(result.changes)} changes." in text

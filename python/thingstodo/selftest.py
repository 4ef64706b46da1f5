"""
Diff engine self-test.

Diffs a store against an identical copy (must be identical), injects a
random batch of changes into the copy, and diffs again. The number of diff
entries is checked against a shadow oracle that tracks each touched name's
original and current state without using the diff engine.

The naive check "entries == injected changes" is reported too. It is known
to miscount when changes overlap (e.g. a status flip landing on an item
added in the same batch collapses to a single entry).
"""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Literal

from thingstodo.diff import DiffResult
from thingstodo.errors import InputInvalidError
from thingstodo.store import TodoStore

ChangeKind = Literal["flip", "add", "remove"]

_MISSING = object()


@dataclass(frozen=True)
class InjectedChange:
    kind: ChangeKind
    name: str
    status: bool | None = None

    def describe(self) -> str:
        if self.kind == "flip":
            return f"Changing status of {self.name!r} from {not self.status} to {self.status}"
        if self.kind == "add":
            return f"Adding random todo {self.name!r} with status {self.status}"
        return f"Removing random todo {self.name!r}"


@dataclass
class DiffSelfTestResult:
    seed: int
    baseline: DiffResult
    diff: DiffResult
    changes: list[InjectedChange] = field(default_factory=list)
    expected_entries: int = 0

    @property
    def baseline_identical(self) -> bool:
        return self.baseline.identical

    @property
    def count_matches(self) -> bool:
        return len(self.diff) == self.expected_entries

    @property
    def naive_count_matches(self) -> bool:
        return len(self.diff) == len(self.changes)

    @property
    def ok(self) -> bool:
        return self.baseline_identical and self.count_matches

    def render(self) -> str:
        lines = [f"Diff self-test (seed={self.seed})"]
        if self.baseline_identical:
            lines.append("Diff against cloned copy returned Identical.")
        else:
            lines.append("Diff against cloned copy returned changes:")
            lines.extend(f"#{i}: {m}" for i, m in enumerate(self.baseline.describe(), start=1))
        lines.append(f"Made {len(self.changes)} changes.")
        lines.extend(f"\t- Change #{i}: {c.describe()}" for i, c in enumerate(self.changes, start=1))
        if self.count_matches:
            lines.append(f"Diff returned the expected number of entries ({self.expected_entries}).")
        else:
            lines.append(
                f"MISMATCH: diff returned {len(self.diff)} entries but {self.expected_entries} were expected."
            )
        if not self.naive_count_matches:
            lines.append(
                f"Note: {len(self.changes)} changes collapsed to {len(self.diff)} entries "
                "(overlapping changes on the same item)."
            )
        if len(self.diff):
            lines.append("Diff Entries:")
            lines.extend(f"#{i}: {m}" for i, m in enumerate(self.diff.describe(), start=1))
        return "\n".join(lines)


def _expected_entry_count(original: dict[str, bool], touched: dict[str, object], current: TodoStore) -> int:
    count = 0
    for name in touched:
        before = original.get(name, _MISSING)
        after = current.get(name, _MISSING)
        if before is _MISSING and after is _MISSING:
            continue
        if before is _MISSING or after is _MISSING or before != after:
            count += 1
    return count


def run_diff_selftest(store: TodoStore, *, seed: int | None = None) -> DiffSelfTestResult:
    """
    Run the injected-change diff self-test against a copy of ``store``.

    ``store`` itself is never modified.

    Raises:
        InputInvalidError: If the store is empty.
    """
    if store.is_empty():
        raise InputInvalidError("TodoList must have at least 1 entry in order to run diff test!")

    if seed is None:
        seed = random.randrange(2**32)
    rng = random.Random(seed)

    original = store.to_dict()
    other = store.copy()
    baseline = store.diff(other)

    n_changes = rng.randint(1, max(1, len(store) - 1))
    changes: list[InjectedChange] = []
    touched: dict[str, object] = {}

    for _ in range(n_changes):
        kind = rng.choice(("flip", "add", "remove"))
        if kind != "add" and other.is_empty():
            kind = "add"
        if kind == "flip":
            name = rng.choice(sorted(other.names()))
            status = not other[name]
            other.set_status(name, status)
            changes.append(InjectedChange("flip", name, status))
        elif kind == "add":
            name = f"Here is a random todo I added. {rng.getrandbits(64)}"
            status = rng.random() < 0.5
            other.set_status(name, status)
            changes.append(InjectedChange("add", name, status))
        else:
            name = rng.choice(sorted(other.names()))
            other.remove(name)
            changes.append(InjectedChange("remove", name))
        touched[name] = None

    result = store.diff(other)
    return DiffSelfTestResult(
        seed=seed,
        baseline=baseline,
        diff=result,
        changes=changes,
        expected_entries=_expected_entry_count(original, touched, other),
    )


__all__ = ["InjectedChange", "DiffSelfTestResult", "run_diff_selftest"]

"""Structural diff between two store snapshots."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Union


@dataclass(frozen=True)
class Missing:
    """An item present in exactly one of the two snapshots."""

    name: str
    this_has: bool

    @property
    def that_has(self) -> bool:
        return not self.this_has


@dataclass(frozen=True)
class StatusMismatch:
    """An item present in both snapshots with different status."""

    name: str
    this_status: bool
    that_status: bool


DiffEntry = Union[Missing, StatusMismatch]


@dataclass(frozen=True)
class DiffResult:
    changes: tuple[DiffEntry, ...] = ()

    @property
    def identical(self) -> bool:
        return not self.changes

    def __len__(self) -> int:
        return len(self.changes)

    def __iter__(self):
        return iter(self.changes)

    def describe(self) -> list[str]:
        return [describe_entry(e) for e in self.changes]


IDENTICAL = DiffResult()


def describe_entry(entry: DiffEntry) -> str:
    if isinstance(entry, Missing):
        have, lack = ("this", "that") if entry.this_has else ("that", "this")
        return f"Todo {entry.name!r} is in {have} but not {lack}."
    this_word = "complete" if entry.this_status else "incomplete"
    that_word = "complete" if entry.that_status else "incomplete"
    return f"Todo {entry.name!r} is marked as {this_word} in this but {that_word} in that."


def diff(this: Mapping[str, bool], that: Mapping[str, bool]) -> DiffResult:
    """
    Compare two name -> status mappings.

    Every key of ``this`` is looked up in ``that``: a missing key yields
    ``Missing(this_has=True)``, a different status yields ``StatusMismatch``.
    Keys left over in ``that`` yield ``Missing(this_has=False)``.

    Entries are returned sorted by item name so the output does not depend
    on mapping iteration order.

    Returns:
        DiffResult; ``identical`` is True iff no entries were produced.
    """
    if not this and not that:
        return IDENTICAL

    changes: list[DiffEntry] = []
    remaining = dict(that)
    for name, this_status in this.items():
        if name not in remaining:
            changes.append(Missing(name=name, this_has=True))
            continue
        that_status = remaining.pop(name)
        if that_status != this_status:
            changes.append(
                StatusMismatch(name=name, this_status=this_status, that_status=that_status)
            )

    for name in remaining:
        changes.append(Missing(name=name, this_has=False))

    if not changes:
        return IDENTICAL
    changes.sort(key=lambda e: e.name)
    return DiffResult(changes=tuple(changes))


__all__ = [
    "Missing",
    "StatusMismatch",
    "DiffEntry",
    "DiffResult",
    "IDENTICAL",
    "describe_entry",
    "diff",
]

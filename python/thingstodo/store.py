"""
TodoStore: the in-memory record store.

A TodoStore maps item names to a completion status. Names are unique and
non-empty; statuses are real bools.

Example:
    >>> store = TodoStore()
    >>> store.add("buy milk")
    >>> store.set_status("buy milk", True)
    >>> store.names_with_status(True)
    ['buy milk']

Thread Safety:
    None. The store is owned by a single command-processing path; every
    mutation is applied immediately and atomically (a failed call leaves
    the store unchanged).
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Iterable, Iterator

from thingstodo._api import _coerce_status, _require_name, _validated_items
from thingstodo.diff import DiffResult, diff
from thingstodo.errors import AlreadyExistsError, CollisionError, NotFoundError

Item = tuple[str, bool]


class TodoStore(Mapping):
    """
    Unordered mapping of item name to completion status.

    Read access follows the Mapping protocol (``len(store)``,
    ``name in store``, ``store[name]``, ``store.items()``). Writes go
    through add/remove/edit/set_status/clear only.
    """

    __slots__ = ("_items",)

    def __init__(self, items: Mapping[str, Any] | Iterable[Item] | None = None):
        self._items: dict[str, bool] = {} if items is None else _validated_items(items)

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> "TodoStore":
        """
        Build a store from a decoded name -> status mapping.

        Raises:
            InputInvalidError: If a name is empty or a status is not bool.
        """
        return cls(mapping)

    # ------------------------------------------------------------------
    # Mapping protocol
    # ------------------------------------------------------------------

    def __getitem__(self, name: str) -> bool:
        return self._items[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __repr__(self) -> str:
        return f"TodoStore({self._items!r})"

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def is_empty(self) -> bool:
        return not self._items

    def any_with_status(self, status: bool) -> bool:
        return any(v == status for v in self._items.values())

    def names(self) -> list[str]:
        return list(self._items)

    def names_with_status(self, status: bool) -> list[str]:
        return [k for k, v in self._items.items() if v == status]

    def sorted_items(self) -> list[Item]:
        """All (name, status) pairs ordered by name, for display."""
        return sorted(self._items.items())

    def to_dict(self) -> dict[str, bool]:
        return dict(self._items)

    def copy(self) -> "TodoStore":
        clone = TodoStore()
        clone._items = dict(self._items)
        return clone

    def diff(self, other: Mapping[str, bool]) -> DiffResult:
        """Structural diff of this store (``this``) against ``other`` (``that``)."""
        return diff(self, other)

    # ------------------------------------------------------------------
    # Write path
    # ------------------------------------------------------------------

    def add(self, name: str, status: bool = False) -> None:
        """
        Insert a new item.

        Raises:
            InputInvalidError: If name is empty.
            AlreadyExistsError: If name is already present.
        """
        name = _require_name(name)
        status = _coerce_status(status)
        if name in self._items:
            raise AlreadyExistsError()
        self._items[name] = status

    def remove(self, name: str) -> Item:
        """
        Remove an item and return its (name, status) pair.

        Raises:
            InputInvalidError: If name is empty.
            NotFoundError: If name is absent.
        """
        name = _require_name(name)
        try:
            status = self._items.pop(name)
        except KeyError:
            raise NotFoundError() from None
        return (name, status)

    def edit(self, existing: str, new_name: str, *, check_collision: bool = False) -> None:
        """
        Rename ``existing`` to ``new_name``, keeping its status.

        An item already stored under ``new_name`` is overwritten unless
        ``check_collision`` is set, in which case CollisionError is raised
        and nothing changes.

        Raises:
            InputInvalidError: If either name is empty.
            NotFoundError: If existing is absent.
            CollisionError: If check_collision and new_name names another item.
        """
        existing = _require_name(existing)
        new_name = _require_name(new_name)
        if existing not in self._items:
            raise NotFoundError()
        if check_collision and new_name != existing and new_name in self._items:
            raise CollisionError(existing, new_name)
        status = self._items.pop(existing)
        self._items[new_name] = status

    def set_status(self, name: str, status: bool) -> None:
        """
        Insert or overwrite the status for ``name``.

        This is an upsert: an absent name is created.

        Raises:
            InputInvalidError: If name is empty or status is not bool.
        """
        name = _require_name(name)
        self._items[name] = _coerce_status(status)

    def clear(self) -> None:
        self._items.clear()


__all__ = ["TodoStore", "Item"]

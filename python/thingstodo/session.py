"""
TodoSession: apply command payloads to a store and persist it.

A session owns one TodoStore for the lifetime of a process invocation. It
is loaded (or started empty) on open, mutated only through apply(), and
saved with the configured default codec at the end.

Example:
    >>> with TodoSession.open(settings, on_load_error="empty") as session:
    ...     result = session.apply(Add("buy milk"))
    ...     print(result.ok, result.text)

apply() never raises for domain errors: a TodoError comes back as a
CommandResult with ``ok=False`` and the error attached, and the caller
decides whether to keep going.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Literal

from thingstodo.codec import CodecSpec, all_codecs, get_codec
from thingstodo.commands import (
    Add,
    Clear,
    Command,
    Debug,
    Edit,
    List,
    ListFiltered,
    Remove,
    SetStatus,
    action_of,
)
from thingstodo.errors import (
    CodecError,
    DataFileNotFoundError,
    InputInvalidError,
    PersistenceError,
    TodoError,
)
from thingstodo.harness import run_codec_harness
from thingstodo.oplog import OperationLog
from thingstodo.persistence import load_store, save_store
from thingstodo.report import render_text_report
from thingstodo.selftest import run_diff_selftest
from thingstodo.settings import AppSettings, default_settings
from thingstodo.store import Item, TodoStore

EMPTY_LIST_TEXT = (
    "No todos in database, you're either very on top of things or slacking reallllllly bad."
)


@dataclass
class CommandResult:
    ok: bool
    action: str
    items: list[Item] | None = None
    names: list[str] | None = None
    data: Any = None
    error: TodoError | None = None
    text: str = ""


def _entry_word(n: int) -> str:
    return "entry" if n == 1 else "entries"


def render_checklist(items: list[Item]) -> str:
    if not items:
        return EMPTY_LIST_TEXT
    lines = ["All Todos", "--- -----"]
    lines.extend(f"{'[X]' if status else '[ ]'} {name!r}" for name, status in items)
    return "\n".join(lines)


def render_filtered(names: list[str], status: bool) -> str:
    if not names:
        return f"There are no {'completed' if status else 'incomplete'} todos in the database."
    heading = "Completed" if status else "Incomplete"
    lines = [f"{heading} Todos", f"{'-' * len(heading)} -----"]
    lines.extend(f"\t* {name!r}" for name in names)
    return "\n".join(lines)


class TodoSession:
    def __init__(
        self,
        store: TodoStore | None = None,
        settings: AppSettings | None = None,
        oplog: OperationLog | None = None,
    ):
        self.store = TodoStore() if store is None else store
        self.settings = default_settings() if settings is None else settings
        self.codec: CodecSpec = get_codec(self.settings.default_codec)
        self.oplog = OperationLog(self.settings.oplog_path) if oplog is None else oplog
        self.closed = False

    @classmethod
    def open(
        cls,
        settings: AppSettings | None = None,
        *,
        on_load_error: Literal["raise", "empty"] = "raise",
    ) -> "TodoSession":
        """
        Load the persisted store and start a session.

        A missing data file always starts an empty store.

        Args:
            settings: Resolved settings (defaults if None).
            on_load_error: "raise" propagates PersistenceError/CodecError for
                an unreadable or corrupt file; "empty" starts with an empty
                store instead.
        """
        session = cls(settings=settings)
        try:
            session.store = load_store(session.codec, session.settings.data_dir)
        except DataFileNotFoundError as exc:
            session.oplog.log(op="load", ok=True, codec=session.codec.name, items=0, missing=str(exc.path))
        except (PersistenceError, CodecError) as exc:
            session.oplog.log(op="load", ok=False, codec=session.codec.name, error=str(exc))
            if on_load_error == "raise":
                session.oplog.close()
                raise
        else:
            session.oplog.log(op="load", ok=True, codec=session.codec.name, items=len(session.store))
        return session

    # ------------------------------------------------------------------
    # Command application
    # ------------------------------------------------------------------

    def apply(self, command: Command) -> CommandResult:
        """Apply one payload; domain errors are returned, not raised."""
        action = action_of(command).display_name
        try:
            result = self._dispatch(command)
        except TodoError as exc:
            result = CommandResult(ok=False, action=action, error=exc, text=str(exc))
        self.oplog.log(
            op="command",
            action=action,
            ok=result.ok,
            error=None if result.error is None else str(result.error),
            items=len(self.store),
        )
        return result

    def _dispatch(self, command: Command) -> CommandResult:
        store = self.store
        action = action_of(command).display_name

        if isinstance(command, Add):
            store.add(command.name, False)
            return CommandResult(ok=True, action=action, text=f"Added {command.name!r}.")
        if isinstance(command, Clear):
            n = len(store)
            store.clear()
            return CommandResult(ok=True, action=action, text=f"Cleared {n} {_entry_word(n)}.")
        if isinstance(command, Edit):
            store.edit(command.existing, command.new_name, check_collision=self.settings.strict_edit)
            return CommandResult(
                ok=True, action=action, text=f"Renamed {command.existing!r} to {command.new_name!r}."
            )
        if isinstance(command, List):
            items = store.sorted_items()
            return CommandResult(ok=True, action=action, items=items, text=render_checklist(items))
        if isinstance(command, ListFiltered):
            names = sorted(store.names_with_status(command.status))
            return CommandResult(
                ok=True, action=action, names=names, text=render_filtered(names, command.status)
            )
        if isinstance(command, Remove):
            name, _status = store.remove(command.name)
            return CommandResult(ok=True, action=action, text=f"Removed {name!r}.")
        if isinstance(command, SetStatus):
            store.set_status(command.name, command.status)
            word = "complete" if command.status else "incomplete"
            return CommandResult(ok=True, action=action, text=f"Marked {command.name!r} as {word}.")
        if isinstance(command, Debug):
            return self._run_debug(command.text, action)
        raise TypeError(f"unsupported command payload: {command!r}")

    def _run_debug(self, text: str, action: str) -> CommandResult:
        word = text.strip().lower()
        if word == "encoding":
            report = run_codec_harness(
                self.store,
                codecs=all_codecs(),
                diagnostic_dir=self.settings.diagnostic_dir,
                repeats=self.settings.harness_repeats,
            )
            self.oplog.log(
                op="harness",
                items=report.item_count,
                outcomes=report.outcome_counts(),
                failed=[r.codec for r in report.failed()],
            )
            return CommandResult(ok=True, action=action, data=report, text=render_text_report(report))
        if word == "diff":
            outcome = run_diff_selftest(self.store, seed=self.settings.seed)
            self.oplog.log(
                op="diff_selftest",
                seed=outcome.seed,
                changes=len(outcome.changes),
                entries=len(outcome.diff),
                expected=outcome.expected_entries,
            )
            return CommandResult(ok=True, action=action, data=outcome, text=outcome.render())
        raise InputInvalidError(f"Unknown debug command {text!r}")

    # ------------------------------------------------------------------
    # Persistence / lifecycle
    # ------------------------------------------------------------------

    def summary(self) -> str:
        n = len(self.store)
        return f"Todo-List contains {n} {_entry_word(n)}."

    def save(self) -> Path:
        """
        Persist the store with the session codec.

        Raises:
            CodecError: Encoding failed.
            PersistenceError: Writing failed.
        """
        path = save_store(
            self.store, self.codec, self.settings.data_dir, backup=self.settings.use_backup
        )
        self.oplog.log(op="save", codec=self.codec.name, path=str(path), items=len(self.store))
        return path

    def close(self) -> None:
        if not self.closed:
            self.oplog.close()
            self.closed = True

    def __enter__(self) -> "TodoSession":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        try:
            if exc_type is None:
                self.save()
        finally:
            self.close()


__all__ = [
    "CommandResult",
    "TodoSession",
    "EMPTY_LIST_TEXT",
    "render_checklist",
    "render_filtered",
]

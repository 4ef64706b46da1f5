"""
ThingsTodo: a small todo record store with pluggable encodings.

This package provides:

- TodoStore: name -> completion status, with add/remove/edit/set/clear
- diff(): structural comparison of two store snapshots
- A codec registry (Bson, Cbor, FlexBuffer, Json, MsgPack) over a shared
  ``{"items": {...}}`` envelope, used for whole-file persistence
- run_codec_harness(): encode/persist/decode/diff every codec and rank
  them by size and latency
- TodoSession: applies parsed command payloads and saves on exit

Example:
    >>> from thingstodo import TodoSession, load_settings, parse_command
    >>>
    >>> with TodoSession.open(load_settings(), on_load_error="empty") as s:
    ...     print(s.apply(parse_command(["add", "buy milk"])).text)
    ...     print(s.apply(parse_command(["ls"])).text)

Thread Safety:
    None. A session and its store belong to one command-processing path.
"""

from __future__ import annotations

try:
    from importlib.metadata import version as _pkg_version

    __version__ = _pkg_version("thingstodo")
except Exception:
    __version__ = "0+unknown"

from thingstodo.codec import CODEC_ORDER, DEFAULT_CODEC, CodecSpec, all_codecs, get_codec
from thingstodo.commands import (
    ActionType,
    Add,
    Clear,
    Command,
    Debug,
    Edit,
    List,
    ListFiltered,
    Remove,
    SetStatus,
    create_payload,
    parse_action,
    parse_command,
    string_to_bool,
)
from thingstodo.diff import DiffResult, Missing, StatusMismatch, diff
from thingstodo.errors import (
    AlreadyExistsError,
    CodecError,
    CollisionError,
    DataFileNotFoundError,
    InputError,
    InputInvalidError,
    NotFoundError,
    PersistenceError,
    StorageIOError,
    TodoError,
    UnknownCodecError,
)
from thingstodo.harness import CodecRun, HarnessReport, report_to_dict, run_codec_harness
from thingstodo.persistence import load_store, save_store
from thingstodo.session import CommandResult, TodoSession
from thingstodo.settings import AppSettings, load_settings
from thingstodo.store import TodoStore

__all__ = [
    # Store
    "TodoStore",
    # Diff
    "diff",
    "DiffResult",
    "Missing",
    "StatusMismatch",
    # Codecs and persistence
    "CodecSpec",
    "CODEC_ORDER",
    "DEFAULT_CODEC",
    "all_codecs",
    "get_codec",
    "load_store",
    "save_store",
    # Harness
    "CodecRun",
    "HarnessReport",
    "run_codec_harness",
    "report_to_dict",
    # Commands
    "ActionType",
    "Add",
    "Clear",
    "Command",
    "Debug",
    "Edit",
    "List",
    "ListFiltered",
    "Remove",
    "SetStatus",
    "create_payload",
    "parse_action",
    "parse_command",
    "string_to_bool",
    # Session
    "AppSettings",
    "load_settings",
    "CommandResult",
    "TodoSession",
    # Exceptions
    "TodoError",
    "AlreadyExistsError",
    "NotFoundError",
    "InputInvalidError",
    "CollisionError",
    "PersistenceError",
    "DataFileNotFoundError",
    "StorageIOError",
    "CodecError",
    "UnknownCodecError",
    "InputError",
    # Version
    "__version__",
]

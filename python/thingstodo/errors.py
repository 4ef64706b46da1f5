"""
Error taxonomy for ThingsTodo.

Three families are kept apart so callers can tell them apart:

- TodoError: domain errors raised by the record store (bad names, missing
  or duplicate items). The session turns these into failed CommandResults.
- PersistenceError: filesystem problems while loading or saving.
- CodecError: a codec could not encode or decode a store.

InputError covers command-line validation before a payload exists.
"""

from __future__ import annotations

from pathlib import Path


class TodoError(Exception):
    """Base class for record store errors."""

    message = "Todo error"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.message)

    def __str__(self) -> str:
        return self.args[0]


class AlreadyExistsError(TodoError):
    """add() was given a name that is already in the store."""

    message = "Todo already exists with that name"


class NotFoundError(TodoError):
    """remove()/edit() referenced a name that is not in the store."""

    message = "Todo with that name not found"


class InputInvalidError(TodoError):
    """Structurally invalid input reached the store (e.g. an empty name)."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Input invalid, {reason}")


class CollisionError(TodoError):
    """edit() target already names another item (strict edit mode only)."""

    def __init__(self, existing: str, new_name: str):
        self.existing = existing
        self.new_name = new_name
        super().__init__(
            f"Cannot rename {existing!r} to {new_name!r}: a todo with that name already exists"
        )


class PersistenceError(Exception):
    """Base class for load/save failures at the filesystem level."""


class DataFileNotFoundError(PersistenceError):
    """load_store() target file does not exist."""

    def __init__(self, path: Path):
        self.path = Path(path)
        super().__init__(f"File {str(self.path)!r} not found!")


class StorageIOError(PersistenceError):
    """Reading or writing a data file failed."""

    def __init__(self, path: Path, operation: str, detail: str):
        self.path = Path(path)
        self.operation = operation
        self.detail = detail
        super().__init__(f"Error during {operation} of {str(self.path)!r}: {detail}")


class CodecError(Exception):
    """A codec failed to encode or decode a store."""

    def __init__(self, codec: str, phase: str, detail: str):
        self.codec = codec
        self.phase = phase
        self.detail = detail
        super().__init__(f"{codec} {phase} failed: {detail}")


class UnknownCodecError(LookupError):
    """No codec is registered under the requested name."""

    def __init__(self, name: str, known: list[str]):
        self.name = name
        self.known = list(known)
        super().__init__(f"Unknown codec {name!r} (known: {', '.join(self.known)})")


class InputError(ValueError):
    """Command-line input could not be turned into a command payload."""


class InvalidCommandError(InputError):
    """The command word was empty or not recognised."""


class InvalidArgumentError(InputError):
    """The arguments do not match what the command expects."""


__all__ = [
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
    "InvalidCommandError",
    "InvalidArgumentError",
]

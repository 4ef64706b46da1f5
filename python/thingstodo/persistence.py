"""Whole-file load/save of a TodoStore through one codec."""

from __future__ import annotations

import shutil
from pathlib import Path

from thingstodo.codec import CodecSpec
from thingstodo.errors import DataFileNotFoundError, StorageIOError
from thingstodo.store import TodoStore

DATA_STEM = "data"
DIAGNOSTIC_SUFFIX = ".dat"
BACKUP_SUFFIX = ".bak"


def data_path(codec: CodecSpec, data_dir: str | Path = ".") -> Path:
    return Path(data_dir) / f"{DATA_STEM}.{codec.file_ext}"


def diagnostic_path(codec: CodecSpec, diagnostic_dir: str | Path = "data") -> Path:
    return Path(diagnostic_dir) / f"{codec.name}{DIAGNOSTIC_SUFFIX}"


def backup_path(path: Path) -> Path:
    return path.with_name(path.name + BACKUP_SUFFIX)


def save_bytes(path: str | Path, data: bytes) -> None:
    """
    Write ``data`` to ``path``, creating parent directories and overwriting
    any existing file.

    Raises:
        StorageIOError: On any filesystem failure.
    """
    path = Path(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
    except OSError as exc:
        raise StorageIOError(path, "write", str(exc)) from exc


def load_bytes(path: str | Path) -> bytes:
    """
    Read every byte of ``path``.

    Raises:
        DataFileNotFoundError: If the file does not exist.
        StorageIOError: On any other filesystem failure.
    """
    path = Path(path)
    try:
        return path.read_bytes()
    except FileNotFoundError as exc:
        raise DataFileNotFoundError(path) from exc
    except OSError as exc:
        raise StorageIOError(path, "read", str(exc)) from exc


def save_store(
    store: TodoStore,
    codec: CodecSpec,
    data_dir: str | Path = ".",
    *,
    backup: bool = False,
) -> Path:
    """
    Encode ``store`` with ``codec`` and write it to ``data.<ext>``.

    Args:
        store: Store to persist.
        codec: Codec used for the whole file.
        data_dir: Directory holding the data file (created if missing).
        backup: If True and the data file exists, copy it to
            ``data.<ext>.bak`` before overwriting.

    Returns:
        Path of the written file.

    Raises:
        CodecError: If encoding fails (nothing is written).
        StorageIOError: If the backup or the write fails.
    """
    payload = codec.encode(store)
    path = data_path(codec, data_dir)
    if backup and path.exists():
        bak = backup_path(path)
        try:
            shutil.copy2(path, bak)
        except OSError as exc:
            raise StorageIOError(bak, "backup", str(exc)) from exc
    save_bytes(path, payload)
    return path


def load_store(codec: CodecSpec, data_dir: str | Path = ".") -> TodoStore:
    """
    Read ``data.<ext>`` and decode it with ``codec``.

    Raises:
        DataFileNotFoundError: If the data file does not exist.
        StorageIOError: If reading fails.
        CodecError: If the bytes do not decode to a valid store.
    """
    path = data_path(codec, data_dir)
    if not path.exists():
        raise DataFileNotFoundError(path)
    return TodoStore.from_mapping(codec.decode(load_bytes(path)))


__all__ = [
    "data_path",
    "diagnostic_path",
    "backup_path",
    "save_bytes",
    "load_bytes",
    "save_store",
    "load_store",
]

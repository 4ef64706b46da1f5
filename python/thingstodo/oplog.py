"""Append-only JSONL audit trail of session events."""

from __future__ import annotations

import json
import time
from pathlib import Path
from typing import Any, IO


class OperationLog:
    """
    One JSON object per line: ``{"seq": n, "t": wall_clock, **fields}``.

    A None path keeps sequence numbers but writes nothing.
    """

    def __init__(self, path: str | Path | None, *, append: bool = True):
        self._file: IO[str] | None = None
        self.path = None if path is None else Path(path)
        if self.path is not None:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self._file = self.path.open("a" if append else "w", encoding="utf-8")
        self._seq = 0

    @property
    def seq(self) -> int:
        return self._seq

    def log(self, **fields: Any) -> None:
        self._seq += 1
        record = {"seq": self._seq, "t": time.time(), **fields}
        if self._file:
            self._file.write(json.dumps(record, default=str) + "\n")

    def close(self) -> None:
        if self._file:
            self._file.flush()
            self._file.close()
            self._file = None

    def __enter__(self) -> "OperationLog":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


def read_oplog(path: str | Path) -> list[dict[str, Any]]:
    with Path(path).open(encoding="utf-8") as f:
        return [json.loads(line) for line in f if line.strip()]


__all__ = ["OperationLog", "read_oplog"]

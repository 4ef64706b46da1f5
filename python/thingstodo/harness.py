"""
Codec benchmark/validation harness.

For every codec: encode the store (timed), write the bytes to a diagnostic
artifact, then read the artifact back, decode it (timed) and diff the result
against the original. A codec passes only when the diff is identical.

A failing codec never stops the run: its outcome is recorded and the next
codec is tried, so every codec appears in the report.
"""

from __future__ import annotations

import platform
import statistics
import time
from dataclasses import asdict, dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Iterable, Literal, Mapping

import psutil

from thingstodo.codec import CodecSpec, all_codecs
from thingstodo.diff import diff
from thingstodo.errors import CodecError, PersistenceError
from thingstodo.persistence import diagnostic_path, load_bytes, save_bytes

SCHEMA_VERSION = "codec_harness_v1"

Outcome = Literal["pass", "diff_fail", "encode_error", "decode_error", "io_error", "pending"]
OUTCOMES: tuple[str, ...] = ("pass", "diff_fail", "encode_error", "decode_error", "io_error")


@dataclass
class CodecRun:
    codec: str
    file_ext: str
    outcome: Outcome = "pending"
    encoded_bytes: int | None = None
    encode_time_s: float | None = None
    decode_time_s: float | None = None
    encode_samples_s: list[float] = field(default_factory=list)
    artifact: str | None = None
    diff_entries: list[str] = field(default_factory=list)
    error: str | None = None

    @property
    def passed(self) -> bool:
        return self.outcome == "pass"


@dataclass
class HarnessReport:
    item_count: int
    runs: list[CodecRun]
    diagnostic_dir: str
    repeats: int
    timestamp: str = field(default_factory=lambda: datetime.now().isoformat())
    system: dict[str, Any] = field(default_factory=dict)

    @property
    def all_passed(self) -> bool:
        return all(r.passed for r in self.runs)

    def failed(self) -> list[CodecRun]:
        return [r for r in self.runs if not r.passed]

    def size_ranking(self) -> list[CodecRun]:
        """Runs ordered by encoded size, smallest first; unencoded runs last."""
        return sorted(
            self.runs,
            key=lambda r: (r.encoded_bytes is None, r.encoded_bytes or 0, r.codec),
        )

    def timing_ranking(self) -> list[CodecRun]:
        """Runs ordered by encode latency, fastest first; failed encodes last."""
        return sorted(
            self.runs,
            key=lambda r: (
                r.outcome == "encode_error" or r.encode_time_s is None,
                r.encode_time_s or 0.0,
                r.codec,
            ),
        )

    def outcome_counts(self) -> dict[str, int]:
        counts = {o: 0 for o in OUTCOMES}
        for r in self.runs:
            counts[r.outcome] = counts.get(r.outcome, 0) + 1
        return counts


def get_system_info() -> dict[str, Any]:
    """Platform and process resource snapshot recorded with each report."""
    proc = psutil.Process()
    return {
        "platform": platform.platform(),
        "python_version": platform.python_version(),
        "cpu_count": psutil.cpu_count(logical=True),
        "rss_mb": proc.memory_info().rss / (1024 * 1024),
        "total_memory_mb": psutil.virtual_memory().total / (1024 * 1024),
    }


def _encode_phase(
    spec: CodecSpec,
    snapshot: Mapping[str, bool],
    run: CodecRun,
    repeats: int,
    diagnostic_dir: Path,
) -> None:
    payload = b""
    for _ in range(repeats):
        t0 = time.perf_counter()
        try:
            payload = spec.encode(snapshot)
        except CodecError as exc:
            run.encode_samples_s.append(time.perf_counter() - t0)
            run.encode_time_s = statistics.median(run.encode_samples_s)
            run.outcome = "encode_error"
            run.error = str(exc)
            return
        run.encode_samples_s.append(time.perf_counter() - t0)

    run.encode_time_s = statistics.median(run.encode_samples_s)
    run.encoded_bytes = len(payload)

    path = diagnostic_path(spec, diagnostic_dir)
    try:
        save_bytes(path, payload)
    except PersistenceError as exc:
        run.outcome = "io_error"
        run.error = str(exc)
        return
    run.artifact = str(path)


def _decode_phase(spec: CodecSpec, snapshot: Mapping[str, bool], run: CodecRun) -> None:
    if run.artifact is None:
        raise ValueError(f"{run.codec}: no artifact to decode")
    try:
        data = load_bytes(run.artifact)
    except PersistenceError as exc:
        run.outcome = "io_error"
        run.error = str(exc)
        return

    t0 = time.perf_counter()
    try:
        recreated = spec.decode(data)
    except CodecError as exc:
        run.decode_time_s = time.perf_counter() - t0
        run.outcome = "decode_error"
        run.error = str(exc)
        return
    run.decode_time_s = time.perf_counter() - t0

    result = diff(snapshot, recreated)
    if result.identical:
        run.outcome = "pass"
    else:
        run.outcome = "diff_fail"
        run.diff_entries = result.describe()


def run_codec_harness(
    store: Mapping[str, bool],
    *,
    codecs: Iterable[CodecSpec] | None = None,
    diagnostic_dir: str | Path = "data",
    repeats: int = 1,
) -> HarnessReport:
    """
    Exercise every codec over ``store``.

    Args:
        store: Store (or any name -> status mapping) to round-trip. It is
            only read.
        codecs: Codecs to run; defaults to all registered codecs in
            enumeration order.
        diagnostic_dir: Directory for ``<Codec>.dat`` artifacts.
        repeats: Encode repetitions; the reported encode time is the median.

    Returns:
        HarnessReport with one CodecRun per codec, in input order.
    """
    specs = list(codecs) if codecs is not None else all_codecs()
    repeats = max(1, repeats)
    diagnostic_dir = Path(diagnostic_dir)
    snapshot = dict(store)

    runs = [CodecRun(codec=spec.name, file_ext=spec.file_ext) for spec in specs]

    for spec, run in zip(specs, runs):
        _encode_phase(spec, snapshot, run, repeats, diagnostic_dir)

    for spec, run in zip(specs, runs):
        if run.artifact is not None:
            _decode_phase(spec, snapshot, run)

    return HarnessReport(
        item_count=len(snapshot),
        runs=runs,
        diagnostic_dir=str(diagnostic_dir),
        repeats=repeats,
        system=get_system_info(),
    )


def report_to_dict(report: HarnessReport) -> dict[str, Any]:
    """Convert a report to plain JSON-serializable structures."""
    return {
        "schema_version": SCHEMA_VERSION,
        "timestamp": report.timestamp,
        "item_count": report.item_count,
        "diagnostic_dir": report.diagnostic_dir,
        "repeats": report.repeats,
        "system": dict(report.system),
        "runs": [asdict(r) for r in report.runs],
        "size_ranking": [r.codec for r in report.size_ranking()],
        "timing_ranking": [r.codec for r in report.timing_ranking()],
        "summary": {
            "all_passed": report.all_passed,
            "outcome_counts": report.outcome_counts(),
            "failed": [r.codec for r in report.failed()],
        },
    }


__all__ = [
    "SCHEMA_VERSION",
    "OUTCOMES",
    "CodecRun",
    "HarnessReport",
    "get_system_info",
    "run_codec_harness",
    "report_to_dict",
]

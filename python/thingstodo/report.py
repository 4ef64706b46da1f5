"""Text and Markdown rendering for codec harness reports."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Any

from thingstodo.harness import HarnessReport


def _fmt_bytes(n: int | None) -> str:
    return "n/a" if n is None else str(n)


def _fmt_ms(seconds: float | None) -> str:
    return "n/a" if seconds is None else f"{seconds * 1000.0:.3f}"


def render_text_report(report: HarnessReport) -> str:
    lines: list[str] = []
    lines.append(f"Codec round-trip report ({report.item_count} items, repeats={report.repeats})")
    lines.append("")

    lines.append("Serialization Size Results")
    lines.append(f"{'Encoding':^12}{'Bytes':^9}")
    for r in report.size_ranking():
        lines.append(f"{r.codec:^12}{_fmt_bytes(r.encoded_bytes):^9}")
    lines.append("")

    lines.append("Serialization Time Results (in ms)")
    lines.append(f"{'Encoding':^12}{'Se Time':^11}{'De Time':^11}")
    for r in report.timing_ranking():
        lines.append(f"{r.codec:^12}{_fmt_ms(r.encode_time_s):^11}{_fmt_ms(r.decode_time_s):^11}")
    lines.append("")

    lines.append("Round-trip Correctness")
    for r in report.runs:
        status = r.outcome.upper()
        if r.outcome == "pass":
            lines.append(f"  {r.codec:<12}{status}")
        elif r.outcome == "diff_fail":
            lines.append(f"  {r.codec:<12}{status} ({len(r.diff_entries)} entries)")
            for msg in r.diff_entries:
                lines.append(f"      - {msg}")
        else:
            lines.append(f"  {r.codec:<12}{status} {r.error or ''}".rstrip())
    lines.append("")

    failed = report.failed()
    if failed:
        lines.append(f"{len(failed)} of {len(report.runs)} codecs FAILED: {', '.join(r.codec for r in failed)}")
    else:
        lines.append(f"All {len(report.runs)} codecs round-tripped identically.")
    return "\n".join(lines)


def build_markdown_report(payload: dict[str, Any]) -> str:
    ts = payload.get("timestamp", datetime.now().isoformat())
    system = payload.get("system", {})
    summary = payload.get("summary", {})
    runs = {r.get("codec"): r for r in payload.get("runs", [])}

    lines: list[str] = []
    lines.append("# ThingsTodo Codec Harness Report")
    lines.append("")
    lines.append(f"- Timestamp: `{ts}`")
    lines.append(f"- Items: `{payload.get('item_count', 0)}`")
    lines.append(f"- Repeats: `{payload.get('repeats', 1)}`")
    lines.append(f"- Platform: `{system.get('platform', 'unknown')}`")
    lines.append(f"- Python: `{system.get('python_version', 'unknown')}`")
    lines.append(f"- CPU Count: `{system.get('cpu_count', 'unknown')}`")
    lines.append(f"- Diagnostic Dir: `{payload.get('diagnostic_dir', 'unknown')}`")
    lines.append("")

    counts = summary.get("outcome_counts", {})
    lines.append("## Outcome Summary")
    lines.append("")
    lines.append("| pass | diff_fail | encode_error | decode_error | io_error |")
    lines.append("|---:|---:|---:|---:|---:|")
    lines.append(
        f"| {counts.get('pass', 0)} | {counts.get('diff_fail', 0)} | {counts.get('encode_error', 0)} "
        f"| {counts.get('decode_error', 0)} | {counts.get('io_error', 0)} |"
    )

    lines.append("")
    lines.append("## Size Ranking")
    lines.append("")
    lines.append("| Rank | Codec | Bytes | Outcome |")
    lines.append("|---:|---|---:|---|")
    for i, name in enumerate(payload.get("size_ranking", []), start=1):
        r = runs.get(name, {})
        lines.append(f"| {i} | {name} | {_fmt_bytes(r.get('encoded_bytes'))} | {str(r.get('outcome', 'na')).upper()} |")

    lines.append("")
    lines.append("## Timing Ranking")
    lines.append("")
    lines.append("| Rank | Codec | Encode ms | Decode ms | Outcome |")
    lines.append("|---:|---|---:|---:|---|")
    for i, name in enumerate(payload.get("timing_ranking", []), start=1):
        r = runs.get(name, {})
        lines.append(
            f"| {i} | {name} | {_fmt_ms(r.get('encode_time_s'))} | {_fmt_ms(r.get('decode_time_s'))} "
            f"| {str(r.get('outcome', 'na')).upper()} |"
        )

    failures = [r for r in payload.get("runs", []) if r.get("outcome") != "pass"]
    if failures:
        lines.append("")
        lines.append("## Failures")
        lines.append("")
        for r in failures:
            lines.append(f"- `{r.get('codec')}` {str(r.get('outcome')).upper()}: {r.get('error') or ''}".rstrip())
            for msg in r.get("diff_entries", []):
                lines.append(f"  - {msg}")
    lines.append("")
    return "\n".join(lines)


def write_markdown_report(payload: dict[str, Any], path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(build_markdown_report(payload), encoding="utf-8")


__all__ = ["render_text_report", "build_markdown_report", "write_markdown_report"]

#!/usr/bin/env python3
"""Codec round-trip benchmark for ThingsTodo stores."""

from __future__ import annotations

import argparse
import json
import random
from pathlib import Path
from typing import Any

from thingstodo import (
    AppSettings,
    CodecError,
    PersistenceError,
    TodoStore,
    get_codec,
    load_settings,
    load_store,
    report_to_dict,
    run_codec_harness,
)
from thingstodo.codec import all_codecs
from thingstodo.errors import DataFileNotFoundError
from thingstodo.report import render_text_report, write_markdown_report

DEFAULT_SEED = 12345


def generate_store(count: int, seed: int = DEFAULT_SEED) -> TodoStore:
    """Build a reproducible synthetic store of ``count`` items."""
    rng = random.Random(seed)
    store = TodoStore()
    for i in range(count):
        store.add(f"Synthetic todo {i:06d} {rng.getrandbits(32):08x}", rng.random() < 0.5)
    return store


def _resolve_settings(args: argparse.Namespace) -> AppSettings:
    settings = load_settings(Path(args.config) if args.config else None)
    if args.data_dir is not None:
        settings.data_dir = args.data_dir
    if args.diagnostic_dir is not None:
        settings.diagnostic_dir = args.diagnostic_dir
    if args.repeats is not None:
        settings.harness_repeats = max(1, args.repeats)
    return settings


def _resolve_codecs(codec_override: str | None):
    if not codec_override:
        return all_codecs()
    return [get_codec(x) for x in codec_override.split(",") if x.strip()]


def _load_source_store(args: argparse.Namespace, settings: AppSettings) -> TodoStore:
    if args.generate is not None:
        print(f"[codec-bench] Generating synthetic store: items={args.generate} seed={args.seed}")
        return generate_store(args.generate, args.seed)
    codec = get_codec(settings.default_codec)
    try:
        store = load_store(codec, settings.data_dir)
    except DataFileNotFoundError as exc:
        print(f"[codec-bench] {exc} Running against an empty store.")
        return TodoStore()
    print(f"[codec-bench] Loaded {len(store)} items with {codec.name} from {settings.data_dir}")
    return store


def run_benchmark(args: argparse.Namespace) -> tuple[int, dict[str, Any]]:
    settings = _resolve_settings(args)
    store = _load_source_store(args, settings)

    report = run_codec_harness(
        store,
        codecs=_resolve_codecs(args.codecs),
        diagnostic_dir=settings.diagnostic_dir,
        repeats=settings.harness_repeats,
    )
    payload = report_to_dict(report)
    payload["config"] = {
        "data_dir": settings.data_dir,
        "default_codec": settings.default_codec,
        "generate": args.generate,
        "seed": args.seed,
    }

    print(render_text_report(report))

    if args.export_json:
        out_json = Path(args.export_json)
        out_json.parent.mkdir(parents=True, exist_ok=True)
        with out_json.open("w") as f:
            json.dump(payload, f, indent=2)
        print(f"Harness JSON exported: {out_json}")

    if args.export_md:
        out_md = Path(args.export_md)
        write_markdown_report(payload, out_md)
        print(f"Harness Markdown exported: {out_md}")

    counts = payload["summary"]["outcome_counts"]
    print(
        "Harness summary | "
        f"codecs={len(report.runs)} "
        f"pass={counts.get('pass', 0)} "
        f"diff_fail={counts.get('diff_fail', 0)} "
        f"errors={len(report.runs) - counts.get('pass', 0) - counts.get('diff_fail', 0)}"
    )

    if not report.all_passed:
        return 2, payload
    return 0, payload


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="ThingsTodo codec round-trip benchmark")
    parser.add_argument("--config", type=str, help="Path to settings JSON file")
    parser.add_argument("--data-dir", type=str, default=None, help="Directory holding data.<ext>")
    parser.add_argument("--diagnostic-dir", type=str, default=None, help="Directory for <Codec>.dat artifacts")
    parser.add_argument("--codecs", type=str, help="Comma-separated codec names override")
    parser.add_argument("--generate", type=int, default=None,
                        help="Benchmark a synthetic store of N items instead of the data file")
    parser.add_argument("--seed", type=int, default=DEFAULT_SEED)
    parser.add_argument("--repeats", type=int, default=None,
                        help="Encode repetitions per codec (median is reported)")
    parser.add_argument("--export-json", type=str, default=None)
    parser.add_argument("--export-md", type=str, default=None)
    return parser


def main() -> int:
    parser = build_parser()
    args = parser.parse_args()
    try:
        code, _payload = run_benchmark(args)
    except (ValueError, LookupError, PersistenceError, CodecError) as exc:
        print(f"[codec-bench] {exc}")
        return 1
    return code


if __name__ == "__main__":
    raise SystemExit(main())

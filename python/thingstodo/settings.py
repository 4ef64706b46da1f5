"""Application settings: defaults, JSON config file, environment overrides."""

from __future__ import annotations

import json
import os
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Mapping

from thingstodo.codec import DEFAULT_CODEC, get_codec

ENV_PREFIX = "THINGSTODO_"

# env var suffix -> settings field
_ENV_FIELDS = {
    "DATA_DIR": "data_dir",
    "DIAGNOSTIC_DIR": "diagnostic_dir",
    "CODEC": "default_codec",
    "USE_BACKUP": "use_backup",
    "STRICT_EDIT": "strict_edit",
    "OPLOG": "oplog_path",
    "HARNESS_REPEATS": "harness_repeats",
    "SEED": "seed",
}


@dataclass
class AppSettings:
    data_dir: str = "."
    diagnostic_dir: str = "data"
    default_codec: str = DEFAULT_CODEC
    use_backup: bool = True
    strict_edit: bool = False
    oplog_path: str | None = None
    harness_repeats: int = 1
    seed: int | None = None


def default_settings() -> AppSettings:
    return AppSettings()


def _parse_env_bool(key: str, raw: str) -> bool:
    word = raw.strip().lower()
    if word in ("1", "true", "yes", "on"):
        return True
    if word in ("0", "false", "no", "off"):
        return False
    raise ValueError(f"{key} must be a boolean, got {raw!r}")


def _coerce_field(name: str, value: Any, source: str) -> Any:
    if name in ("use_backup", "strict_edit"):
        if isinstance(value, str):
            return _parse_env_bool(source, value)
        if not isinstance(value, bool):
            raise ValueError(f"{source} must be a boolean, got {value!r}")
        return value
    if name in ("harness_repeats", "seed"):
        if value is None and name == "seed":
            return None
        if isinstance(value, bool):
            raise ValueError(f"{source} must be an integer, got {value!r}")
        try:
            return int(value)
        except (TypeError, ValueError) as exc:
            raise ValueError(f"{source} must be an integer, got {value!r}") from exc
    if name == "oplog_path":
        if value in (None, ""):
            return None
        if not isinstance(value, str):
            raise ValueError(f"{source} must be a string, got {value!r}")
        return value
    if not isinstance(value, str) or not value:
        raise ValueError(f"{source} must be a non-empty string, got {value!r}")
    return value


def load_settings(config_path: Path | None = None, env: Mapping[str, str] | None = None) -> AppSettings:
    """
    Resolve settings: defaults, then a JSON config file, then environment.

    Args:
        config_path: Optional JSON object whose keys are AppSettings fields.
        env: Environment mapping (defaults to os.environ). Recognised keys
            are ``THINGSTODO_<NAME>`` for DATA_DIR, DIAGNOSTIC_DIR, CODEC,
            USE_BACKUP, STRICT_EDIT, OPLOG, HARNESS_REPEATS, SEED.

    Raises:
        ValueError: Unknown config keys or badly typed values.
        UnknownCodecError: default_codec names no registered codec.
    """
    settings = default_settings()
    known = {f.name for f in fields(AppSettings)}

    if config_path is not None:
        with Path(config_path).open(encoding="utf-8") as f:
            raw = json.load(f)
        if not isinstance(raw, dict):
            raise ValueError(f"{config_path}: settings file must hold a JSON object")
        unknown = sorted(set(raw) - known)
        if unknown:
            raise ValueError(f"{config_path}: unknown settings keys: {', '.join(unknown)}")
        for key, value in raw.items():
            setattr(settings, key, _coerce_field(key, value, f"{config_path}:{key}"))

    env = os.environ if env is None else env
    for suffix, name in _ENV_FIELDS.items():
        key = ENV_PREFIX + suffix
        if key in env:
            setattr(settings, name, _coerce_field(name, env[key], key))

    # Normalise to the canonical codec name.
    settings.default_codec = get_codec(settings.default_codec).name
    settings.harness_repeats = max(1, settings.harness_repeats)
    return settings


def settings_to_dict(settings: AppSettings) -> dict[str, Any]:
    return asdict(settings)


__all__ = ["AppSettings", "ENV_PREFIX", "default_settings", "load_settings", "settings_to_dict"]

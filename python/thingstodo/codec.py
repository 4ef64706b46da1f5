"""
Codec registry: interchangeable encodings for a store.

Every codec encodes the same envelope::

    {"items": {name: status, ...}}

and decodes it back to a plain ``dict[str, bool]``. Codecs are described by
CodecSpec entries held in a name -> spec table, so callers select one by
name (persistence) or iterate all of them (the harness) without branching
on the encoding.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Callable, Mapping

import bson
import cbor2
import msgpack
from flatbuffers import flexbuffers

from thingstodo.errors import CodecError, UnknownCodecError

ENVELOPE_KEY = "items"

# Fixed enumeration order used by all_codecs() and the harness.
CODEC_ORDER = ["Bson", "Cbor", "FlexBuffer", "Json", "MsgPack"]
DEFAULT_CODEC = "MsgPack"


@dataclass(frozen=True)
class CodecSpec:
    name: str
    file_ext: str
    description: str
    # encode_fn takes the envelope dict; decode_fn returns the raw decoded object.
    encode_fn: Callable[[dict[str, Any]], bytes]
    decode_fn: Callable[[bytes], Any]

    def encode(self, items: Mapping[str, bool]) -> bytes:
        """
        Encode a name -> status mapping.

        Raises:
            CodecError: If the underlying library rejects the data.
        """
        envelope = {ENVELOPE_KEY: {str(k): bool(v) for k, v in items.items()}}
        try:
            return bytes(self.encode_fn(envelope))
        except Exception as exc:
            raise CodecError(self.name, "encode", str(exc) or type(exc).__name__) from exc

    def decode(self, data: bytes) -> dict[str, bool]:
        """
        Decode bytes produced by encode().

        Raises:
            CodecError: If the bytes cannot be parsed or do not hold a valid
                envelope (non-str or empty names, non-bool statuses).
        """
        try:
            raw = self.decode_fn(bytes(data))
        except Exception as exc:
            raise CodecError(self.name, "decode", str(exc) or type(exc).__name__) from exc
        return _unwrap_envelope(self.name, raw)


def _unwrap_envelope(codec: str, raw: Any) -> dict[str, bool]:
    if not isinstance(raw, Mapping) or ENVELOPE_KEY not in raw:
        raise CodecError(codec, "decode", f"expected a map with an {ENVELOPE_KEY!r} key")
    items = raw[ENVELOPE_KEY]
    if not isinstance(items, Mapping):
        raise CodecError(codec, "decode", f"{ENVELOPE_KEY!r} is not a map")
    out: dict[str, bool] = {}
    for name, status in items.items():
        if not isinstance(name, str) or not name:
            raise CodecError(codec, "decode", f"invalid item name {name!r}")
        if not isinstance(status, bool):
            raise CodecError(codec, "decode", f"status of {name!r} is not a bool: {status!r}")
        out[name] = status
    return out


# ---------------------------------------------------------------------------
# Encodings
# ---------------------------------------------------------------------------

def _json_encode(envelope: dict[str, Any]) -> bytes:
    return json.dumps(envelope, ensure_ascii=False, separators=(",", ":")).encode("utf-8")


def _json_decode(data: bytes) -> Any:
    return json.loads(data.decode("utf-8"))


def _msgpack_encode(envelope: dict[str, Any]) -> bytes:
    return msgpack.packb(envelope, use_bin_type=True)


def _msgpack_decode(data: bytes) -> Any:
    return msgpack.unpackb(data, raw=False)


# FlexBuffers map keys are ASCII-only; item names are stored unicode-escaped.
def _flex_encode(envelope: dict[str, Any]) -> bytes:
    items = {
        name.encode("unicode_escape").decode("ascii"): status
        for name, status in envelope[ENVELOPE_KEY].items()
    }
    return bytes(flexbuffers.Dumps({ENVELOPE_KEY: items}))


def _flex_decode(data: bytes) -> Any:
    raw = flexbuffers.Loads(data)
    if isinstance(raw, dict) and isinstance(raw.get(ENVELOPE_KEY), dict):
        raw[ENVELOPE_KEY] = {
            (key.encode("ascii").decode("unicode_escape") if isinstance(key, str) else key): status
            for key, status in raw[ENVELOPE_KEY].items()
        }
    return raw


def build_codec_registry() -> dict[str, CodecSpec]:
    """Return a fresh name -> CodecSpec table in enumeration order."""
    specs = [
        CodecSpec(
            name="Bson",
            file_ext="bson",
            description="length-prefixed binary documents",
            encode_fn=bson.encode,
            decode_fn=bson.decode,
        ),
        CodecSpec(
            name="Cbor",
            file_ext="cbor",
            description="compact binary object representation",
            encode_fn=cbor2.dumps,
            decode_fn=cbor2.loads,
        ),
        CodecSpec(
            name="FlexBuffer",
            file_ext="flex",
            description="schema-less flat binary buffer",
            encode_fn=_flex_encode,
            decode_fn=_flex_decode,
        ),
        CodecSpec(
            name="Json",
            file_ext="json",
            description="self-describing UTF-8 text",
            encode_fn=_json_encode,
            decode_fn=_json_decode,
        ),
        CodecSpec(
            name="MsgPack",
            file_ext="msgpack",
            description="compact binary map format",
            encode_fn=_msgpack_encode,
            decode_fn=_msgpack_decode,
        ),
    ]
    return {spec.name: spec for spec in specs}


_REGISTRY = build_codec_registry()


def all_codecs() -> list[CodecSpec]:
    return [_REGISTRY[name] for name in CODEC_ORDER]


def get_codec(name: str) -> CodecSpec:
    """
    Look up a codec by name or file extension (case-insensitive).

    Raises:
        UnknownCodecError: If nothing matches.
    """
    wanted = name.strip().lower()
    for spec in _REGISTRY.values():
        if wanted in (spec.name.lower(), spec.file_ext):
            return spec
    raise UnknownCodecError(name, CODEC_ORDER)


__all__ = [
    "CodecSpec",
    "CODEC_ORDER",
    "DEFAULT_CODEC",
    "ENVELOPE_KEY",
    "build_codec_registry",
    "all_codecs",
    "get_codec",
]

"""Byte codec for values stored in the cache backend.

Provider results are plain JSON-compatible structures (dicts, lists,
strings, numbers), so the codec is UTF-8 JSON.  Both directions raise
:class:`~src.utils.errors.CodecError` instead of leaking ``TypeError`` /
``ValueError`` so the cache-aside store has a single failure type to
absorb.
"""

from __future__ import annotations

import json
from typing import Any

from src.utils.errors import CodecError


class JsonCodec:
    """Encode values to compact UTF-8 JSON bytes and back."""

    def encode(self, value: Any) -> bytes:
        try:
            return json.dumps(value, separators=(",", ":"), ensure_ascii=False).encode("utf-8")
        except (TypeError, ValueError) as exc:
            raise CodecError(f"Value is not JSON serializable: {exc}") from exc

    def decode(self, payload: bytes | str) -> Any:
        try:
            if isinstance(payload, bytes):
                payload = payload.decode("utf-8")
            return json.loads(payload)
        except (UnicodeDecodeError, ValueError) as exc:
            raise CodecError(f"Stored payload is not valid JSON: {exc}") from exc

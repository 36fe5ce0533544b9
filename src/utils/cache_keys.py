"""Cache key construction.

Keys have the shape ``namespace:operation:param1:param2`` and must be
byte-identical for identical logical requests, so every caller goes
through :func:`build_cache_key` rather than formatting strings inline.
"""

from __future__ import annotations

from typing import Any

KEY_DELIMITER = ":"


def _render(param: Any) -> str:
    if param is None:
        return ""
    return str(param)


def build_cache_key(namespace: str, operation: str, *params: Any) -> str:
    """Join *namespace*, *operation* and *params* with ``:``.

    Parameter order is significant; ``None`` renders as an empty segment so
    an omitted optional parameter still occupies its position.

    >>> build_cache_key("flixhq", "search", "batman", 1)
    'flixhq:search:batman:1'
    >>> build_cache_key("flixhq", "watch", "e1", "m1", None)
    'flixhq:watch:e1:m1:'
    """
    parts = [namespace, operation, *(_render(p) for p in params)]
    return KEY_DELIMITER.join(parts)

"""Strict JSON validation and serialization used around the repair core."""

from __future__ import annotations

import json
from typing import Any

# Optional speed-ups
try:
    import orjson  # type: ignore

    _USE_ORJSON = True
except Exception:
    orjson = None  # type: ignore
    _USE_ORJSON = False

_SENTINEL = object()


# -----------------------------
# Strict parse (reject NaN/Inf)
# -----------------------------
def strict_loads(text: str) -> Any:
    def _bad_const(x: str) -> Any:
        raise ValueError(f"Invalid JSON constant: {x}")

    # json.loads is used here because it supports parse_constant for strictness.
    return json.loads(text, parse_constant=_bad_const)


def try_parse(text: str) -> Any:
    """Parsed value, or ``_SENTINEL`` when ``text`` is not strict JSON."""
    if not text or text.isspace():
        return _SENTINEL
    try:
        return strict_loads(text)
    except (ValueError, RecursionError):
        return _SENTINEL


def dumps(obj: Any, pretty: bool = True) -> str:
    if _USE_ORJSON:
        option = orjson.OPT_INDENT_2 if pretty else 0  # type: ignore
        try:
            return orjson.dumps(obj, option=option).decode("utf-8")  # type: ignore
        except TypeError:
            pass  # integers beyond 64 bits; stdlib handles them
    if pretty:
        return json.dumps(obj, ensure_ascii=False, indent=2)
    return json.dumps(obj, ensure_ascii=False, separators=(",", ":"))

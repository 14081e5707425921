"""
Content cleaning ahead of the repair core.

Turns an LLM reply or a hand-edited file into bare JSON-ish text:
- byte-order mark dropped
- markdown code fences and wrapping backticks unwrapped
- ``//`` line and ``/* */`` block comments removed outside strings
- prose before the first ``{`` / ``[`` dropped, and anything after the first
  balanced root (and any stray closers right after it) cut off
- a trailing truncation marker (``...``) removed

No repair actions are recorded here; the core only sees the cleaned text.
"""

from __future__ import annotations

import re
from typing import List, Optional

from .context import ContextTracker

_RE_FENCE = re.compile(
    r"^```(?:json|json5|javascript|js|python|py)?\s*\n([\s\S]*?)\n?```\s*$",
    flags=re.IGNORECASE,
)
_RE_OPEN_FENCE = re.compile(r"^```[A-Za-z0-9]*\s*\n", flags=re.IGNORECASE)
_RE_HAS_ALPHA = re.compile(r"[A-Za-z]")
_RE_TRAILING_DOTS = re.compile(r"\s*(?:\.\.\.|…)\s*\Z")


def strip_bom(text: str) -> str:
    return text[1:] if text.startswith("﻿") else text


def strip_code_fences(text: str) -> str:
    t = text.strip()
    m = _RE_FENCE.match(t)
    if m:
        return m.group(1).strip()
    # fence opened but never closed (truncated reply)
    m = _RE_OPEN_FENCE.match(t)
    if m and "```" not in t[m.end():]:
        return t[m.end():].strip()
    if t.startswith("`") and t.endswith("`") and len(t) >= 2:
        return t.strip("`").strip()
    return t


# -----------------------------
# Comment removal (// and /* */)
# -----------------------------
def remove_comments(text: str) -> str:
    out: List[str] = []
    tracker = ContextTracker()
    i = 0
    n = len(text)

    while i < n:
        c = text[i]
        if tracker.in_string:
            tracker.step(c)
            out.append(c)
            i += 1
            continue

        if c == "/" and i + 1 < n and text[i + 1] == "/":
            i += 2
            while i < n and text[i] not in "\r\n":
                i += 1
            continue

        if c == "/" and i + 1 < n and text[i + 1] == "*":
            end = text.find("*/", i + 2)
            i = n if end == -1 else end + 2
            continue

        tracker.step(c)
        out.append(c)
        i += 1

    return "".join(out)


# -----------------------------
# Root extraction (drop prose)
# -----------------------------
def extract_root(text: str) -> str:
    """
    Extract the first balanced JSON-ish root from a messy string.

    - If prose appears before the first { or [, we drop it.
    - String state comes from ContextTracker so braces inside strings don't count.
    - Unbalanced roots are returned whole for the structural engine to repair.
    - Extra }/] directly after the root are kept; only the text beyond them is cut.
    """
    first: Optional[int] = None
    for ch in ("{", "["):
        pos = text.find(ch)
        if pos != -1:
            first = pos if first is None else min(first, pos)

    if first is None:
        return text.strip()

    t = text
    if _RE_HAS_ALPHA.search(t[:first]):
        t = t[first:]
        first = 0

    if t[:first].strip():
        return t.strip()
    opener = t[first]
    closer = "}" if opener == "{" else "]"

    stack: List[str] = []
    tracker = ContextTracker()

    for i in range(first, len(t)):
        c = t[i]
        if tracker.step(c).in_string or c in "\"'“”‘’":
            continue
        if c in "{[":
            stack.append(c)
        elif c in "}]":
            if stack:
                top = stack[-1]
                if (top == "{" and c == "}") or (top == "[" and c == "]"):
                    stack.pop()
                if not stack and c == closer:
                    # stray closers right after the root stay for the structural engine
                    j = i + 1
                    while j < len(t) and t[j] in "}] \t\r\n":
                        j += 1
                    return t[:j].strip()

    return t.strip()


def strip_trailing_dots(text: str) -> str:
    """Drop a ``...`` truncation marker left at the very end, outside strings."""
    m = _RE_TRAILING_DOTS.search(text)
    if not m:
        return text
    tracker = ContextTracker()
    for c in text[: m.start()]:
        tracker.step(c)
    return text if tracker.in_string else text[: m.start()]


def clean_content(text: str) -> str:
    t = strip_bom(text)
    t = strip_code_fences(t)
    t = remove_comments(t)
    t = extract_root(t)
    t = strip_trailing_dots(t)
    return t

"""
Tolerant fallback parser.

Last resort after the repair core's output still fails strict parsing.  It
never asks the text to be valid JSON: it tokenizes leniently and builds the
value with an explicit container stack.

Leniency
- strings in "double", 'single' or “curly” quotes; unterminated at EOF is fine
- bare words: true/false/null spellings become literals, numbers become
  numbers, anything else becomes a string (``{status: active}``)
- missing / extra commas and colons are ignored
- containers left open at EOF are closed; stray closers are skipped
- a key with no value becomes ``null``

Raises ``FallbackParseError`` when no value is found or nesting exceeds
``max_depth``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Optional, Tuple, Union

from .context import QUOTE_CHARS, QUOTE_CLOSERS
from .errors import FallbackParseError
from .syntax import LITERALS

_NUMBER_RE = re.compile(r"[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?\Z")
_PUNCT = frozenset("{}[]:,")
_WORD_STOP = _PUNCT | QUOTE_CHARS | frozenset("\r\n")
_SIMPLE_ESCAPES: Dict[str, str] = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "b": "\b",
    "f": "\f",
    "/": "/",
    "\\": "\\",
    '"': '"',
    "'": "'",
}

_MISSING = object()


@dataclass
class Tok:
    kind: str  # one of "{}[]:," or "STRING" / "WORD"
    text: str
    offset: int


def _read_string(text: str, i: int) -> Tuple[str, int]:
    """Decode the literal opening at ``i``; returns (value, next_index)."""
    closers = QUOTE_CLOSERS[text[i]]
    n = len(text)
    buf: List[str] = []
    j = i + 1
    while j < n:
        c = text[j]
        if c == "\\" and j + 1 < n:
            e = text[j + 1]
            if e == "u" and j + 6 <= n:
                try:
                    buf.append(chr(int(text[j + 2 : j + 6], 16)))
                    j += 6
                    continue
                except ValueError:
                    pass
            buf.append(_SIMPLE_ESCAPES.get(e, e))
            j += 2
            continue
        if c in closers:
            return "".join(buf), j + 1
        buf.append(c)
        j += 1
    return "".join(buf), n


def tokenize(text: str) -> Iterator[Tok]:
    i = 0
    n = len(text)
    while i < n:
        c = text[i]
        if c.isspace():
            i += 1
            continue
        if c in _PUNCT:
            yield Tok(c, c, i)
            i += 1
            continue
        if c in QUOTE_CHARS:
            value, j = _read_string(text, i)
            yield Tok("STRING", value, i)
            i = j
            continue
        j = i
        while j < n and text[j] not in _WORD_STOP:
            j += 1
        word = text[i:j].strip()
        if word:
            yield Tok("WORD", word, i)
        i = j


def _word_value(word: str) -> Any:
    literal = LITERALS.get(word.lower())
    if literal is not None:
        return {"true": True, "false": False, "null": None}[literal]
    if _NUMBER_RE.match(word):
        try:
            if any(ch in word for ch in ".eE"):
                return float(word)
            return int(word)
        except (ValueError, OverflowError):
            return word
    return word


class TolerantParser:
    def __init__(self, text: str, max_depth: int = 512) -> None:
        self.text = text
        self.max_depth = max_depth
        self._stack: List[Union[list, dict]] = []
        self._keys: List[Any] = []
        self._root: Any = _MISSING

    def _add(self, value: Any, raw_key: Optional[str] = None) -> None:
        if not self._stack:
            if self._root is _MISSING:
                self._root = value
            return
        top = self._stack[-1]
        if isinstance(top, list):
            top.append(value)
            return
        key = self._keys[-1]
        if key is _MISSING:
            if isinstance(value, (dict, list)):
                top[""] = value
            else:
                self._keys[-1] = raw_key if raw_key is not None else str(value)
            return
        top[key] = value
        self._keys[-1] = _MISSING

    def _close_top(self) -> None:
        top = self._stack.pop()
        key = self._keys.pop()
        if isinstance(top, dict) and key is not _MISSING:
            top[key] = None

    def parse(self) -> Any:
        for tok in tokenize(self.text):
            kind = tok.kind
            if kind in ("{", "["):
                if len(self._stack) >= self.max_depth:
                    raise FallbackParseError(
                        f"nesting deeper than {self.max_depth}", tok.offset
                    )
                container: Union[list, dict] = {} if kind == "{" else []
                self._add(container)
                self._stack.append(container)
                self._keys.append(_MISSING)
            elif kind in ("}", "]"):
                if self._stack:
                    self._close_top()
            elif kind == ",":
                if self._stack and isinstance(self._stack[-1], dict):
                    key = self._keys[-1]
                    if key is not _MISSING:
                        self._stack[-1][key] = None
                        self._keys[-1] = _MISSING
            elif kind == ":":
                continue
            elif kind == "STRING":
                self._add(tok.text, raw_key=tok.text)
            else:
                self._add(_word_value(tok.text), raw_key=tok.text)

            if not self._stack and self._root is not _MISSING:
                break

        while self._stack:
            self._close_top()

        if self._root is _MISSING:
            raise FallbackParseError("no JSON value found")
        return self._root


def parse_tolerant(text: str, max_depth: int = 512) -> Any:
    return TolerantParser(text, max_depth).parse()

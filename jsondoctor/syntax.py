"""
Syntax normalization over structurally balanced text.

One left-to-right scan that tracks string context (``ContextTracker``) plus the
grammatical role the next token should fill (``Expectation``), and rewrites:

- quoting     : 'single' / “curly” string delimiters -> "double"
- keys        : {name: 1} -> {"name": 1}   (also numeric keys)
- values      : {"a": pending review} -> {"a": "pending review"}  (inside containers)
- literals    : True / FALSE / None / nil / undefined -> true / false / null
- punctuation : trailing / doubled commas dropped, missing commas and colons
                inserted right after the previous token
- ellipsis    : `...` / `…` standing in for elided members dropped

Nothing inside a string literal is touched except the escaping needed when its
delimiter becomes a double quote.  Output is collected in a chunk list and
joined once; no prefix of the input is ever scanned twice.  Running the engine
on its own output changes nothing.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Dict, FrozenSet, List

from .actions import Layer
from .base import RepairEngine
from .context import CANONICAL_CLOSER, QUOTE_CHARS, QUOTE_CLOSERS, ContextTracker

logger = logging.getLogger(__name__)


class Expectation(str, Enum):
    KEY = "key"
    COLON = "colon"
    VALUE = "value"
    COMMA_OR_END = "comma_or_end"


KEY = Expectation.KEY
COLON = Expectation.COLON
VALUE = Expectation.VALUE
COMMA_OR_END = Expectation.COMMA_OR_END

# lower-cased spelling -> canonical JSON literal
LITERALS: Dict[str, str] = {
    "true": "true",
    "false": "false",
    "null": "null",
    "none": "null",
    "nil": "null",
    "undefined": "null",
}

_WS: FrozenSet[str] = frozenset(" \t\r\n")
_OPENERS: FrozenSet[str] = frozenset("{[")
_CLOSERS: FrozenSet[str] = frozenset("}]")


def _is_ident_start(c: str) -> bool:
    return c.isalpha() or c == "_" or c == "$"


def _is_ident_char(c: str) -> bool:
    return c.isalnum() or c in "_$-"


def _is_number_char(c: str) -> bool:
    return c.isalnum() or c in "._+-"


def _starts_value(c: str) -> bool:
    if not c:
        return False
    return c in QUOTE_CHARS or c in _OPENERS or c.isdigit() or c in "-+" or _is_ident_start(c)


class SyntaxRewriteEngine(RepairEngine):
    layer = Layer.SYNTAX
    name = "Syntax Normalization"
    priority = 3

    def process(self, text: str) -> str:
        return _Rewriter(self, text).run()


class _Rewriter:
    """Per-call scan state of ``SyntaxRewriteEngine``."""

    def __init__(self, engine: SyntaxRewriteEngine, text: str) -> None:
        cfg = engine.config
        self.text = text
        self.n = len(text)
        self.ledger = engine.ledger
        self.budget = engine.budget
        self.quotes = cfg.normalize_quotes
        self.keys = cfg.quote_keys
        self.values = cfg.quote_values
        self.literals = cfg.normalize_literals
        self.punct = cfg.fix_punctuation

        self.tracker = ContextTracker()
        self.out: List[str] = []
        self.containers: List[str] = []
        self.expect = VALUE
        self.pending_ws: List[str] = []
        self.pending_comma = -1

        # current string literal
        self.str_start = -1
        self.str_out = 0
        self.str_role = VALUE
        self.rewriting = False

    def _record(self, description: str, offset: int, original=None, replacement=None) -> None:
        self.ledger.record(Layer.SYNTAX, description, offset, original, replacement)

    # -----------------------------
    # Main loop
    # -----------------------------
    def run(self) -> str:
        text = self.text
        n = self.n
        tracker = self.tracker
        tick = self.budget.tick
        i = 0

        while i < n:
            if not tick():
                self.budget.report(self.ledger, Layer.SYNTAX, i)
                logger.warning("syntax scan stopped at offset %d: %s", i, self.budget.reason)
                self._flush()
                return "".join(self.out)

            c = text[i]
            if tracker.state.in_string:
                i = self._string_char(i, c)
            elif c in _WS:
                tracker.step(c)
                self.pending_ws.append(c)
                i += 1
            elif c in QUOTE_CHARS:
                i = self._open_string(i, c)
            elif c in _OPENERS:
                i = self._open_container(i, c)
            elif c in _CLOSERS:
                i = self._close_container(i, c)
            elif c == ",":
                i = self._comma(i)
            elif c == ":":
                i = self._colon(i)
            elif (c == "…" or text.startswith("...", i)) and self._at_placeholder():
                i = self._ellipsis(i)
            elif _is_ident_start(c):
                i = self._identifier(i)
            elif c.isdigit() or (
                c in "-+." and i + 1 < n and (text[i + 1].isalnum() or text[i + 1] == ".")
            ):
                i = self._number(i)
            else:
                tracker.step(c)
                self._flush()
                self.out.append(c)
                i += 1

        self._finish()
        return "".join(self.out)

    # -----------------------------
    # Pending output
    # -----------------------------
    def _flush(self, prefix: str = "") -> None:
        """Emit a deferred comma, then ``prefix``, then deferred whitespace."""
        out = self.out
        if self.pending_comma >= 0:
            out.append(",")
            self.pending_comma = -1
        if prefix:
            out.append(prefix)
        if self.pending_ws:
            out.append("".join(self.pending_ws))
            self.pending_ws.clear()

    def _member_expectation(self) -> Expectation:
        if self.containers and self.containers[-1] == "{":
            return KEY
        return VALUE

    def _peek(self, j: int) -> str:
        text = self.text
        n = self.n
        while j < n and text[j] in _WS:
            j += 1
        return text[j] if j < n else ""

    def _before_value(self, i: int) -> None:
        """Insert the comma or colon a value token at ``i`` is missing."""
        prefix = ""
        if self.containers:
            if self.expect is COMMA_OR_END:
                if self.punct:
                    prefix = ","
                    self._record("added missing comma", i, replacement=",")
                self.expect = self._member_expectation()
            elif self.expect is COLON:
                if self.punct:
                    prefix = ":"
                    self._record("added missing colon", i, replacement=":")
                self.expect = VALUE
        self._flush(prefix)

    # -----------------------------
    # Strings
    # -----------------------------
    def _open_string(self, i: int, c: str) -> int:
        self._before_value(i)
        self.str_role = KEY if self.expect is KEY else VALUE
        self.str_start = i
        self.tracker.step(c)
        self.rewriting = self.quotes and c != '"'
        self.str_out = len(self.out)
        self.out.append('"' if self.rewriting else c)
        return i + 1

    def _string_char(self, i: int, c: str) -> int:
        tracker = self.tracker
        out = self.out
        prev = tracker.state
        st = tracker.step(c)

        if prev.escape_pending:
            out.append(c)
            return i + 1

        if not st.in_string:
            out.append('"' if self.rewriting else c)
            self._end_string(i + 1)
            return i + 1

        if c == "\\":
            nxt = self.text[i + 1] if i + 1 < self.n else ""
            if self.rewriting and nxt and nxt in QUOTE_CLOSERS[prev.quote_char]:  # type: ignore[index]
                # an escaped delimiter needs no escape once the delimiter is '"'
                tracker.step(nxt)
                out.append(nxt)
                return i + 2
            out.append(c)
            return i + 1

        if self.rewriting and c == '"':
            out.append('\\"')
            return i + 1

        out.append(c)
        return i + 1

    def _end_string(self, end: int) -> None:
        if self.rewriting:
            self._record(
                "normalized quotes",
                self.str_start,
                self.text[self.str_start:end],
                "".join(self.out[self.str_out:]),
            )
            self.rewriting = False
        self.expect = COLON if self.str_role is KEY else COMMA_OR_END

    # -----------------------------
    # Punctuation and containers
    # -----------------------------
    def _open_container(self, i: int, c: str) -> int:
        self._before_value(i)
        self.tracker.step(c)
        self.out.append(c)
        self.containers.append(c)
        self.expect = KEY if c == "{" else VALUE
        return i + 1

    def _close_container(self, i: int, c: str) -> int:
        self.tracker.step(c)
        if self.pending_comma >= 0 and self.punct:
            self._record("removed trailing comma", self.pending_comma, original=",")
            self.pending_comma = -1
        self._flush()
        self.out.append(c)
        if self.containers:
            self.containers.pop()
        self.expect = COMMA_OR_END
        return i + 1

    def _comma(self, i: int) -> int:
        self.tracker.step(",")
        if self.pending_comma >= 0 and self.punct:
            self._record("removed extra comma", i, original=",")
            return i + 1
        if self.punct and self.containers and self.expect is self._member_expectation():
            # nothing before it in this container
            self._record("removed extra comma", i, original=",")
            return i + 1
        self._flush()
        self.pending_comma = i
        self.expect = self._member_expectation()
        return i + 1

    def _at_placeholder(self) -> bool:
        if not (self.punct and self.containers):
            return False
        return self.expect is COMMA_OR_END or self.expect is self._member_expectation()

    def _ellipsis(self, i: int) -> int:
        mark = "…" if self.text[i] == "…" else "..."
        self._record("filtered ellipsis placeholder", i, original=mark)
        return i + len(mark)

    def _colon(self, i: int) -> int:
        self.tracker.step(":")
        self._flush()
        self.out.append(":")
        self.expect = VALUE
        return i + 1

    # -----------------------------
    # Bare tokens
    # -----------------------------
    # Identifier and number characters never change string context, so the
    # tracker is not stepped over them.
    def _quote_key(self, i: int, word: str) -> None:
        if self.keys:
            quoted = '"' + word + '"'
            self.out.append(quoted)
            self._record("quoted unquoted key", i, word, quoted)
        else:
            self.out.append(word)
        self.expect = COLON

    def _identifier(self, i: int) -> int:
        text = self.text
        n = self.n
        j = i + 1
        while j < n and _is_ident_char(text[j]):
            j += 1
        word = text[i:j]

        self._before_value(i)
        if self.expect is KEY:
            nxt = self._peek(j)
            if nxt == ":" or _starts_value(nxt):
                self._quote_key(i, word)
                return j

        canonical = LITERALS.get(word.lower()) if self.literals else None
        if canonical is None and self.values and self.expect is VALUE and self.containers:
            if self.containers[-1] == "{":
                j = self._word_run(j)
            return self._quote_value(i, text[i:j], j)

        if canonical is None:
            self.out.append(word)
        else:
            if canonical != word:
                self._record("normalized literal", i, word, canonical)
            self.out.append(canonical)
        self.expect = COMMA_OR_END
        return j

    def _word_run(self, j: int) -> int:
        """Extend a bare object value over following words on the same line.

        Stops before a word that is followed by ``:`` (the next key).
        """
        text = self.text
        n = self.n
        while True:
            k = j
            while k < n and text[k] in " \t":
                k += 1
            if k == j or k >= n or not _is_ident_start(text[k]):
                return j
            m = k + 1
            while m < n and _is_ident_char(text[m]):
                m += 1
            if self._peek(m) == ":" or text[k:m].lower() in LITERALS:
                return j
            j = m

    def _quote_value(self, i: int, word: str, j: int) -> int:
        quoted = '"' + word + '"'
        self.out.append(quoted)
        self._record("quoted unquoted string value", i, word, quoted)
        self.expect = COMMA_OR_END
        return j

    def _number(self, i: int) -> int:
        text = self.text
        n = self.n
        j = i + 1
        while j < n and _is_number_char(text[j]):
            j += 1
        word = text[i:j]

        self._before_value(i)
        if self.expect is KEY and self._peek(j) == ":":
            self._quote_key(i, word)
            return j

        self.out.append(word)
        self.expect = COMMA_OR_END
        return j

    # -----------------------------
    # End of input
    # -----------------------------
    def _finish(self) -> None:
        st = self.tracker.state
        if st.in_string:
            closer = '"' if self.rewriting else CANONICAL_CLOSER[st.quote_char]  # type: ignore[index]
            tail = "\\" + closer if st.escape_pending else closer
            self.out.append(tail)
            self._end_string(self.n)
            self._record("added missing closing quote", self.n, replacement=tail)
            self.tracker.reset()

        if self.pending_comma >= 0 and self.punct:
            self._record("removed trailing comma", self.pending_comma, original=",")
            self.pending_comma = -1
        self._flush()

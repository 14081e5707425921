"""
Incremental string / escape context tracking.

Both repair engines drive a ``ContextTracker`` one character at a time to know
whether the current character belongs to a string literal.  The tracker never
looks back at earlier input, so every scan built on it stays linear.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, FrozenSet, Optional, Tuple

# Opening quote -> characters that close it.  Curly quotes close with either
# member of their family since LLMs mix them freely.
QUOTE_CLOSERS: Dict[str, FrozenSet[str]] = {
    '"': frozenset('"'),
    "'": frozenset("'"),
    "“": frozenset("“”"),
    "”": frozenset("“”"),
    "‘": frozenset("‘’"),
    "’": frozenset("‘’"),
}
QUOTE_CHARS: FrozenSet[str] = frozenset(QUOTE_CLOSERS)

# Closing character appended when an unterminated string has to be closed.
CANONICAL_CLOSER: Dict[str, str] = {
    '"': '"',
    "'": "'",
    "“": "”",
    "”": "”",
    "‘": "’",
    "’": "’",
}


@dataclass(frozen=True)
class ContextState:
    in_string: bool = False
    quote_char: Optional[str] = None
    escape_pending: bool = False


OUTSIDE = ContextState()

_STATES: Dict[Tuple[bool, Optional[str], bool], ContextState] = {
    (False, None, False): OUTSIDE,
}
for _q in QUOTE_CHARS:
    _STATES[(True, _q, False)] = ContextState(True, _q, False)
    _STATES[(True, _q, True)] = ContextState(True, _q, True)
del _q


class ContextTracker:
    """
    String/escape state machine.

    Outside a string any quote character opens one and is remembered.  Inside,
    a backslash escapes exactly the next character, and an unescaped closer of
    the remembered quote ends the string.  Total over all input.
    """

    __slots__ = ("state",)

    def __init__(self) -> None:
        self.state: ContextState = OUTSIDE

    @property
    def in_string(self) -> bool:
        return self.state.in_string

    def step(self, ch: str) -> ContextState:
        st = self.state
        if not st.in_string:
            if ch in QUOTE_CHARS:
                st = _STATES[(True, ch, False)]
        elif st.escape_pending:
            st = _STATES[(True, st.quote_char, False)]
        elif ch == "\\":
            st = _STATES[(True, st.quote_char, True)]
        elif ch in QUOTE_CLOSERS[st.quote_char]:  # type: ignore[index]
            st = OUTSIDE
        self.state = st
        return st

    def reset(self) -> None:
        self.state = OUTSIDE

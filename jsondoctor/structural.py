"""
Structural repair: missing, extra and mismatched ``{}`` / ``[]`` delimiters.

Single left-to-right scan.  Open delimiters live on an explicit frame stack
(a list), never on the Python call stack, so pathological nesting costs list
slots rather than recursion depth.

Repairs
- extra closer with nothing open          -> dropped
- closer of the wrong kind                -> rewritten to the open kind
- doubled opener around a lone child      -> inner pair dropped (``[[x]]``)
- unterminated string at end of input     -> closing quote appended
- containers still open at end of input   -> closers appended, LIFO
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, FrozenSet, List

from .actions import ActionKind, Layer
from .base import RepairEngine
from .context import CANONICAL_CLOSER, QUOTE_CHARS, ContextTracker

logger = logging.getLogger(__name__)


class DelimiterKind(str, Enum):
    OBJECT = "object"
    ARRAY = "array"

    @property
    def opener(self) -> str:
        return "{" if self is DelimiterKind.OBJECT else "["

    @property
    def closer(self) -> str:
        return "}" if self is DelimiterKind.OBJECT else "]"

    @property
    def noun(self) -> str:
        return "brace" if self is DelimiterKind.OBJECT else "bracket"


_OPENERS: Dict[str, DelimiterKind] = {"{": DelimiterKind.OBJECT, "[": DelimiterKind.ARRAY}
_CLOSERS: Dict[str, DelimiterKind] = {"}": DelimiterKind.OBJECT, "]": DelimiterKind.ARRAY}
_DELIMS: FrozenSet[str] = frozenset("{}[]")
_STRUCTURAL_CHARS: FrozenSet[str] = _DELIMS | QUOTE_CHARS
_WS: FrozenSet[str] = frozenset(" \t\r\n")


@dataclass
class DelimiterFrame:
    """One open delimiter.  ``collapsed`` frames were dropped as duplicates."""

    kind: DelimiterKind
    opened_at: int
    collapsed: bool = False


class StructuralRepairEngine(RepairEngine):
    layer = Layer.STRUCTURAL
    name = "Structural Repair"
    priority = 2

    def supports(self, text: str) -> bool:
        return any(c in _STRUCTURAL_CHARS for c in text)

    def process(self, text: str) -> str:
        cfg = self.config
        ledger = self.ledger
        budget = self.budget
        layer = self.layer
        heuristics = cfg.fix_mismatched_delimiters
        max_depth = cfg.max_nesting_depth

        tracker = ContextTracker()
        step = tracker.step
        stack: List[DelimiterFrame] = []
        out: List[str] = []
        emit = out.append

        for i, ch in enumerate(text):
            if not budget.tick():
                budget.report(ledger, layer, i)
                logger.warning("structural scan stopped at offset %d: %s", i, budget.reason)
                return "".join(out)

            if step(ch).in_string or ch not in _DELIMS:
                emit(ch)
                continue

            kind = _OPENERS.get(ch)
            if kind is not None:
                if len(stack) >= max_depth:
                    ledger.record(
                        layer,
                        "nesting depth limit exceeded",
                        i,
                        kind=ActionKind.STRUCTURAL_LIMIT_EXCEEDED,
                    )
                    logger.warning(
                        "nesting depth %d exceeded at offset %d; copying remainder as-is",
                        max_depth,
                        i,
                    )
                    emit(text[i:])
                    return "".join(out)

                top = stack[-1] if stack else None
                if (
                    heuristics
                    and top is not None
                    and top.kind is kind
                    and top.opened_at == i - 1
                    and self._is_redundant_opener(text, i)
                ):
                    ledger.record(
                        layer,
                        f"removed extra opening {kind.noun}",
                        i,
                        original=ch,
                        kind=ActionKind.AMBIGUOUS_REPAIR_APPLIED,
                    )
                    stack.append(DelimiterFrame(kind, i, collapsed=True))
                    continue

                stack.append(DelimiterFrame(kind, i))
                emit(ch)
                continue

            kind = _CLOSERS[ch]
            if not stack:
                ledger.record(layer, f"removed extra closing {kind.noun}", i, original=ch)
                continue

            top = stack.pop()
            if top.collapsed:
                continue
            if top.kind is kind or not heuristics:
                emit(ch)
                continue

            fixed = top.kind.closer
            ledger.record(
                layer,
                "fixed mismatched delimiter",
                i,
                original=ch,
                replacement=fixed,
                kind=ActionKind.AMBIGUOUS_REPAIR_APPLIED,
            )
            emit(fixed)

        end = len(text)

        st = tracker.state
        if st.in_string:
            closer = CANONICAL_CLOSER[st.quote_char]  # type: ignore[index]
            # a dangling backslash would escape the closer; double it instead
            tail = "\\" + closer if st.escape_pending else closer
            emit(tail)
            ledger.record(layer, "added missing closing quote", end, replacement=tail)

        while stack:
            frame = stack.pop()
            if frame.collapsed:
                continue
            closer = frame.kind.closer
            emit(closer)
            ledger.record(
                layer, f"added missing closing {frame.kind.noun}", end, replacement=closer
            )

        return "".join(out)

    def _is_redundant_opener(self, text: str, start: int) -> bool:
        """
        Bounded lookahead for ``[[ ... ]]`` / ``{{ ... }}``.

        The opener at ``start`` is redundant when its own container closes and
        the next significant character closes the enclosing container too, i.e.
        the outer delimiter wraps nothing else.  A trailing comma in between
        does not count as content.  Any closer counts, since a mismatched one
        is rewritten to the outer closer.

        End of input inside the window is treated like the closers that will
        be appended there, so the answer is the same before and after they are
        added.  Gives up (not redundant) when neither is found within
        ``duplicate_lookahead`` characters.
        """
        n = len(text)
        limit = min(n, start + 1 + self.config.duplicate_lookahead)
        tracker = ContextTracker()
        depth = 1
        k = start + 1
        while k < limit:
            ch = text[k]
            if not tracker.step(ch).in_string:
                if ch in _OPENERS:
                    depth += 1
                elif ch in _CLOSERS:
                    depth -= 1
                    if depth == 0:
                        break
            k += 1
        else:
            return limit == n

        k += 1
        while k < limit and (text[k] in _WS or text[k] == ","):
            k += 1
        if k == limit:
            return limit == n
        return text[k] in _CLOSERS

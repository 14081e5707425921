"""
Repair actions and the append-only ledger shared by the repair engines.

Every fix applied to the text is recorded as a ``RepairAction``.  Actions are
immutable; the ``RepairLedger`` only ever grows, so the order of its entries is
the order in which repairs were applied.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional, Tuple


class Layer(str, Enum):
    """Engine that produced an action."""

    STRUCTURAL = "structural"
    SYNTAX = "syntax"


class ActionKind(str, Enum):
    """
    How much trust to place in an action.

    ``REPAIR``                    : deterministic fix.
    ``AMBIGUOUS_REPAIR_APPLIED``  : heuristic fix that may not match intent
                                    (mismatched delimiter, duplicate opener).
    ``STRUCTURAL_LIMIT_EXCEEDED`` : depth or scan budget hit; output is partial.
    """

    REPAIR = "repair"
    AMBIGUOUS_REPAIR_APPLIED = "ambiguous_repair_applied"
    STRUCTURAL_LIMIT_EXCEEDED = "structural_limit_exceeded"


@dataclass(frozen=True)
class RepairAction:
    layer: Layer
    description: str
    offset: int
    original: Optional[str] = None
    replacement: Optional[str] = None
    kind: ActionKind = ActionKind.REPAIR

    def to_dict(self) -> Dict[str, Any]:
        return {
            "layer": self.layer.value,
            "description": self.description,
            "offset": self.offset,
            "original": self.original,
            "replacement": self.replacement,
            "kind": self.kind.value,
        }

    def __str__(self) -> str:
        if self.original is not None or self.replacement is not None:
            return (
                f"[{self.layer.value}@{self.offset}] {self.description}: "
                f"{self.original!r} -> {self.replacement!r}"
            )
        return f"[{self.layer.value}@{self.offset}] {self.description}"


class RepairLedger:
    """Append-only log of ``RepairAction`` for a single repair call."""

    __slots__ = ("_actions",)

    def __init__(self) -> None:
        self._actions: List[RepairAction] = []

    def append(self, action: RepairAction) -> RepairAction:
        self._actions.append(action)
        return action

    def record(
        self,
        layer: Layer,
        description: str,
        offset: int,
        original: Optional[str] = None,
        replacement: Optional[str] = None,
        kind: ActionKind = ActionKind.REPAIR,
    ) -> RepairAction:
        return self.append(
            RepairAction(layer, description, offset, original, replacement, kind)
        )

    @property
    def actions(self) -> Tuple[RepairAction, ...]:
        return tuple(self._actions)

    def descriptions(self) -> List[str]:
        return [a.description for a in self._actions]

    def has_kind(self, kind: ActionKind) -> bool:
        return any(a.kind is kind for a in self._actions)

    def __iter__(self) -> Iterator[RepairAction]:
        return iter(tuple(self._actions))

    def __len__(self) -> int:
        return len(self._actions)

    def __bool__(self) -> bool:
        return bool(self._actions)

    def __repr__(self) -> str:
        return f"RepairLedger({len(self._actions)} actions)"

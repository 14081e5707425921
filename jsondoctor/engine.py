"""
Core repair entry point.

    cleaned text -> StructuralRepairEngine -> SyntaxRewriteEngine -> RepairResult

The engine list is fixed; both engines share one ``RepairLedger`` and one
``ScanBudget`` for the duration of a call and nothing else.  ``repair_text``
never raises for any input.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple, Type

from .actions import ActionKind, RepairAction, RepairLedger
from .base import RepairEngine
from .budget import ScanBudget
from .config import DEFAULT_CONFIG, RepairConfig
from .structural import StructuralRepairEngine
from .syntax import SyntaxRewriteEngine

logger = logging.getLogger(__name__)

ENGINES: Tuple[Type[RepairEngine], ...] = tuple(
    sorted((StructuralRepairEngine, SyntaxRewriteEngine), key=lambda e: e.priority)
)


@dataclass(frozen=True)
class RepairResult:
    text: str
    repairs: Tuple[RepairAction, ...]

    @property
    def changed(self) -> bool:
        return bool(self.repairs)

    @property
    def limit_exceeded(self) -> bool:
        return any(a.kind is ActionKind.STRUCTURAL_LIMIT_EXCEEDED for a in self.repairs)

    @property
    def ambiguous(self) -> bool:
        return any(a.kind is ActionKind.AMBIGUOUS_REPAIR_APPLIED for a in self.repairs)

    def descriptions(self) -> List[str]:
        return [a.description for a in self.repairs]

    def to_dict(self) -> Dict[str, Any]:
        return {"text": self.text, "repairs": [a.to_dict() for a in self.repairs]}


def repair_text(
    text: str,
    config: Optional[RepairConfig] = None,
    ledger: Optional[RepairLedger] = None,
) -> RepairResult:
    """
    Run the structural and syntax engines over ``text``.

    Parameters
    ----------
    text   : Cleaned JSON-ish text.
    config : Limits and rule switches (defaults to ``RepairConfig()``).
    ledger : Optional ledger to append to; a fresh one is used otherwise.

    Returns
    -------
    ``RepairResult`` with the output text and every action in the order it
    was applied.  When the scan budget runs out, the text produced so far is
    returned with a ``STRUCTURAL_LIMIT_EXCEEDED`` action at the end.
    """
    config = config or DEFAULT_CONFIG
    ledger = RepairLedger() if ledger is None else ledger
    budget = ScanBudget(config.max_steps, config.max_duration)

    for engine_cls in ENGINES:
        engine = engine_cls(config, ledger, budget)
        if not engine.supports(text):
            continue
        before = len(ledger)
        text = engine.process(text)
        logger.debug(
            "%s applied %d repairs", engine.name, len(ledger) - before,
            extra={"layer": engine.layer.value},
        )
        if budget.exhausted:
            break

    return RepairResult(text, ledger.actions)


def normalize(text: str, config: Optional[RepairConfig] = None) -> str:
    """Syntax engine only; ``normalize(normalize(t)) == normalize(t)``."""
    config = config or DEFAULT_CONFIG
    engine = SyntaxRewriteEngine(
        config, RepairLedger(), ScanBudget(config.max_steps, config.max_duration)
    )
    return engine.process(text)

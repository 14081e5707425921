"""Common shape of the repair engines run by ``engine.repair_text``."""

from __future__ import annotations

from typing import ClassVar

from .actions import Layer, RepairLedger
from .budget import ScanBudget
from .config import RepairConfig


class RepairEngine:
    """
    One single-pass text transformer.

    Engines are constructed per call with the call's config, ledger and
    budget; ``process`` is a total function and only ever appends to the
    ledger.
    """

    layer: ClassVar[Layer]
    name: ClassVar[str]
    priority: ClassVar[int]

    def __init__(self, config: RepairConfig, ledger: RepairLedger, budget: ScanBudget) -> None:
        self.config = config
        self.ledger = ledger
        self.budget = budget

    def supports(self, text: str) -> bool:
        return bool(text) and not text.isspace()

    def process(self, text: str) -> str:
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{type(self).__name__}(priority={self.priority})"

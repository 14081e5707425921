"""Scan budget: bounds total scan work of one repair call."""

from __future__ import annotations

import time
from typing import Optional

from .actions import ActionKind, Layer, RepairLedger

# Wall-clock is sampled once per this many steps (must be a power of two).
_CLOCK_EVERY = 256


class ScanBudget:
    """
    Counts characters scanned across all engines of one call.

    ``tick()`` returns False once ``max_steps`` or ``max_duration`` has been
    exceeded.  The first engine to see that calls ``report()``, which appends
    the single ``STRUCTURAL_LIMIT_EXCEEDED`` action for the whole call.
    """

    __slots__ = ("max_steps", "max_duration", "steps", "exhausted", "reason", "_deadline", "_reported")

    def __init__(self, max_steps: Optional[int] = None, max_duration: Optional[float] = None) -> None:
        self.max_steps = max_steps
        self.max_duration = max_duration
        self.steps = 0
        self.exhausted = False
        self.reason = ""
        self._deadline = None if max_duration is None else time.monotonic() + max_duration
        self._reported = False

    def tick(self) -> bool:
        if self.exhausted:
            return False
        self.steps += 1
        if self.max_steps is not None and self.steps > self.max_steps:
            self.exhausted = True
            self.reason = f"step budget of {self.max_steps} exceeded"
            return False
        if (
            self._deadline is not None
            and not self.steps & (_CLOCK_EVERY - 1)
            and time.monotonic() > self._deadline
        ):
            self.exhausted = True
            self.reason = f"time budget of {self.max_duration}s exceeded"
            return False
        return True

    def report(self, ledger: RepairLedger, layer: Layer, offset: int) -> None:
        if self._reported:
            return
        self._reported = True
        ledger.record(
            layer,
            "scan budget exceeded",
            offset,
            original=None,
            replacement=self.reason or None,
            kind=ActionKind.STRUCTURAL_LIMIT_EXCEEDED,
        )

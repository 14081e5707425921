"""Pytest configuration for jsondoctor tests."""
import sys
from pathlib import Path

import pytest

# Add project root to path so 'jsondoctor' can be imported without installing
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from jsondoctor.actions import RepairLedger  # noqa: E402
from jsondoctor.budget import ScanBudget  # noqa: E402
from jsondoctor.config import RepairConfig  # noqa: E402
from jsondoctor.context import ContextTracker  # noqa: E402


def run_engine(engine_cls, text, **options):
    """Run one engine on ``text``; returns (output, actions)."""
    config = RepairConfig().with_options(**options)
    ledger = RepairLedger()
    budget = ScanBudget(config.max_steps, config.max_duration)
    out = engine_cls(config, ledger, budget).process(text)
    return out, ledger.actions


def is_balanced(text):
    """True when every delimiter outside strings is properly nested."""
    pairs = {"}": "{", "]": "["}
    stack = []
    tracker = ContextTracker()
    for ch in text:
        if tracker.step(ch).in_string or ch in "\"'“”‘’":
            continue
        if ch in "{[":
            stack.append(ch)
        elif ch in "}]":
            if not stack or stack.pop() != pairs[ch]:
                return False
    return not stack


@pytest.fixture
def engine_runner():
    return run_engine


@pytest.fixture
def balanced():
    return is_balanced

"""
jsondoctor: repair malformed JSON-like text into valid JSON.

    >>> from jsondoctor import repair_json
    >>> repair_json("{name: 'Alice', active: True,}", return_dict=True)
    {'name': 'Alice', 'active': True}

``repair_text`` runs only the repair core and reports every change it made;
``repair_json`` wraps it with cleaning, strict validation and a tolerant
fallback parser.
"""

from .actions import ActionKind, Layer, RepairAction, RepairLedger
from .api import repair_file, repair_json
from .config import DEFAULT_CONFIG, RepairConfig
from .context import ContextState, ContextTracker
from .engine import ENGINES, RepairResult, normalize, repair_text
from .errors import FallbackParseError, RepairError
from .fallback import parse_tolerant
from .log import disable_debug, enable_debug
from .structural import DelimiterFrame, DelimiterKind, StructuralRepairEngine
from .syntax import Expectation, SyntaxRewriteEngine

__version__ = "0.1.0"

__all__ = [
    "ActionKind",
    "ContextState",
    "ContextTracker",
    "DEFAULT_CONFIG",
    "DelimiterFrame",
    "DelimiterKind",
    "ENGINES",
    "Expectation",
    "FallbackParseError",
    "Layer",
    "RepairAction",
    "RepairConfig",
    "RepairError",
    "RepairLedger",
    "RepairResult",
    "StructuralRepairEngine",
    "SyntaxRewriteEngine",
    "disable_debug",
    "enable_debug",
    "normalize",
    "parse_tolerant",
    "repair_file",
    "repair_json",
    "repair_text",
]

"""Exceptions raised by the outer repair pipeline (the core engines never raise)."""

from __future__ import annotations


class RepairError(ValueError):
    """Text could not be turned into valid JSON by any stage."""


class FallbackParseError(RepairError):
    """The tolerant fallback parser found no usable JSON value."""

    def __init__(self, message: str, offset: int = -1) -> None:
        super().__init__(message if offset < 0 else f"{message} (offset {offset})")
        self.offset = offset

"""Repair configuration: limits and per-rule-family switches."""

from __future__ import annotations

import os
from dataclasses import dataclass, fields, replace
from typing import Any, Dict, FrozenSet, Mapping, Optional

# Rule family name (as accepted by JSON_REPAIR_DISABLE) -> RepairConfig field
RULE_FAMILIES: Dict[str, str] = {
    "quotes": "normalize_quotes",
    "keys": "quote_keys",
    "values": "quote_values",
    "literals": "normalize_literals",
    "punctuation": "fix_punctuation",
    "delimiters": "fix_mismatched_delimiters",
}

_ENV_PREFIX = "JSON_REPAIR_"
_FALSY = ("", "0", "false", "False", "no", "off")


@dataclass(frozen=True)
class RepairConfig:
    """
    Options recognised by the repair engines.

    ``max_nesting_depth``   : bound on open delimiters tracked at once.
    ``max_steps``           : bound on characters scanned per call (None = off).
    ``max_duration``        : wall-clock bound in seconds per call (None = off).
    ``duplicate_lookahead`` : characters inspected when deciding whether a
                              doubled opener (``[[`` / ``{{``) is redundant.

    The boolean switches enable or disable one rule family each.
    """

    max_nesting_depth: int = 512
    max_steps: Optional[int] = None
    max_duration: Optional[float] = None
    normalize_quotes: bool = True
    quote_keys: bool = True
    quote_values: bool = True
    normalize_literals: bool = True
    fix_punctuation: bool = True
    fix_mismatched_delimiters: bool = True
    duplicate_lookahead: int = 256

    def __post_init__(self) -> None:
        if not isinstance(self.max_nesting_depth, int) or self.max_nesting_depth < 1:
            raise ValueError(
                f"max_nesting_depth must be a positive integer, got {self.max_nesting_depth!r}"
            )
        if self.max_steps is not None and (
            not isinstance(self.max_steps, int) or self.max_steps < 1
        ):
            raise ValueError(
                f"max_steps must be a positive integer or None, got {self.max_steps!r}"
            )
        if self.max_duration is not None and not self.max_duration > 0:
            raise ValueError(
                f"max_duration must be positive seconds or None, got {self.max_duration!r}"
            )
        if not isinstance(self.duplicate_lookahead, int) or self.duplicate_lookahead < 0:
            raise ValueError(
                "duplicate_lookahead must be a non-negative integer, "
                f"got {self.duplicate_lookahead!r}"
            )

    def with_options(self, **changes: Any) -> "RepairConfig":
        known = {f.name for f in fields(self)}
        unknown = sorted(set(changes) - known)
        if unknown:
            raise ValueError(f"Invalid options: {unknown}. Valid options: {sorted(known)}")
        return replace(self, **changes)

    def disabled_families(self) -> FrozenSet[str]:
        return frozenset(
            name for name, attr in RULE_FAMILIES.items() if not getattr(self, attr)
        )

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "RepairConfig":
        """
        Build a config from ``JSON_REPAIR_*`` environment variables.

        - ``JSON_REPAIR_MAX_DEPTH``    : int
        - ``JSON_REPAIR_MAX_STEPS``    : int
        - ``JSON_REPAIR_MAX_DURATION`` : float seconds
        - ``JSON_REPAIR_DISABLE``      : comma list of rule families
          (``quotes``, ``keys``, ``values``, ``literals``, ``punctuation``,
          ``delimiters``)
        """
        env = os.environ if environ is None else environ
        opts: Dict[str, Any] = {}

        raw = env.get(_ENV_PREFIX + "MAX_DEPTH", "").strip()
        if raw:
            opts["max_nesting_depth"] = int(raw)
        raw = env.get(_ENV_PREFIX + "MAX_STEPS", "").strip()
        if raw:
            opts["max_steps"] = int(raw)
        raw = env.get(_ENV_PREFIX + "MAX_DURATION", "").strip()
        if raw:
            opts["max_duration"] = float(raw)

        raw = env.get(_ENV_PREFIX + "DISABLE", "")
        for name in (p.strip().lower() for p in raw.split(",")):
            if not name:
                continue
            if name not in RULE_FAMILIES:
                raise ValueError(
                    f"Unknown rule family {name!r} in {_ENV_PREFIX}DISABLE; "
                    f"expected one of {sorted(RULE_FAMILIES)}"
                )
            opts[RULE_FAMILIES[name]] = False

        return cls(**opts)


def env_flag(name: str, environ: Optional[Mapping[str, str]] = None) -> bool:
    env = os.environ if environ is None else environ
    return env.get(_ENV_PREFIX + name, "").strip() not in _FALSY


DEFAULT_CONFIG = RepairConfig()

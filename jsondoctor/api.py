"""
Full repair pipeline.

    broken
      -> strict parse                  (already valid: returned untouched)
      -> clean_content                 (fences, comments, prose, BOM)
      -> repair_text                   (structural + syntax engines)
      -> strict parse
      -> parse_tolerant                (on the repaired text, then the cleaned text)
      -> RepairError

Stages after the first are tried in order and the first one that yields a
value wins.  Only when every stage fails does ``repair_json`` raise.
"""

from __future__ import annotations

import logging
import os
from typing import Any, List, Optional, Tuple, Union

from .actions import RepairAction
from .cleaning import clean_content
from .config import RepairConfig
from .engine import repair_text
from .errors import FallbackParseError, RepairError
from .fallback import parse_tolerant
from .log import log_repairs
from .validation import _SENTINEL, dumps, try_parse

logger = logging.getLogger(__name__)

# Keep error payload bounded
_PREVIEW_LIMIT = 4000


def _preview(text: str) -> str:
    if len(text) > _PREVIEW_LIMIT:
        return text[:_PREVIEW_LIMIT] + "…"
    return text


def _repair(broken: str, config: RepairConfig) -> Tuple[Any, Tuple[RepairAction, ...], str]:
    """Returns (value, repairs, stage)."""
    parsed = try_parse(broken)
    if parsed is not _SENTINEL:
        return parsed, (), "strict"

    cleaned = clean_content(broken)
    parsed = try_parse(cleaned)
    if parsed is not _SENTINEL:
        return parsed, (), "clean_content"

    result = repair_text(cleaned, config)
    log_repairs(result.repairs, logger)
    parsed = try_parse(result.text)
    if parsed is not _SENTINEL:
        return parsed, result.repairs, "repair_engine"

    # Tolerant fallback: first on the engine output, then on the cleaned text
    # in case a heuristic repair made things worse.
    attempts: List[Tuple[str, str]] = [("fallback", result.text)]
    if cleaned != result.text:
        attempts.append(("fallback_cleaned", cleaned))
    last_error: Optional[FallbackParseError] = None
    for stage, candidate in attempts:
        try:
            return parse_tolerant(candidate, config.max_nesting_depth), result.repairs, stage
        except FallbackParseError as e:
            last_error = e
            logger.debug("%s failed: %s", stage, e)

    raise RepairError(
        f"Could not repair JSON ({last_error}).\nFinal attempt:\n{_preview(result.text)}"
    )


def repair_json(
    broken: str,
    return_dict: bool = False,
    config: Optional[RepairConfig] = None,
    return_repairs: bool = False,
) -> Any:
    """
    Repair and parse JSON-ish text.

    Parameters
    ----------
    broken         : The malformed JSON string to repair.
    return_dict    : If True, return the parsed Python object; otherwise return
                     a pretty-printed JSON string.  Default False.
    config         : ``RepairConfig`` for the repair engines.  Defaults to
                     ``RepairConfig.from_env()``.
    return_repairs : If True, return ``(result, repairs)`` where ``repairs`` is
                     the tuple of ``RepairAction`` applied by the engines.

    Returns
    -------
    Repaired JSON string (or parsed object if return_dict=True).

    Raises
    ------
    RepairError : If no stage can produce a JSON value (a ``ValueError``).
    TypeError   : If ``broken`` is not a ``str``.
    """
    if not isinstance(broken, str):
        raise TypeError(f"repair_json expects str, got {type(broken).__name__}")
    config = config or RepairConfig.from_env()

    parsed, repairs, stage = _repair(broken, config)
    logger.debug(
        "repaired at stage: %s", stage, extra={"stage": stage, "repairs": len(repairs)}
    )

    value = parsed if return_dict else dumps(parsed)
    if return_repairs:
        return value, repairs
    return value


def repair_file(
    path: Union[str, os.PathLike],
    return_dict: bool = False,
    config: Optional[RepairConfig] = None,
    return_repairs: bool = False,
    encoding: str = "utf-8",
) -> Any:
    """Read ``path`` and run it through ``repair_json``."""
    with open(path, "r", encoding=encoding) as f:
        content = f.read()
    return repair_json(
        content, return_dict=return_dict, config=config, return_repairs=return_repairs
    )


"""Lenient parsing helpers shared by the budget engine.

Budget documents are filled in by hand, so every helper here resolves
bad input to a neutral value (``0.0``, ``False`` or ``None``) instead of
raising.  This keeps a half-finished budget from breaking the weekly
projection.
"""

from __future__ import annotations

import logging
import re
from datetime import date, datetime
from typing import Any, List, Optional, Sequence

import numpy as np

from .constants import DAYS_PER_WEEK_BAND, WEEKS_IN_PLANNER

logger = logging.getLogger(__name__)

_AMOUNT_NOISE = re.compile(r'[$,\s]')


def parse_amount(value: Any) -> float:
    """Convert user-entered money values to a finite float.

    Args:
        value: A number, a string such as ``"$1,250.00"``, ``None`` or
            anything else the persistence layer handed over.

    Returns:
        The parsed amount, or ``0.0`` when the value is missing, not a
        number, ``NaN`` or infinite.

    Example:
        >>> parse_amount("$1,250.50")
        1250.5
        >>> parse_amount(None)
        0.0
    """
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, str):
        cleaned = _AMOUNT_NOISE.sub('', value)
        if not cleaned:
            return 0.0
        value = cleaned
    try:
        parsed = float(value)
    except (TypeError, ValueError):
        return 0.0
    if not np.isfinite(parsed):
        return 0.0
    return parsed


def parse_optional_amount(value: Any) -> Optional[float]:
    """Like :func:`parse_amount` but keeps "not entered" distinct from zero."""
    if value is None:
        return None
    if isinstance(value, str) and not value.strip():
        return None
    if isinstance(value, float) and not np.isfinite(value):
        return None
    return parse_amount(value)


def parse_date(value: Any) -> Optional[date]:
    """Parse an ISO calendar date, returning ``None`` for anything malformed."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value.strip():
        return None
    text = value.strip()
    try:
        # Accept full timestamps ("2025-06-03T00:00:00Z") by their date part.
        return date.fromisoformat(text[:10])
    except ValueError:
        logger.debug("Ignoring malformed date %r", value)
        return None


def week_index_for_day(day: int) -> int:
    """Map a day of the month onto the planner's fixed week bands.

    Days 1-7 land in week 0, 8-14 in week 1, 15-21 in week 2, 22-28 in
    week 3 and everything from the 29th onwards in week 4.  The bands are
    anchored on the first of the month, not on calendar weeks.
    """
    index = (int(day) - 1) // DAYS_PER_WEEK_BAND
    return max(0, min(WEEKS_IN_PLANNER - 1, index))


def week_index_for_date(value: Any) -> Optional[int]:
    parsed = parse_date(value)
    if parsed is None:
        return None
    return week_index_for_day(parsed.day)


def pad_amounts(values: Any, length: int = WEEKS_IN_PLANNER) -> List[float]:
    """Return exactly ``length`` parsed amounts, zero-filling short input."""
    items: Sequence[Any] = values if isinstance(values, (list, tuple)) else []
    padded = [parse_amount(v) for v in list(items)[:length]]
    padded.extend([0.0] * (length - len(padded)))
    return padded


def pad_flags(values: Any, length: int = WEEKS_IN_PLANNER) -> List[bool]:
    """Return exactly ``length`` booleans, ``False``-filling short input."""
    items: Sequence[Any] = values if isinstance(values, (list, tuple)) else []
    padded = [bool(v) for v in list(items)[:length]]
    padded.extend([False] * (length - len(padded)))
    return padded

"""Single-column, type-aware record sorting.

Values are compared in a fixed order of precedence: nulls, numbers,
date-like values, then strings.  Strings are collated by the locale on a
case- and accent-folded key first.  Ties keep their input order.
"""

from __future__ import annotations

import locale
import logging
import math
import unicodedata
from collections.abc import Sequence
from datetime import date, datetime, time
from decimal import Decimal
from functools import cmp_to_key
from typing import Any, Literal

from .columns import Column, sort_value

logger = logging.getLogger(__name__)

SortDirection = Literal["ASC", "DESC"]

_NUMERIC_TYPES = (int, float, Decimal)


def _sign(value: float | Decimal) -> int:
    if value != value:  # NaN
        return 0
    if value > 0:
        return 1
    if value < 0:
        return -1
    return 0


def _is_number(value: Any) -> bool:
    return isinstance(value, _NUMERIC_TYPES) and not isinstance(value, bool)


def parse_date(value: str) -> datetime | None:
    """Parse an ISO-8601 date or datetime string, or return ``None``."""
    text = value.strip()
    if not text:
        return None
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return None


def _epoch_ms(value: Any) -> float | None:
    if isinstance(value, datetime):
        moment = value
    elif isinstance(value, date):
        moment = datetime.combine(value, time.min)
    elif isinstance(value, str):
        moment = parse_date(value)
        if moment is None:
            return None
    else:
        return None
    try:
        return moment.timestamp() * 1000
    except (OverflowError, OSError, ValueError):
        return None


def _collation_key(text: str) -> str:
    """Fold case and strip accents so ``"Émile"`` collates beside ``"emile"``."""
    decomposed = unicodedata.normalize("NFKD", text)
    return "".join(char for char in decomposed if not unicodedata.combining(char)).casefold()


def _locale_compare(left: str, right: str) -> int:
    primary = _sign(locale.strcoll(_collation_key(left), _collation_key(right)))
    if primary:
        return primary
    return _sign(locale.strcoll(left, right))


def use_system_collation() -> None:
    """Adopt the environment's ``LC_COLLATE`` for string comparisons.

    Without this the process keeps the ``C`` locale and ``strcoll`` falls
    back to code point order for the accent-folded keys.
    """
    try:
        locale.setlocale(locale.LC_COLLATE, "")
    except locale.Error as exc:
        logger.warning("Keeping the C collation locale: %s", exc)


def compare(a: Any, b: Any, column: Column, direction: SortDirection = "ASC") -> int:
    """Compare two records by ``column``.

    Args:
        a: First record.
        b: Second record.
        column: Column whose sort value is compared.
        direction: ``"ASC"`` or ``"DESC"``.

    Returns:
        ``-1``, ``0`` or ``1``.  Nulls sort first ascending and last
        descending.
    """
    ascending = direction != "DESC"
    av = sort_value(a, column)
    bv = sort_value(b, column)

    if av is None and bv is None:
        return 0
    if av is None:
        return -1 if ascending else 1
    if bv is None:
        return 1 if ascending else -1

    if _is_number(av) and _is_number(bv):
        if isinstance(av, Decimal) != isinstance(bv, Decimal):
            av, bv = float(av), float(bv)
        diff = av - bv if ascending else bv - av
        if isinstance(diff, float) and math.isnan(diff):
            return 0
        return _sign(diff)

    a_ms = _epoch_ms(av)
    if a_ms is not None:
        b_ms = _epoch_ms(bv)
        if b_ms is not None:
            return _sign(a_ms - b_ms if ascending else b_ms - a_ms)

    a_text = str(av).lower()
    b_text = str(bv).lower()
    return _locale_compare(a_text, b_text) if ascending else _locale_compare(b_text, a_text)


def sort_records(
    records: Sequence[Any], column: Column, direction: SortDirection = "ASC"
) -> list[Any]:
    """Return a stably sorted copy of ``records``."""
    return sorted(records, key=cmp_to_key(lambda a, b: compare(a, b, column, direction)))

"""Tolerant accessors for raw source records.

Source rows are plain dicts with missing, null, or mistyped fields. These
helpers never raise: a value that cannot be read yields the documented
default instead.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Iterable, Optional

CENT = Decimal("0.01")


def to_float(value: Any, default: float = 0.0) -> float:
    if value is None or isinstance(value, bool):
        return default
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def to_int(value: Any, default: int = 0) -> int:
    if value is None or isinstance(value, bool):
        return default
    try:
        return int(float(value))
    except (TypeError, ValueError):
        return default


def round_half_up(value: float, places: int = 2) -> float:
    """Round like a currency display does: halves go away from zero."""
    quantum = Decimal(1).scaleb(-places)
    try:
        return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))
    except (InvalidOperation, ValueError):
        return 0.0


def round_money(value: float) -> float:
    return round_half_up(value, 2)


def percent(part: float, whole: float, places: int = 2) -> float:
    """``part / whole`` as a percentage; 0 when ``whole`` is zero."""
    if not whole:
        return 0.0
    return round_half_up(part / whole * 100.0, places)


def whole_percent(part: float, whole: float) -> int:
    if not whole:
        return 0
    return int(round_half_up(part / whole * 100.0, 0))


def text(value: Any) -> str:
    return value if isinstance(value, str) else ""


def tags_of(record: dict) -> list[str]:
    tags = record.get("tags")
    if not isinstance(tags, (list, tuple)):
        return []
    return [tag for tag in tags if isinstance(tag, str)]


def has_tag(record: dict, *names: str) -> bool:
    tags = tags_of(record)
    return any(name in tags for name in names)


def payload_of(record: dict) -> dict:
    payload = record.get("payload")
    return payload if isinstance(payload, dict) else {}


def sum_field(records: Iterable[dict], field: str) -> float:
    return sum(to_float(record.get(field)) for record in records)


def first_present(*values: Any) -> Optional[Any]:
    """First value that is not None/empty, mirroring ``a || b || c`` defaults."""
    for value in values:
        if value not in (None, "", 0, False):
            return value
    return None

"""UTC helpers.

The status engine works in **naive** UTC datetimes throughout. Source
timestamps arrive as ISO-8601 strings with assorted offsets (``Z``,
``+00:00``, none at all) and are normalised here so comparisons never mix
aware and naive values.
"""

import re
from datetime import datetime, timedelta, timezone
from typing import Optional

# fromisoformat before 3.11 accepts only 3 or 6 fractional digits and
# full "+HH:MM" offsets; the store trims both.
_FRACTION = re.compile(r"\.(\d+)")
_SHORT_OFFSET = re.compile(r"(:\d{2}(?:\.\d+)?[+-]\d{2})$")


def utcnow() -> datetime:
    """Return the current UTC time as a naive (tzinfo=None) datetime."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def parse_timestamp(value: object) -> Optional[datetime]:
    """Parse a source timestamp into a naive UTC datetime, or None."""
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str) and value.strip():
        text = value.strip()
        if text.endswith("Z") or text.endswith("z"):
            text = text[:-1] + "+00:00"
        text = _FRACTION.sub(lambda m: "." + (m.group(1) + "000000")[:6], text, count=1)
        text = _SHORT_OFFSET.sub(r"\1:00", text)
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
    else:
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def day_key(moment: datetime) -> str:
    """``YYYY-MM-DD`` prefix used for date-prefix matching."""
    return moment.strftime("%Y-%m-%d")


def days_ago_key(moment: datetime, days: int) -> str:
    return day_key(moment - timedelta(days=days))


def minutes_since(then: Optional[datetime], now: datetime) -> Optional[int]:
    """Whole minutes elapsed from ``then`` to ``now`` (rounded), None if unknown."""
    if then is None:
        return None
    return int(round((now - then).total_seconds() / 60.0))


def clock_label(value: object) -> str:
    """``HH:MM`` (24h) of a source timestamp, or an em-dash placeholder."""
    parsed = parse_timestamp(value)
    if parsed is None:
        return "—"
    return parsed.strftime("%H:%M")


def isoformat_z(moment: datetime) -> str:
    """ISO-8601 with millisecond precision and a ``Z`` suffix."""
    return moment.strftime("%Y-%m-%dT%H:%M:%S.") + f"{moment.microsecond // 1000:03d}Z"

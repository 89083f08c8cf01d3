"""
Content Aggregator.

A single publication event may stand for several content units, so when
the payload carries ``articles_count`` (or ``count``) that number is used
instead of counting the event once.
"""

from datetime import datetime
from typing import Iterable

from services.classifiers import is_content_event
from services.reference_data import CONTENT_SEARCH_BASELINE
from utils.records import payload_of, text, to_int
from utils.utcnow import day_key, days_ago_key

WEEK_DAYS = 7


def content_units(event: dict) -> int:
    payload = payload_of(event)
    return to_int(payload.get("articles_count")) or to_int(payload.get("count")) or 1


def content_velocity(events: Iterable[dict], now: datetime, daily_target: int) -> dict[str, int]:
    today = day_key(now)
    week_start = days_ago_key(now, WEEK_DAYS)
    published = [e for e in events if is_content_event(e)]

    raw = {"today": 0, "week": 0, "total": 0}
    units = {"today": 0, "week": 0, "total": 0}
    for event in published:
        created = text(event.get("created_at"))
        count = content_units(event)
        windows = ["total"]
        if created.startswith(today):
            windows.append("today")
        if created >= week_start:
            windows.append("week")
        for window in windows:
            raw[window] += 1
            units[window] += count

    return {
        "today": units["today"] or raw["today"],
        "week": units["week"] or raw["week"],
        "total": units["total"] or raw["total"],
        "target_daily": daily_target,
    }


def content_card(velocity: dict[str, int]) -> dict:
    """Headline content tile: today's units against the daily target."""
    return {
        "target": velocity["target_daily"],
        "today": velocity["today"],
        **CONTENT_SEARCH_BASELINE,
    }

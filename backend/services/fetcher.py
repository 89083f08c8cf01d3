"""
Fan-out Fetcher.

Issues every record-set read at once, waits for all of them, and returns a
``RecordBundle`` whose keys are always present (collections may be empty).
"""

import asyncio
from dataclasses import dataclass, fields
from datetime import datetime

from services.source_gateway import QueryOptions, SourceGateway
from utils.logger import get_logger
from utils.utcnow import day_key

logger = get_logger("fetcher")


@dataclass(frozen=True)
class RecordBundle:
    tasks: tuple = ()
    events: tuple = ()
    policies: tuple = ()
    triggers: tuple = ()
    revenue: tuple = ()
    products: tuple = ()
    opportunities: tuple = ()
    sessions: tuple = ()
    token_usage: tuple = ()
    model_routing: tuple = ()
    positions: tuple = ()
    signals: tuple = ()
    affiliate_clicks: tuple = ()

    @classmethod
    def keys(cls) -> tuple[str, ...]:
        return tuple(f.name for f in fields(cls))

    @classmethod
    def from_lists(cls, **collections) -> "RecordBundle":
        """Build a bundle from lists, tolerating missing or non-list values."""
        values = {}
        for key in cls.keys():
            rows = collections.get(key) or ()
            values[key] = tuple(row for row in rows if isinstance(row, dict))
        return cls(**values)


# bundle key -> record-set name
RECORD_SETS: dict[str, str] = {
    "tasks": "factory_tasks",
    "events": "factory_events",
    "policies": "factory_policy",
    "triggers": "factory_triggers",
    "revenue": "revenue_events",
    "products": "products",
    "opportunities": "opportunities",
    "sessions": "agent_sessions",
    "token_usage": "token_usage",
    "model_routing": "model_routing",
    "positions": "v3_positions",
    "signals": "v3_signals",
    "affiliate_clicks": "affiliate_clicks",
}


def build_queries(now: datetime) -> dict[str, QueryOptions]:
    """Read configuration per bundle key; token usage is limited to today."""
    today = day_key(now)
    return {
        "tasks": QueryOptions(order="created_at", limit=300),
        "events": QueryOptions(order="created_at", limit=500),
        "policies": QueryOptions(),
        "triggers": QueryOptions(),
        "revenue": QueryOptions(order="created_at", limit=200),
        "products": QueryOptions(),
        "opportunities": QueryOptions(order="score", limit=30),
        "sessions": QueryOptions(order="started_at", limit=50),
        "token_usage": QueryOptions(order="created_at", limit=500, gte={"created_at": today}),
        "model_routing": QueryOptions(),
        "positions": QueryOptions(order="opened_at", limit=500),
        "signals": QueryOptions(order="timestamp", limit=500),
        "affiliate_clicks": QueryOptions(order="created_at", limit=500),
    }


async def fetch_bundle(gateway: SourceGateway, now: datetime) -> RecordBundle:
    """Run all reads concurrently; one read failing never cancels another."""
    queries = build_queries(now)
    keys = list(RECORD_SETS)
    results = await asyncio.gather(
        *(gateway.fetch(RECORD_SETS[key], queries[key]) for key in keys),
        return_exceptions=True,
    )

    collections: dict[str, list] = {}
    for key, result in zip(keys, results):
        if isinstance(result, BaseException):
            if isinstance(result, asyncio.CancelledError):
                raise result
            logger.warning("Record set read raised", table=RECORD_SETS[key], error=str(result))
            collections[key] = []
        else:
            collections[key] = result or []

    empty = [key for key, rows in collections.items() if not rows]
    logger.debug("Record bundle fetched", empty_sets=empty)
    return RecordBundle.from_lists(**collections)

"""
Loose cross-source lookups.

The data store guarantees no referential integrity: sessions, tasks,
events and revenue rows point at agents and products by free-form string.
Each lookup here states its match rule and what it falls back to when
nothing matches.
"""

from typing import Iterable, Optional

from utils.records import first_present, payload_of, text, to_float
from utils.utcnow import parse_timestamp

UNASSIGNED = "unassigned"


def latest_session_for(agent: str, sessions: Iterable[dict]) -> Optional[dict]:
    """Session for ``agent`` with the latest ``started_at``.

    Sessions without a parseable start sort before every dated one; on a tie
    the first row seen wins. None when the agent has no session at all.
    """
    best: Optional[dict] = None
    best_key = None
    for session in sessions:
        if session.get("agent") != agent:
            continue
        started = parse_timestamp(session.get("started_at"))
        key = (started is not None, started)
        if best is None or (key[0] and (not best_key[0] or key[1] > best_key[1])):
            best, best_key = session, key
    return best


def sessions_for(agent: str, sessions: Iterable[dict]) -> list[dict]:
    return [s for s in sessions if s.get("agent") == agent]


def tasks_for_agent(agent: str, tasks: Iterable[dict]) -> list[dict]:
    """Tasks whose ``assigned_agent`` equals ``agent`` exactly."""
    return [t for t in tasks if t.get("assigned_agent") == agent]


def owner_or_unassigned(task: dict) -> str:
    return text(task.get("assigned_agent")) or UNASSIGNED


def events_for_agent(agent: str, events: Iterable[dict]) -> list[dict]:
    return [e for e in events if e.get("agent") == agent]


def latest_event(events: Iterable[dict]) -> Optional[dict]:
    """Event with the latest parseable ``created_at``; None if there is none."""
    best, best_at = None, None
    for event in events:
        created = parse_timestamp(event.get("created_at"))
        if created is None:
            continue
        if best_at is None or created > best_at:
            best, best_at = event, created
    return best


def revenue_for_product(product: dict, revenue: Iterable[dict]) -> float:
    """Sum of revenue rows whose ``product`` is the product id or lower-cased name."""
    keys = set()
    product_id = _join_key(product.get("id"))
    if product_id is not None:
        keys.add(product_id)
    name = text(product.get("name"))
    if name:
        keys.add(name.lower())
    return sum(
        to_float(r.get("amount")) for r in revenue if _join_key(r.get("product")) in keys
    )


def _join_key(value: object):
    """Scalar usable as a join key; None for anything a set cannot hold."""
    if isinstance(value, bool) or not isinstance(value, (str, int)):
        return None
    return value


def event_message(event: dict) -> Optional[str]:
    """Payload message, else the event type."""
    return first_present(payload_of(event).get("message"), event.get("event_type"))


def event_product(event: dict, default: str = "factory") -> str:
    """Event product, else payload product, else ``default``."""
    return first_present(event.get("product"), payload_of(event).get("product")) or default

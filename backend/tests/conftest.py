"""Shared fixtures for factory status tests."""

import sys
from pathlib import Path

BACKEND_ROOT = Path(__file__).resolve().parents[1]
if str(BACKEND_ROOT) not in sys.path:
    sys.path.insert(0, str(BACKEND_ROOT))

import pytest
from datetime import datetime, timedelta

from models.snapshot import SnapshotConfig, TradingConfig


NOW = datetime(2026, 3, 15, 12, 0, 0)


def iso(moment: datetime) -> str:
    """Source-style timestamp: ISO-8601 with a Z suffix."""
    return moment.strftime("%Y-%m-%dT%H:%M:%S") + "Z"


def minutes_ago(minutes: float) -> str:
    return iso(NOW - timedelta(minutes=minutes))


def days_ago(days: int, hour: int = 10) -> str:
    return iso((NOW - timedelta(days=days)).replace(hour=hour, minute=0, second=0))


# ---------------------------------------------------------------------------
# Clock / config
# ---------------------------------------------------------------------------


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def snapshot_config():
    return SnapshotConfig(
        heartbeat_stale_minutes=30,
        content_daily_target=10,
        trading=TradingConfig(decommissioned=False, starting_balance=1010.0, mode="paper"),
    )


# ---------------------------------------------------------------------------
# Record factories (shaped like rows from the data store)
# ---------------------------------------------------------------------------


@pytest.fixture
def make_session():
    def _make(agent, status="online", heartbeat_min=5, started_min=120, model="sonnet-4.5"):
        return {
            "agent": agent,
            "status": status,
            "model": model,
            "started_at": minutes_ago(started_min) if started_min is not None else None,
            "last_heartbeat": minutes_ago(heartbeat_min) if heartbeat_min is not None else None,
        }

    return _make


@pytest.fixture
def make_task():
    counter = {"n": 0}

    def _make(
        status="queued",
        agent="isaiah",
        priority="normal",
        created_at=None,
        title=None,
        tags=None,
        product=None,
    ):
        counter["n"] += 1
        return {
            "id": f"task-{counter['n']}",
            "title": title or f"Task {counter['n']}",
            "status": status,
            "assigned_agent": agent,
            "priority": priority,
            "created_at": created_at or minutes_ago(60),
            "tags": tags or [],
            "product": product,
        }

    return _make


@pytest.fixture
def make_event():
    def _make(event_type="step_completed", agent="paul", created_at=None, tags=None, payload=None, product=None):
        return {
            "event_type": event_type,
            "agent": agent,
            "created_at": created_at or minutes_ago(10),
            "tags": tags or [],
            "payload": payload or {},
            "product": product,
        }

    return _make


@pytest.fixture
def make_position():
    counter = {"n": 0}

    def _make(status="settled", pnl=0.0, cost=50.0, edge="momentum", closed_at=None, opened_at=None):
        counter["n"] += 1
        return {
            "id": counter["n"],
            "status": status,
            "realized_pnl": pnl,
            "total_cost": cost,
            "edge": edge,
            "opened_at": opened_at or days_ago(1, hour=8),
            "closed_at": closed_at,
        }

    return _make


@pytest.fixture
def make_signal():
    def _make(edge="momentum", action="buy", timestamp=None):
        return {"edge": edge, "action": action, "timestamp": timestamp or minutes_ago(90)}

    return _make

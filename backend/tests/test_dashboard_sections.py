import sys
from pathlib import Path

BACKEND_ROOT = Path(__file__).resolve().parents[1]
if str(BACKEND_ROOT) not in sys.path:
    sys.path.insert(0, str(BACKEND_ROOT))

from conftest import minutes_ago
from services.reference_data import connections, phases, revenue_channels
from services.dashboard_sections import (
    activity_feed,
    cap_gates,
    cron_panel,
    infra_panel,
    last_briefing,
    opportunity_rows,
    scanner_panel,
    trading_desk,
    trigger_panel,
)


def test_activity_feed_shapes_events(make_event):
    events = [
        make_event(event_type="task_success", agent="isaiah", created_at="2026-03-15T11:42:00Z"),
        make_event(event_type=None, agent=None, payload={"message": "hello", "product": "polypulse"}),
    ]

    feed = activity_feed(events)

    assert feed[0]["t"] == "11:42"
    assert feed[0]["y"] == "success"
    assert feed[0]["product"] == "factory"
    assert feed[1]["a"] == "system"
    assert feed[1]["m"] == "hello"
    assert feed[1]["type"] == "unknown"
    assert feed[1]["product"] == "polypulse"


def test_scanner_panel_matches_payload_slug(make_event):
    events = [
        make_event(tags=["scanner"], payload={"scanner": "crypto_prices", "signals": 7}),
        make_event(tags=["scanner"], payload={"type": "hacker news digest", "signals": "3"}),
    ]

    panel = {row["name"]: row for row in scanner_panel(events)}

    assert panel["Crypto Prices"]["sigs"] == 7
    assert panel["Hacker News"]["sigs"] == 3
    assert panel["Hacker News"]["status"] == "idle"
    assert panel["Amazon"]["status"] == "planned"
    assert panel["Reddit"]["status"] == "idle"
    assert panel["Reddit"]["sigs"] == 0


def test_cron_panel_finds_latest_job_event(make_event):
    events = [
        make_event(agent="paul", payload={"message": "Content run finished"}, created_at="2026-03-15T08:03:00Z"),
        make_event(agent="daniel", event_type="reddit_scan_complete", created_at="2026-03-15T06:00:00Z"),
    ]

    panel = {row["j"]: row for row in cron_panel(events)}

    assert panel["Content"]["last"] == "08:03"
    assert panel["Content"]["status"] == "ok"
    assert panel["Reddit Scan"]["last"] == "06:00"
    assert panel["Report"]["last"] == "—"
    assert panel["Report"]["status"] == "unknown"


def test_trigger_and_cap_gate_states():
    triggers = trigger_panel(
        [
            {"name": "revenue_spike", "fire_count": 2, "enabled": True},
            {"name": "idle_agent", "fire_count": 0, "enabled": True},
            {"name": "legacy", "fire_count": None, "enabled": False},
        ]
    )
    assert [t["s"] for t in triggers] == ["fired", "armed", "off"]

    gates = cap_gates(
        [
            {"key": "spend_cap", "value": {"blocked": True}},
            {"key": "trade_cap", "value": {"armed": False, "max": 50}},
            {"key": "post_cap", "value": "10/day"},
        ]
    )
    assert [g["s"] for g in gates] == ["blocked", "ok", "armed"]
    assert gates[1]["v"] == '{"armed": false, "max": 50}'
    assert gates[2]["v"] == "10/day"


def test_opportunity_verdicts():
    rows = opportunity_rows(
        [
            {"name": "A", "score": 22},
            {"name": "B", "score": "16"},
            {"name": "C", "score": None},
            {"name": "D", "score": 5, "verdict": "WATCH"},
        ]
    )

    assert [r["v"] for r in rows] == ["GO", "MAYBE", "NO", "WATCH"]
    assert rows[2]["score"] == 0


def test_infra_panel_marks_sessions(make_session):
    infra = infra_panel(
        [make_session("alfred", started_min=60)],
        {"alfred": "online", "paul": "stale", "daniel": "offline"},
    )

    assert infra["sess"] == {"alfred": "ok", "paul": "stale", "daniel": "—"}
    assert infra["rst"] == "11:00 AM"


def test_trading_desk_reflects_agent_status():
    assert trading_desk("online", "paper")["status"] == "ACTIVE"
    desk = trading_desk(None, "decommissioned")
    assert desk["status"] == "NOT ACTIVE"
    assert desk["mode"] == "decommissioned"


def test_last_briefing(now, make_event):
    events = [
        make_event(event_type="deploy"),
        make_event(event_type="morning_briefing", agent=None, created_at=minutes_ago(125)),
    ]

    briefing = last_briefing(events, now)

    assert briefing["type"] == "morning_briefing"
    assert briefing["agent"] == "alfred"
    assert briefing["ago"] == 125
    assert last_briefing([make_event()], now) is None


def test_connections_active_only_when_both_ends_online():
    edges = {(e["from"], e["to"]): e["active"] for e in connections({"alfred", "isaiah"})}

    assert edges[("alfred", "isaiah")] is True
    assert edges[("paul", "alfred")] is False


def test_revenue_dependent_reference_rows():
    assert revenue_channels(0.0)[0]["s"] == "Wiring"
    assert revenue_channels(12.0)[0]["s"] == "Live"
    assert phases(12.0)[2]["p"] == 40
    assert phases(0.0)[2]["p"] == 20

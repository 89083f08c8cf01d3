"""
Smaller dashboard panels: activity feed, scanners, crons, triggers, cap
gates, opportunities, infra, the trading-desk card and the last briefing.
"""

import json
from datetime import datetime
from typing import Iterable, Optional

from models.agent import AgentStatus
from services.classifiers import (
    cron_matches_event,
    is_briefing_event,
    is_scanner_event,
    is_success_event,
    scanner_matches_event,
)
from services.record_joins import event_message, event_product, latest_session_for
from services.reference_data import (
    COO_AGENT,
    CRON_ROSTER,
    INFRA_FACTS,
    SCANNER_DEFS,
    TRADING_DESK,
)
from utils.records import payload_of, to_float, to_int
from utils.utcnow import clock_label, minutes_since, parse_timestamp

FEED_LIMIT = 50
UNSCHEDULED = "—"


def activity_feed(events: Iterable[dict]) -> list[dict]:
    return [
        {
            "t": clock_label(e.get("created_at")),
            "a": e.get("agent") or "system",
            "m": event_message(e),
            "y": "success" if is_success_event(e) else "ok",
            "type": e.get("event_type") or "unknown",
            "product": event_product(e),
        }
        for e in list(events)[:FEED_LIMIT]
    ]


def scanner_panel(events: Iterable[dict]) -> list[dict]:
    scanner_events = [e for e in events if is_scanner_event(e)]
    panel = []
    for scanner in SCANNER_DEFS:
        matches = [e for e in scanner_events if scanner_matches_event(scanner["name"], e)]
        planned = not matches and scanner["freq"] == UNSCHEDULED
        status = "planned" if planned else "idle"
        panel.append(
            {
                **scanner,
                "sigs": to_int(payload_of(matches[0]).get("signals")) if matches else 0,
                "status": status,
            }
        )
    return panel


def cron_panel(events: Iterable[dict]) -> list[dict]:
    """Cron roster with the most recent matching event per job."""
    events = list(events)
    panel = []
    for cron in CRON_ROSTER:
        match = next(
            (e for e in events if cron_matches_event(cron["j"], cron["a"], e)), None
        )
        last = clock_label(match.get("created_at")) if match else UNSCHEDULED
        panel.append(
            {
                **cron,
                "last": last,
                "last_ts": match.get("created_at") if match else None,
                "next": UNSCHEDULED,
                "status": "ok" if last != UNSCHEDULED else "unknown",
            }
        )
    return panel


def trigger_panel(triggers: Iterable[dict]) -> list[dict]:
    panel = []
    for trigger in triggers:
        fires = to_int(trigger.get("fire_count"))
        if fires > 0:
            state = "fired"
        elif trigger.get("enabled"):
            state = "armed"
        else:
            state = "off"
        panel.append({"n": trigger.get("name"), "s": state, "f": fires})
    return panel


def policy_value_text(value: object) -> str:
    if isinstance(value, str):
        return value
    return json.dumps(value, default=str)


def cap_gate_status(value: object) -> str:
    """blocked when the policy says so, ok when explicitly disarmed, else armed."""
    if isinstance(value, dict):
        if value.get("blocked"):
            return "blocked"
        if value.get("armed") is False:
            return "ok"
    return "armed"


def cap_gates(policies: Iterable[dict]) -> list[dict]:
    return [
        {
            "n": p.get("key"),
            "v": policy_value_text(p.get("value")),
            "s": cap_gate_status(p.get("value")),
        }
        for p in policies
    ]


def opportunity_rows(opportunities: Iterable[dict]) -> list[dict]:
    rows = []
    for opp in opportunities:
        score = to_float(opp.get("score"))
        if score >= 20:
            verdict, color = "GO", "#00ff88"
        elif score >= 15:
            verdict, color = "MAYBE", "#fbbf24"
        else:
            verdict, color = "NO", "#ef4444"
        rows.append(
            {
                "name": opp.get("name"),
                "score": opp.get("score") or 0,
                "v": opp.get("verdict") or verdict,
                "c": color,
            }
        )
    return rows


def _restart_label(value: object) -> str:
    started = parse_timestamp(value)
    if started is None:
        return UNSCHEDULED
    return started.strftime("%I:%M %p")


def infra_panel(sessions: Iterable[dict], statuses: dict[str, str]) -> dict:
    sessions = list(sessions)
    coo = latest_session_for(COO_AGENT, sessions)
    session_marks = {}
    for name, status in statuses.items():
        if status == AgentStatus.ONLINE.value:
            session_marks[name] = "ok"
        elif status == AgentStatus.STALE.value:
            session_marks[name] = "stale"
        else:
            session_marks[name] = UNSCHEDULED
    return {
        **INFRA_FACTS,
        "rst": _restart_label(coo.get("started_at")) if coo else UNSCHEDULED,
        "sess": session_marks,
    }


def trading_desk(trading_agent_status: Optional[str], trading_mode: str) -> dict:
    active = trading_agent_status == AgentStatus.ONLINE.value
    return {
        **TRADING_DESK,
        "strategies": list(TRADING_DESK["strategies"]),
        "mode": trading_mode,
        "status": "ACTIVE" if active else "NOT ACTIVE",
    }


def last_briefing(events: Iterable[dict], now: datetime) -> Optional[dict]:
    briefing = next((e for e in events if is_briefing_event(e)), None)
    if briefing is None:
        return None
    return {
        "timestamp": briefing.get("created_at"),
        "type": briefing.get("event_type") or "briefing",
        "agent": briefing.get("agent") or COO_AGENT,
        "ago": minutes_since(parse_timestamp(briefing.get("created_at")), now),
    }

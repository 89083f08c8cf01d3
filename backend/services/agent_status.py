"""
Agent Status Aggregator.

Derives per-agent liveness from the latest session, today's task load and
efficiency, today's token spend, the current task label, and recency of
the agent's last event.

Liveness rule: a session that reports ``online`` but whose heartbeat is
older than the staleness threshold is reported as ``stale``, never
``online``. A missing heartbeat falls back to the session start time;
with neither, the age is unknown and the session counts as stale.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable, Optional

from models.agent import AgentProfile, AgentStatus, TaskStatus
from services.record_joins import (
    event_message,
    event_product,
    events_for_agent,
    latest_event,
    latest_session_for,
    sessions_for,
    tasks_for_agent,
)
from utils.records import percent, round_money, tags_of, text, to_float, whole_percent
from utils.utcnow import clock_label, day_key, minutes_since, parse_timestamp

ACTIVITY_PER_AGENT = 10


@dataclass
class AgentStatusResult:
    agents: dict[str, dict] = field(default_factory=dict)
    last_active: dict[str, Optional[int]] = field(default_factory=dict)
    uptime: dict[str, dict] = field(default_factory=dict)
    activity: dict[str, list[dict]] = field(default_factory=dict)
    statuses: dict[str, str] = field(default_factory=dict)

    @property
    def online(self) -> list[str]:
        return [name for name, status in self.statuses.items() if status == AgentStatus.ONLINE.value]

    @property
    def not_online(self) -> list[str]:
        return [name for name, status in self.statuses.items() if status != AgentStatus.ONLINE.value]


def heartbeat_age_minutes(session: dict, now: datetime) -> Optional[float]:
    beat = parse_timestamp(session.get("last_heartbeat")) or parse_timestamp(
        session.get("started_at")
    )
    if beat is None:
        return None
    return (now - beat).total_seconds() / 60.0


def derive_status(session: Optional[dict], now: datetime, stale_minutes: int) -> str:
    if session is None:
        return AgentStatus.OFFLINE.value
    reported = text(session.get("status")) or AgentStatus.OFFLINE.value
    if reported != AgentStatus.ONLINE.value:
        return reported
    age = heartbeat_age_minutes(session, now)
    if age is None or age > stale_minutes:
        return AgentStatus.STALE.value
    return AgentStatus.ONLINE.value


def task_label(running: Optional[dict], status: str) -> str:
    if running is not None and text(running.get("title")):
        return running["title"]
    if status == AgentStatus.ONLINE.value:
        return "awaiting dispatch"
    if status == AgentStatus.STALE.value:
        return "no heartbeat"
    return "offline"


def _activity_item(event: dict) -> dict:
    return {
        "t": clock_label(event.get("created_at")),
        "ts": event.get("created_at"),
        "type": event.get("event_type") or "unknown",
        "m": event_message(event),
        "product": event_product(event, default=""),
        "tags": tags_of(event),
    }


def aggregate_agents(
    roster: Iterable[AgentProfile],
    sessions: Iterable[dict],
    tasks: Iterable[dict],
    token_usage: Iterable[dict],
    events: Iterable[dict],
    now: datetime,
    stale_minutes: int = 30,
) -> AgentStatusResult:
    sessions = list(sessions)
    tasks = list(tasks)
    token_usage = list(token_usage)
    events = list(events)
    today = day_key(now)
    result = AgentStatusResult()

    for profile in roster:
        name = profile.id
        session = latest_session_for(name, sessions)
        status = derive_status(session, now, stale_minutes)

        agent_tasks = tasks_for_agent(name, tasks)
        today_tasks = [t for t in agent_tasks if text(t.get("created_at")).startswith(today)]
        succeeded = sum(1 for t in today_tasks if t.get("status") == TaskStatus.SUCCEEDED.value)
        running = next(
            (t for t in agent_tasks if t.get("status") == TaskStatus.RUNNING.value), None
        )
        cost = sum(to_float(u.get("cost_usd")) for u in token_usage if u.get("agent") == name)

        agent_events = events_for_agent(name, events)
        last = latest_event(agent_events)
        last_active = minutes_since(parse_timestamp(last.get("created_at")), now) if last else None

        result.statuses[name] = status
        result.agents[name] = {
            "name": profile.display_name,
            "role": profile.role,
            "icon": profile.icon,
            "angle": profile.angle,
            "color": profile.color,
            "status": status,
            "model": session.get("model") if session else None,
            "task": task_label(running, status),
            "tasks": len(today_tasks),
            "succeeded": succeeded,
            "cost": round_money(cost),
            "eff": whole_percent(succeeded, len(today_tasks)),
            "last_active_min": last_active,
        }
        result.last_active[name] = last_active
        result.uptime[name] = _uptime_entry(name, session, status, sessions, now)
        result.activity[name] = [_activity_item(e) for e in agent_events[:ACTIVITY_PER_AGENT]]

    return result


def _uptime_entry(
    name: str,
    session: Optional[dict],
    status: str,
    sessions: list[dict],
    now: datetime,
) -> dict:
    started = parse_timestamp(session.get("started_at")) if session else None
    age = heartbeat_age_minutes(session, now) if session else None
    live = status in (AgentStatus.ONLINE.value, AgentStatus.STALE.value)
    agent_sessions = sessions_for(name, sessions)
    online_sessions = sum(
        1 for s in agent_sessions if s.get("status") == AgentStatus.ONLINE.value
    )
    return {
        "status": status,
        "started_at": session.get("started_at") if session else None,
        "last_heartbeat": session.get("last_heartbeat") if session else None,
        "heartbeat_age_min": int(round(age)) if age is not None else None,
        "uptime_min": minutes_since(started, now) if live and started else None,
        "sessions": len(agent_sessions),
        "online_share": percent(online_sessions, len(agent_sessions)),
    }

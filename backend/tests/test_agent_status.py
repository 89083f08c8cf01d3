import sys
from pathlib import Path

BACKEND_ROOT = Path(__file__).resolve().parents[1]
if str(BACKEND_ROOT) not in sys.path:
    sys.path.insert(0, str(BACKEND_ROOT))

from conftest import minutes_ago
from models.agent import AgentProfile
from services.agent_status import aggregate_agents, derive_status, task_label
from services.record_joins import latest_session_for
from services.reference_data import AGENT_ROSTER

ISAIAH = AgentProfile(id="isaiah", role="Engineer", icon="⚡", angle=342, color="#a78bfa")


def test_fresh_heartbeat_is_online_with_dispatch_label(now, make_session):
    result = aggregate_agents([ISAIAH], [make_session("isaiah", heartbeat_min=5)], [], [], [], now)

    agent = result.agents["isaiah"]
    assert agent["status"] == "online"
    assert agent["task"] == "awaiting dispatch"
    assert agent["name"] == "ISAIAH"
    assert agent["model"] == "sonnet-4.5"
    assert result.online == ["isaiah"]


def test_old_heartbeat_is_stale_even_when_session_says_online(now, make_session):
    result = aggregate_agents([ISAIAH], [make_session("isaiah", heartbeat_min=45)], [], [], [], now)

    assert result.agents["isaiah"]["status"] == "stale"
    assert result.agents["isaiah"]["task"] == "no heartbeat"
    assert result.not_online == ["isaiah"]
    assert result.uptime["isaiah"]["heartbeat_age_min"] == 45


def test_no_session_is_offline(now):
    result = aggregate_agents([ISAIAH], [], [], [], [], now)

    agent = result.agents["isaiah"]
    assert agent["status"] == "offline"
    assert agent["task"] == "offline"
    assert agent["model"] is None
    assert agent["last_active_min"] is None
    assert result.uptime["isaiah"]["uptime_min"] is None


def test_non_online_session_status_passes_through(now, make_session):
    assert derive_status(make_session("isaiah", status="paused"), now, 30) == "paused"


def test_missing_heartbeat_falls_back_to_started_at(now, make_session):
    recent = make_session("isaiah", heartbeat_min=None, started_min=10)
    old = make_session("isaiah", heartbeat_min=None, started_min=90)
    undated = make_session("isaiah", heartbeat_min=None, started_min=None)

    assert derive_status(recent, now, 30) == "online"
    assert derive_status(old, now, 30) == "stale"
    assert derive_status(undated, now, 30) == "stale"


def test_latest_session_wins(make_session):
    older = make_session("isaiah", status="offline", started_min=600)
    newer = make_session("isaiah", status="online", started_min=30)
    other = make_session("paul", started_min=1)

    assert latest_session_for("isaiah", [older, newer, other]) is newer
    assert latest_session_for("daniel", [older, newer, other]) is None


def test_running_task_title_is_the_label(now, make_session, make_task):
    tasks = [make_task(status="running", title="Ship pricing page")]
    result = aggregate_agents([ISAIAH], [make_session("isaiah")], tasks, [], [], now)

    assert result.agents["isaiah"]["task"] == "Ship pricing page"
    assert task_label(None, "offline") == "offline"


def test_today_task_counts_efficiency_and_cost(now, make_session, make_task):
    tasks = [
        make_task(status="succeeded"),
        make_task(status="succeeded"),
        make_task(status="failed"),
        make_task(status="succeeded", created_at="2026-03-14T22:00:00Z"),
        make_task(status="succeeded", agent="paul"),
    ]
    usage = [
        {"agent": "isaiah", "cost_usd": 0.125, "model": "sonnet"},
        {"agent": "isaiah", "cost_usd": "0.5", "model": "opus"},
        {"agent": "paul", "cost_usd": 9.0, "model": "kimi"},
    ]

    result = aggregate_agents([ISAIAH], [make_session("isaiah")], tasks, usage, [], now)

    agent = result.agents["isaiah"]
    assert agent["tasks"] == 3
    assert agent["succeeded"] == 2
    assert agent["eff"] == 67
    assert agent["cost"] == 0.63


def test_last_active_and_activity_come_from_agent_events(now, make_session, make_event):
    events = [
        make_event(agent="isaiah", created_at=minutes_ago(3), payload={"message": "deployed"}),
        make_event(agent="isaiah", created_at=minutes_ago(40)),
        make_event(agent="paul", created_at=minutes_ago(1)),
    ]

    result = aggregate_agents([ISAIAH], [make_session("isaiah")], [], [], events, now)

    assert result.last_active["isaiah"] == 3
    assert result.agents["isaiah"]["last_active_min"] == 3
    activity = result.activity["isaiah"]
    assert len(activity) == 2
    assert activity[0]["m"] == "deployed"
    assert activity[1]["m"] == "step_completed"


def test_every_roster_agent_is_reported(now):
    result = aggregate_agents(AGENT_ROSTER, [], [], [], [], now)

    assert set(result.agents) == {profile.id for profile in AGENT_ROSTER}
    assert all(agent["status"] == "offline" for agent in result.agents.values())
    assert result.online == []


def test_heartbeat_with_trimmed_fraction_is_online(now):
    session = {
        "agent": "isaiah",
        "status": "online",
        "started_at": "2026-03-15T09:00:00.5+00:00",
        "last_heartbeat": "2026-03-15T11:58:00.12345+00:00",
    }

    result = aggregate_agents([ISAIAH], [session], [], [], [], now)

    assert result.agents["isaiah"]["status"] == "online"
    assert result.uptime["isaiah"]["heartbeat_age_min"] == 2
    assert result.uptime["isaiah"]["uptime_min"] == 180

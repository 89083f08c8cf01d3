"""
Health & Narrative Aggregator.

Consumes the already-computed results of the other aggregators.

Health score is the sum of four sub-scores, each capped at 25:

- agents:  share of the roster online x 25
- tasks:   25 minus 3 per blocked task and 5 per P0 item, floored at 0
- content: today's units / daily target x 25
- systems: 15 base, +5 when revenue is positive, +5 when no positions are open
"""

from dataclasses import dataclass
from typing import Sequence

from utils.records import round_half_up

SUBSCORE_CAP = 25
BLOCKED_PENALTY = 3
P0_PENALTY = 5
SYSTEMS_BASE = 15
REVENUE_BONUS = 5
NO_OPEN_RISK_BONUS = 5

GRADE_THRESHOLDS = ((80, "A"), (60, "B"), (40, "C"))


@dataclass(frozen=True)
class HealthInputs:
    online_agents: Sequence[str]
    offline_agents: Sequence[str]
    roster_size: int
    blocked_tasks: int
    p0_count: int
    content_today: int
    content_target: int
    revenue_today: float
    revenue_total: float
    mrr: float
    open_positions: int
    pending_approvals: int


def _cap(value: float) -> int:
    return int(max(0, min(SUBSCORE_CAP, round_half_up(value, 0))))


def grade_for(score: int) -> str:
    for threshold, grade in GRADE_THRESHOLDS:
        if score >= threshold:
            return grade
    return "D"


def health_score(inputs: HealthInputs) -> dict:
    agents = _cap(len(inputs.online_agents) / inputs.roster_size * SUBSCORE_CAP) if inputs.roster_size else 0
    tasks = _cap(
        SUBSCORE_CAP - inputs.blocked_tasks * BLOCKED_PENALTY - inputs.p0_count * P0_PENALTY
    )
    content = (
        _cap(inputs.content_today / inputs.content_target * SUBSCORE_CAP)
        if inputs.content_target
        else 0
    )
    systems = SYSTEMS_BASE
    if inputs.revenue_total > 0:
        systems += REVENUE_BONUS
    if inputs.open_positions == 0:
        systems += NO_OPEN_RISK_BONUS
    systems = _cap(systems)

    score = min(100, agents + tasks + content + systems)
    return {
        "score": score,
        "grade": grade_for(score),
        "breakdown": {
            "agents": agents,
            "tasks": tasks,
            "content": content,
            "systems": systems,
        },
    }


def _plural(count: int, noun: str) -> str:
    return f"{count} {noun}" + ("" if count == 1 else "s")


def _names(agent_ids: Sequence[str]) -> str:
    return ", ".join(agent.upper() for agent in agent_ids)


def brief_clauses(inputs: HealthInputs) -> list[str]:
    """Narrative clauses in fixed order; clauses whose trigger is false are omitted."""
    clauses = []
    online = len(inputs.online_agents)
    if online:
        clauses.append(f"{online}/{inputs.roster_size} agents online ({_names(inputs.online_agents)}).")
    else:
        clauses.append(f"0/{inputs.roster_size} agents online.")
    if inputs.offline_agents:
        clauses.append(f"Offline: {_names(inputs.offline_agents)}.")
    if inputs.blocked_tasks:
        verb = "needs" if inputs.blocked_tasks == 1 else "need"
        clauses.append(f"{_plural(inputs.blocked_tasks, 'blocked task')} {verb} attention.")
    if inputs.p0_count:
        clauses.append(f"{_plural(inputs.p0_count, 'P0 item')} open.")
    clauses.append(f"Content: {inputs.content_today}/{inputs.content_target} today.")
    if inputs.revenue_today > 0:
        clauses.append(f"Revenue: ${inputs.revenue_today:.2f} today.")
    else:
        clauses.append(f"Revenue: $0 today. MRR: ${inputs.mrr:.2f}.")
    if inputs.open_positions:
        clauses.append(f"{_plural(inputs.open_positions, 'open position')}.")
    if inputs.pending_approvals:
        clauses.append(f"{_plural(inputs.pending_approvals, 'pending approval')}.")
    return clauses


def commander_brief(inputs: HealthInputs) -> dict:
    clauses = brief_clauses(inputs)
    return {"text": " ".join(clauses), "clauses": clauses}

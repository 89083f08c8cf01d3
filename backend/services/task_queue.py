"""
Task/Queue Aggregator.

Queue counts, today's outcomes, the P0 list, pending approvals, the kanban
task list and optimisation progress.
"""

from datetime import datetime
from typing import Iterable

from models.agent import TaskStatus
from services.classifiers import is_approval_task, is_optimization_task, is_p0_task
from services.record_joins import owner_or_unassigned
from services.reference_data import DEFAULT_TASK_AGENT, OPTIMIZATION_BASELINE
from utils.records import round_half_up, text
from utils.utcnow import day_key, parse_timestamp

KANBAN_LIMIT = 100


def _count(tasks: Iterable[dict], status: TaskStatus) -> int:
    return sum(1 for t in tasks if t.get("status") == status.value)


def summarize_tasks(tasks: Iterable[dict], now: datetime) -> dict[str, int]:
    tasks = list(tasks)
    today = day_key(now)
    today_tasks = [t for t in tasks if text(t.get("created_at")).startswith(today)]
    return {
        "queued": _count(tasks, TaskStatus.QUEUED),
        "running": _count(tasks, TaskStatus.RUNNING),
        "blocked": _count(tasks, TaskStatus.BLOCKED),
        "succeeded_today": _count(today_tasks, TaskStatus.SUCCEEDED),
        "failed_today": _count(today_tasks, TaskStatus.FAILED),
    }


def p0_items(tasks: Iterable[dict]) -> list[dict]:
    return [{"i": t.get("title"), "o": owner_or_unassigned(t)} for t in tasks if is_p0_task(t)]


def pending_approvals(tasks: Iterable[dict], now: datetime) -> list[dict]:
    items = []
    for task in tasks:
        if not is_approval_task(task):
            continue
        created = parse_timestamp(task.get("created_at"))
        age_hours = (
            round_half_up((now - created).total_seconds() / 3600.0, 1) if created else None
        )
        items.append(
            {
                "id": task.get("id"),
                "title": task.get("title"),
                "agent": owner_or_unassigned(task),
                "status": task.get("status"),
                "priority": task.get("priority") or "normal",
                "age_hours": age_hours,
            }
        )
    return items


def _created_label(value: object) -> str:
    created = parse_timestamp(value)
    if created is None:
        return "—"
    return created.strftime("%m/%d %H:%M")


def kanban_tasks(tasks: Iterable[dict]) -> list[dict]:
    return [
        {
            "id": t.get("id"),
            "title": t.get("title"),
            "agent": t.get("assigned_agent") or DEFAULT_TASK_AGENT,
            "product": t.get("product") or "factory",
            "priority": t.get("priority") or "normal",
            "status": t.get("status") or TaskStatus.QUEUED.value,
            "created": _created_label(t.get("created_at")),
        }
        for t in list(tasks)[:KANBAN_LIMIT]
    ]


def optimization_progress(tasks: Iterable[dict]) -> dict[str, int]:
    """Optimisation-tagged task counts; the static baseline when none exist."""
    tagged = [t for t in tasks if is_optimization_task(t)]
    done = _count(tagged, TaskStatus.SUCCEEDED)
    return {
        "total": len(tagged) or OPTIMIZATION_BASELINE["total"],
        "done": done or OPTIMIZATION_BASELINE["done"],
    }

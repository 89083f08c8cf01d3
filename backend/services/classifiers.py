"""
Heuristic record classifiers.

Events carry no structured category, so cron runs, content publication,
scanner output, arbitrage activity and briefings are recognised by event
type, tags and message substrings. One predicate per category.
"""

from models.agent import TaskStatus
from utils.records import has_tag, payload_of, text

CONTENT_EVENT_TYPES = frozenset({"articles_published", "article_published"})
BRIEFING_EVENT_TYPES = frozenset({"briefing_sent", "morning_briefing", "evening_briefing"})
APPROVAL_TAGS = ("approval", "needs_approval")
P0_CLOSED_STATUSES = frozenset({TaskStatus.SUCCEEDED.value, TaskStatus.CANCELLED.value})


def is_content_event(event: dict) -> bool:
    event_type = text(event.get("event_type"))
    if event_type in CONTENT_EVENT_TYPES:
        return True
    if event_type == "step_completed" and has_tag(event, "content", "article"):
        return True
    return has_tag(event, "content")


def is_scanner_event(event: dict) -> bool:
    return has_tag(event, "scanner")


def scanner_slug(name: str) -> str:
    return "_".join(name.lower().split())


def scanner_matches_event(scanner_name: str, event: dict) -> bool:
    """Payload ``scanner`` equals the slug, or payload ``type`` mentions the name."""
    payload = payload_of(event)
    if payload.get("scanner") == scanner_slug(scanner_name):
        return True
    return scanner_name.lower() in text(payload.get("type"))


def is_arb_event(event: dict) -> bool:
    return has_tag(event, "arb") or "arb" in text(event.get("event_type"))


def is_briefing_event(event: dict) -> bool:
    if text(event.get("event_type")) in BRIEFING_EVENT_TYPES:
        return True
    return "briefing" in text(payload_of(event).get("message")).lower()


def cron_matches_event(job: str, agent: str, event: dict) -> bool:
    """Event by the cron's agent whose message or type names the job."""
    if event.get("agent") != agent:
        return False
    job_lower = job.lower()
    if job_lower in text(payload_of(event).get("message")).lower():
        return True
    return "_".join(job_lower.split()) in text(event.get("event_type")).lower()


def is_success_event(event: dict) -> bool:
    event_type = text(event.get("event_type"))
    return "success" in event_type or "complete" in event_type


def is_p0_task(task: dict) -> bool:
    """Critical priority and not yet succeeded or cancelled."""
    return task.get("priority") == "critical" and text(task.get("status")) not in P0_CLOSED_STATUSES


def is_approval_task(task: dict) -> bool:
    """Blocked, critical, or explicitly tagged for approval."""
    return (
        task.get("status") == TaskStatus.BLOCKED.value
        or task.get("priority") == "critical"
        or has_tag(task, *APPROVAL_TAGS)
    )


def is_optimization_task(task: dict) -> bool:
    return has_tag(task, "optimization")


def token_tier_for_model(model: object) -> str:
    """T1 for the kimi family, T3 for opus, T2 for everything else."""
    name = text(model)
    if "kimi" in name:
        return "T1"
    if "opus" in name:
        return "T3"
    return "T2"

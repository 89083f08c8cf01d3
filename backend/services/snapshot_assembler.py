"""
Snapshot Assembler.

Runs every aggregator over one ``RecordBundle`` and merges the results with
the static reference data into a single frozen ``FactorySnapshot``.
Assembly is synchronous and deterministic for a given bundle and ``now``;
only ``generate_snapshot`` touches the network (through the fetcher).
"""

from datetime import datetime
from typing import Optional

from models.snapshot import FactorySnapshot, SnapshotConfig
from services import reference_data
from services.agent_status import aggregate_agents
from services.content import content_card, content_velocity
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
from services.fetcher import RecordBundle, fetch_bundle
from services.financial import aggregate_revenue, aggregate_tokens, product_rows
from services.health import HealthInputs, commander_brief, health_score
from services.source_gateway import SourceGateway
from services.task_queue import (
    kanban_tasks,
    optimization_progress,
    p0_items,
    pending_approvals,
    summarize_tasks,
)
from services.trading_performance import aggregate_trading, arb_summary
from utils.logger import get_logger
from utils.utcnow import isoformat_z, utcnow

logger = get_logger("snapshot")


def build_snapshot(
    bundle: RecordBundle,
    now: datetime,
    config: Optional[SnapshotConfig] = None,
) -> FactorySnapshot:
    config = config or SnapshotConfig()
    roster = reference_data.AGENT_ROSTER

    agents = aggregate_agents(
        roster,
        bundle.sessions,
        bundle.tasks,
        bundle.token_usage,
        bundle.events,
        now,
        stale_minutes=config.heartbeat_stale_minutes,
    )

    task_summary = summarize_tasks(bundle.tasks, now)
    p0 = p0_items(bundle.tasks)
    approvals = pending_approvals(bundle.tasks, now)

    revenue = aggregate_revenue(bundle.revenue, now, bundle.affiliate_clicks)
    tokens = aggregate_tokens(bundle.token_usage)

    trading = aggregate_trading(bundle.positions, bundle.signals, now, config.trading)

    velocity = content_velocity(bundle.events, now, config.content_daily_target)

    health_inputs = HealthInputs(
        online_agents=agents.online,
        offline_agents=agents.not_online,
        roster_size=len(roster),
        blocked_tasks=task_summary["blocked"],
        p0_count=len(p0),
        content_today=velocity["today"],
        content_target=config.content_daily_target,
        revenue_today=revenue.today,
        revenue_total=revenue.total,
        mrr=revenue.mrr,
        open_positions=trading["positions"]["open"],
        pending_approvals=len(approvals),
    )

    return FactorySnapshot(
        generated_at=isoformat_z(now),
        agents=agents.agents,
        connections=reference_data.connections(set(agents.online)),
        products=product_rows(bundle.products, bundle.revenue),
        opportunities=opportunity_rows(bundle.opportunities),
        scanners=scanner_panel(bundle.events),
        tasks=kanban_tasks(bundle.tasks),
        task_summary=task_summary,
        events=activity_feed(bundle.events),
        triggers=trigger_panel(bundle.triggers),
        cap_gates=cap_gates(bundle.policies),
        revenue=revenue.headline(),
        rev_channels=reference_data.revenue_channels(revenue.total),
        tokens=tokens.to_dict(bundle.model_routing),
        p0=p0,
        content=content_card(velocity),
        phases=reference_data.phases(revenue.total),
        socials=[dict(account) for account in reference_data.SOCIAL_ACCOUNTS],
        infra=infra_panel(bundle.sessions, agents.statuses),
        gordon=trading_desk(
            agents.statuses.get(reference_data.TRADING_AGENT), trading["mode"]
        ),
        optimization=optimization_progress(bundle.tasks),
        crons=cron_panel(bundle.events),
        trading=trading,
        agent_activity=agents.activity,
        content_velocity=velocity,
        arb_summary=arb_summary(trading, bundle.signals, bundle.events, now),
        revenue_detail=revenue.detail(),
        last_briefing=last_briefing(bundle.events, now),
        agent_last_active=agents.last_active,
        pending_approvals=approvals,
        health_score=health_score(health_inputs),
        commander_brief=commander_brief(health_inputs),
        agent_uptime=agents.uptime,
        db_tables=list(reference_data.DB_TABLES),
    )


async def generate_snapshot(
    gateway: SourceGateway,
    config: Optional[SnapshotConfig] = None,
    now: Optional[datetime] = None,
) -> FactorySnapshot:
    """Fetch every record set, then assemble. Source faults degrade, never raise."""
    now = now or utcnow()
    bundle = await fetch_bundle(gateway, now)
    snapshot = build_snapshot(bundle, now, config)
    logger.info(
        "Snapshot assembled",
        agents_online=len([a for a in snapshot.agents.values() if a["status"] == "online"]),
        health=snapshot.health_score["score"],
    )
    return snapshot

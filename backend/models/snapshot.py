from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class TradingConfig(BaseModel):
    """Operational switches for the trading desk card."""

    model_config = ConfigDict(frozen=True)

    decommissioned: bool = False
    starting_balance: float = 1010.0
    mode: str = "paper"


class SnapshotConfig(BaseModel):
    """Thresholds the aggregators read instead of touching global settings."""

    model_config = ConfigDict(frozen=True)

    heartbeat_stale_minutes: int = Field(default=30, ge=0)
    content_daily_target: int = Field(default=10, ge=1)
    trading: TradingConfig = Field(default_factory=TradingConfig)

    @classmethod
    def from_settings(cls, settings) -> "SnapshotConfig":
        return cls(
            heartbeat_stale_minutes=settings.HEARTBEAT_STALE_MINUTES,
            content_daily_target=settings.CONTENT_DAILY_TARGET,
            trading=TradingConfig(
                decommissioned=settings.TRADING_DECOMMISSIONED,
                starting_balance=settings.TRADING_STARTING_BALANCE,
                mode=settings.TRADING_MODE,
            ),
        )


class FactorySnapshot(BaseModel):
    """The consolidated operational status snapshot served to the dashboard."""

    model_config = ConfigDict(frozen=True)

    generated_at: str
    agents: dict[str, dict[str, Any]]
    connections: list[dict[str, Any]]
    products: list[dict[str, Any]]
    opportunities: list[dict[str, Any]]
    scanners: list[dict[str, Any]]
    tasks: list[dict[str, Any]]
    task_summary: dict[str, int]
    events: list[dict[str, Any]]
    triggers: list[dict[str, Any]]
    cap_gates: list[dict[str, Any]]
    revenue: dict[str, float]
    rev_channels: list[dict[str, Any]]
    tokens: dict[str, Any]
    p0: list[dict[str, Any]]
    content: dict[str, Any]
    phases: list[dict[str, Any]]
    socials: list[dict[str, Any]]
    infra: dict[str, Any]
    gordon: dict[str, Any]
    optimization: dict[str, int]
    crons: list[dict[str, Any]]
    trading: dict[str, Any]
    agent_activity: dict[str, list[dict[str, Any]]]
    content_velocity: dict[str, int]
    arb_summary: dict[str, Any]
    revenue_detail: dict[str, Any]
    last_briefing: Optional[dict[str, Any]]
    agent_last_active: dict[str, Optional[int]]
    pending_approvals: list[dict[str, Any]]
    health_score: dict[str, Any]
    commander_brief: dict[str, Any]
    agent_uptime: dict[str, dict[str, Any]]
    db_tables: list[str]

"""
Financial Aggregator: revenue rollups and token spend.

All currency figures are summed unrounded and rounded once, half-up, to
cents at the end.
"""

from collections import defaultdict
from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable

from services.classifiers import token_tier_for_model
from services.record_joins import revenue_for_product
from services.reference_data import TOKEN_TIERS
from utils.records import round_money, sum_field, text, to_float, whole_percent
from utils.utcnow import day_key

SUBSCRIPTION_SOURCE = "stripe"

STAGE_COLORS = {"qa": "#22d3ee", "build": "#a78bfa", "launch": "#00ff88"}
DEFAULT_STAGE_COLOR = "#64748b"


@dataclass
class RevenueResult:
    total: float = 0.0
    today: float = 0.0
    mtd: float = 0.0
    mrr: float = 0.0
    affiliate_clicks_today: int = 0
    affiliate_clicks_total: int = 0

    def headline(self) -> dict[str, float]:
        return {"total": self.total, "today": self.today}

    def detail(self) -> dict:
        return {
            "total": self.total,
            "today": self.today,
            "mtd": self.mtd,
            "mrr": self.mrr,
            "affiliate_clicks_today": self.affiliate_clicks_today,
            "affiliate_clicks_total": self.affiliate_clicks_total,
        }


@dataclass
class TokenResult:
    total_cost: float = 0.0
    by_agent: dict[str, float] = field(default_factory=dict)
    by_tier: dict[str, float] = field(default_factory=dict)
    tiers: list[dict] = field(default_factory=list)

    def to_dict(self, routing: Iterable[dict] = ()) -> dict:
        return {
            "total_cost": self.total_cost,
            "by_agent": self.by_agent,
            "by_tier": self.by_tier,
            "tiers": self.tiers,
            "routing": list(routing),
        }


def is_subscription_revenue(entry: dict) -> bool:
    """Recurring revenue from the subscription payment source."""
    from_source = entry.get("source") == SUBSCRIPTION_SOURCE or entry.get("channel") == SUBSCRIPTION_SOURCE
    recurring = entry.get("type") == "subscription" or bool(entry.get("recurring"))
    return from_source and recurring


def aggregate_revenue(
    revenue: Iterable[dict],
    now: datetime,
    affiliate_clicks: Iterable[dict] = (),
) -> RevenueResult:
    revenue = list(revenue)
    clicks = list(affiliate_clicks)
    today = day_key(now)
    month_start = today[:7] + "-01"

    todays = [r for r in revenue if text(r.get("created_at")).startswith(today)]
    # ISO timestamps compare correctly as strings against a YYYY-MM-DD prefix
    month = [r for r in revenue if text(r.get("created_at")) >= month_start]
    recurring = [r for r in revenue if is_subscription_revenue(r)]

    return RevenueResult(
        total=round_money(sum_field(revenue, "amount")),
        today=round_money(sum_field(todays, "amount")),
        mtd=round_money(sum_field(month, "amount")),
        mrr=round_money(sum_field(recurring, "amount")),
        affiliate_clicks_today=sum(
            1 for c in clicks if text(c.get("created_at")).startswith(today)
        ),
        affiliate_clicks_total=len(clicks),
    )


def aggregate_tokens(token_usage: Iterable[dict]) -> TokenResult:
    by_agent: dict[str, float] = defaultdict(float)
    by_tier: dict[str, float] = {tier["key"]: 0.0 for tier in TOKEN_TIERS}
    total = 0.0
    for usage in token_usage:
        cost = to_float(usage.get("cost_usd"))
        agent = text(usage.get("agent")) or "unknown"
        by_agent[agent] += cost
        by_tier[token_tier_for_model(usage.get("model"))] += cost
        total += cost

    tiers = []
    for tier in TOKEN_TIERS:
        share = whole_percent(by_tier[tier["key"]], total) if total > 0 else tier["fallback"]
        tiers.append({"t": tier["t"], "m": tier["m"], "p": share})

    return TokenResult(
        total_cost=round_money(total),
        by_agent={agent: round_money(cost) for agent, cost in by_agent.items()},
        by_tier={key: round_money(cost) for key, cost in by_tier.items()},
        tiers=tiers,
    )


def product_rows(products: Iterable[dict], revenue: Iterable[dict]) -> list[dict]:
    revenue = list(revenue)
    rows = []
    for product in products:
        stage = product.get("stage") or product.get("status")
        rows.append(
            {
                "name": product.get("name"),
                "price": product.get("price_point") or product.get("price") or "—",
                "status": stage or "Planned",
                "blocker": product.get("blocker") or "",
                "rev": round_money(revenue_for_product(product, revenue)),
                "c": STAGE_COLORS.get(text(stage), DEFAULT_STAGE_COLOR),
                "mat": to_float(product.get("maturity")),
            }
        )
    return rows

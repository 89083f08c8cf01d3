import sys
from pathlib import Path

BACKEND_ROOT = Path(__file__).resolve().parents[1]
if str(BACKEND_ROOT) not in sys.path:
    sys.path.insert(0, str(BACKEND_ROOT))

from conftest import days_ago, minutes_ago
from services.classifiers import token_tier_for_model
from services.financial import (
    aggregate_revenue,
    aggregate_tokens,
    is_subscription_revenue,
    product_rows,
)


def test_zero_token_spend_uses_fallback_shares():
    tokens = aggregate_tokens([])

    assert [tier["p"] for tier in tokens.tiers] == [30, 50, 20]
    assert tokens.total_cost == 0.0
    assert tokens.by_tier == {"T1": 0.0, "T2": 0.0, "T3": 0.0}


def test_token_spend_is_split_by_tier_and_agent():
    usage = [
        {"agent": "paul", "model": "kimi-k2.5", "cost_usd": 1.0},
        {"agent": "isaiah", "model": "claude-opus-4.5", "cost_usd": 2.0},
        {"agent": "isaiah", "model": "claude-sonnet-4.5", "cost_usd": 1.0},
        {"agent": None, "model": None, "cost_usd": None},
    ]

    tokens = aggregate_tokens(usage)

    assert tokens.total_cost == 4.0
    assert tokens.by_agent == {"paul": 1.0, "isaiah": 3.0, "unknown": 0.0}
    assert tokens.by_tier == {"T1": 1.0, "T2": 1.0, "T3": 2.0}
    assert [tier["p"] for tier in tokens.tiers] == [25, 25, 50]


def test_token_tier_heuristic():
    assert token_tier_for_model("moonshot/kimi-k2") == "T1"
    assert token_tier_for_model("anthropic/claude-opus-4-5") == "T3"
    assert token_tier_for_model("gpt-4o") == "T2"
    assert token_tier_for_model(None) == "T2"


def test_token_payload_includes_routing_rows():
    routing = [{"task_type": "content", "model": "kimi"}]

    payload = aggregate_tokens([]).to_dict(routing)

    assert payload["routing"] == routing
    assert set(payload) == {"total_cost", "by_agent", "by_tier", "tiers", "routing"}


def test_revenue_rollups(now):
    revenue = [
        {"amount": 19.99, "created_at": minutes_ago(30), "source": "stripe", "type": "subscription"},
        {"amount": "5.01", "created_at": minutes_ago(90), "channel": "affiliate"},
        {"amount": 100.51, "created_at": days_ago(4), "source": "stripe", "recurring": True},
        {"amount": 50, "created_at": "2026-02-27T10:00:00Z"},
        {"amount": None, "created_at": None},
    ]
    clicks = [{"created_at": minutes_ago(5)}, {"created_at": days_ago(2)}]

    result = aggregate_revenue(revenue, now, clicks)

    assert result.total == 175.51
    assert result.today == 25.0
    assert result.mtd == 125.51
    assert result.mrr == 120.5
    assert result.affiliate_clicks_today == 1
    assert result.affiliate_clicks_total == 2
    assert result.headline() == {"total": 175.51, "today": 25.0}


def test_subscription_needs_both_source_and_recurrence():
    assert is_subscription_revenue({"source": "stripe", "type": "subscription"})
    assert is_subscription_revenue({"channel": "stripe", "recurring": True})
    assert not is_subscription_revenue({"source": "stripe", "type": "one_time"})
    assert not is_subscription_revenue({"source": "gumroad", "type": "subscription"})


def test_product_rows_join_revenue_by_id_or_name():
    products = [
        {"id": "p1", "name": "PolyPulse", "stage": "launch", "price_point": "$19/mo", "maturity": 0.8},
        {"id": "p2", "name": "Stack Picks", "status": None},
    ]
    revenue = [
        {"product": "p1", "amount": 10},
        {"product": "polypulse", "amount": 5.5},
        {"product": "PolyPulse", "amount": 100},
    ]

    rows = product_rows(products, revenue)

    assert rows[0]["rev"] == 15.5
    assert rows[0]["c"] == "#00ff88"
    assert rows[0]["price"] == "$19/mo"
    assert rows[1]["status"] == "Planned"
    assert rows[1]["price"] == "—"
    assert rows[1]["rev"] == 0.0
    assert rows[1]["c"] == "#64748b"

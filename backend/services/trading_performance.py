"""
Trading Aggregator.

Summarises the v3 trading daemon's positions and signals:

- disjoint status buckets whose counts always add up to the total
- settled-only realised P&L, cost, win rate and ROI
- a daily P&L history keyed by close date (open date as fallback),
  limited to the most recent days
- the same figures broken down per edge label
- signal counts and the most recent positions/signals

The decommission switch in ``TradingConfig`` zeroes the reported balance
and sets the mode to ``decommissioned``. It does not touch the P&L
figures, which stay in the payload for audit.
"""

import re
from collections import defaultdict
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Iterable, Optional

from models.snapshot import TradingConfig
from models.trading import POSITION_BUCKETS, PositionStatus, TradingMode
from services.classifiers import is_arb_event
from utils.records import percent, round_money, text, to_float
from utils.utcnow import day_key, parse_timestamp

DAILY_HISTORY_DAYS = 14
RECENT_POSITIONS = 20
RECENT_SIGNALS = 30
SIGNAL_ACTIVE_WINDOW = timedelta(hours=1)
_DAY_PREFIX = re.compile(r"\d{4}-\d{2}-\d{2}")


def realized_pnl(position: dict) -> float:
    """Realised P&L; older daemon rows stored it under ``unrealized_pnl``."""
    value = position.get("realized_pnl")
    if value is None:
        value = position.get("unrealized_pnl")
    return to_float(value)


def position_cost(position: dict) -> float:
    return to_float(position.get("total_cost"))


def is_settled(position: dict) -> bool:
    return position.get("status") == PositionStatus.SETTLED.value


def settlement_day(position: dict) -> Optional[str]:
    """Date portion of ``closed_at``, falling back to ``opened_at``."""
    for key in ("closed_at", "opened_at"):
        match = _DAY_PREFIX.match(text(position.get(key)))
        if match and parse_timestamp(match.group(0)) is not None:
            return match.group(0)
    return None


@dataclass
class SettledStats:
    """Running totals over settled positions."""

    count: int = 0
    wins: int = 0
    pnl: float = 0.0
    cost: float = 0.0

    def add(self, position: dict) -> None:
        pnl = realized_pnl(position)
        self.count += 1
        self.pnl += pnl
        self.cost += position_cost(position)
        if pnl > 0:
            self.wins += 1

    @property
    def win_rate(self) -> float:
        return percent(self.wins, self.count)

    @property
    def roi(self) -> float:
        return percent(self.pnl, self.cost)


def settled_stats(positions: Iterable[dict]) -> SettledStats:
    stats = SettledStats()
    for position in positions:
        if is_settled(position):
            stats.add(position)
    return stats


def bucket_positions(positions: Iterable[dict]) -> dict[str, int]:
    status_to_bucket = {
        status: bucket for bucket, statuses in POSITION_BUCKETS.items() for status in statuses
    }
    counts = {bucket: 0 for bucket in POSITION_BUCKETS}
    counts["other"] = 0
    total = 0
    for position in positions:
        total += 1
        counts[status_to_bucket.get(text(position.get("status")), "other")] += 1
    counts["total"] = total
    return counts


def daily_pnl_history(positions: Iterable[dict], days: int = DAILY_HISTORY_DAYS) -> list[dict]:
    by_day: dict[str, SettledStats] = defaultdict(SettledStats)
    for position in positions:
        if not is_settled(position):
            continue
        day = settlement_day(position)
        if day is None:
            continue
        by_day[day].add(position)

    recent = sorted(by_day)[-days:] if days > 0 else []
    return [
        {
            "date": day,
            "pnl": round_money(by_day[day].pnl),
            "cost": round_money(by_day[day].cost),
            "trades": by_day[day].count,
            "wins": by_day[day].wins,
            "win_rate": by_day[day].win_rate,
        }
        for day in recent
    ]


def _settled_today(positions: Iterable[dict], today: str) -> list[dict]:
    return [
        p for p in positions if is_settled(p) and text(p.get("closed_at")).startswith(today)
    ]


def edge_breakdown(positions: list[dict], signals: list[dict], today: str) -> list[dict]:
    """Per-edge performance for every edge seen on a position or signal."""
    edges: list[str] = []
    for row in (*positions, *signals):
        edge = row.get("edge")
        if isinstance(edge, str) and edge and edge not in edges:
            edges.append(edge)

    breakdown = []
    for edge in edges:
        edge_positions = [p for p in positions if p.get("edge") == edge]
        stats = settled_stats(edge_positions)
        today_pnl = sum(realized_pnl(p) for p in _settled_today(edge_positions, today))
        breakdown.append(
            {
                "edge": edge,
                "signals": sum(1 for s in signals if s.get("edge") == edge),
                "positions": len(edge_positions),
                "settled": stats.count,
                "wins": stats.wins,
                "win_rate": stats.win_rate,
                "pnl": round_money(stats.pnl),
                "cost": round_money(stats.cost),
                "roi": stats.roi,
                "pnl_today": round_money(today_pnl),
            }
        )
    return breakdown


def _newest_first(rows: list[dict], key: str, limit: int) -> list[dict]:
    dated = [(parse_timestamp(row.get(key)), index, row) for index, row in enumerate(rows)]
    # undated rows go last; ties keep their input order
    dated.sort(key=lambda item: (item[0] is not None, item[0] or datetime.min, -item[1]), reverse=True)
    return [row for _, _, row in dated[:limit]]


def signal_summary(signals: list[dict], today: str) -> dict:
    by_action: dict[str, int] = defaultdict(int)
    by_edge: dict[str, int] = defaultdict(int)
    for signal in signals:
        by_action[text(signal.get("action")) or "unknown"] += 1
        by_edge[text(signal.get("edge")) or "unknown"] += 1
    return {
        "total": len(signals),
        "today": sum(1 for s in signals if text(s.get("timestamp")).startswith(today)),
        "by_action": dict(by_action),
        "by_edge": dict(by_edge),
    }


def headline_balance(pnl_total: float, config: TradingConfig) -> tuple[float, str]:
    """Reported balance and mode, after the decommission override."""
    if config.decommissioned:
        return 0.0, TradingMode.DECOMMISSIONED.value
    return round_money(config.starting_balance + pnl_total), config.mode


def aggregate_trading(
    positions: Iterable[dict],
    signals: Iterable[dict],
    now: datetime,
    config: Optional[TradingConfig] = None,
) -> dict:
    config = config or TradingConfig()
    positions = list(positions)
    signals = list(signals)
    today = day_key(now)

    stats = settled_stats(positions)
    pnl_total = round_money(stats.pnl)
    pnl_today = round_money(sum(realized_pnl(p) for p in _settled_today(positions, today)))
    balance, mode = headline_balance(stats.pnl, config)

    return {
        "balance": balance,
        "mode": mode,
        "decommissioned": config.decommissioned,
        "computed_balance": round_money(config.starting_balance + stats.pnl),
        "positions": bucket_positions(positions),
        "pnl": {
            "total": pnl_total,
            "today": pnl_today,
            "cost": round_money(stats.cost),
            "win_rate": stats.win_rate,
            "roi": stats.roi,
            "wins": stats.wins,
            "settled": stats.count,
        },
        "daily_pnl": daily_pnl_history(positions),
        "edges": edge_breakdown(positions, signals, today),
        "recent_positions": _newest_first(positions, "opened_at", RECENT_POSITIONS),
        "recent_signals": _newest_first(signals, "timestamp", RECENT_SIGNALS),
        "signal_summary": signal_summary(signals, today),
    }


def arb_summary(trading: dict, signals: Iterable[dict], events: Iterable[dict], now: datetime) -> dict:
    """Compact daemon card built from the trading result."""
    latest = _newest_first(list(signals), "timestamp", 1)
    last_signal = latest[0].get("timestamp") if latest else None
    last_signal_at = parse_timestamp(last_signal)
    open_count = trading["positions"]["open"]
    recent_signal = last_signal_at is not None and last_signal_at > now - SIGNAL_ACTIVE_WINDOW
    arb_events = [e for e in events if is_arb_event(e)]
    return {
        "pnl_total": trading["pnl"]["total"],
        "pnl_today": trading["pnl"]["today"],
        "win_rate": trading["pnl"]["win_rate"],
        "positions_open": open_count,
        "positions_settled": trading["positions"]["settled"],
        "last_signal": last_signal,
        "last_event": arb_events[0].get("created_at") if arb_events else None,
        "status": "active" if open_count > 0 or recent_signal else "idle",
    }

"""
Static reference data merged into every snapshot.

These rosters are owned by the service, not fetched: the agent ring, the
scanner and cron schedules, the agent-to-agent graph, and the social
accounts the dashboard lists.
"""

from models.agent import AgentProfile

AGENT_ROSTER: tuple[AgentProfile, ...] = (
    AgentProfile(id="alfred", role="COO", icon="🎩", angle=270, color="#00d4ff"),
    AgentProfile(id="isaiah", role="Engineer", icon="⚡", angle=342, color="#a78bfa"),
    AgentProfile(id="paul", role="Growth", icon="📢", angle=54, color="#00ff88"),
    AgentProfile(id="daniel", role="Intel", icon="🔍", angle=126, color="#fbbf24"),
    AgentProfile(id="gordon", role="Trading", icon="📊", angle=198, color="#475569"),
    AgentProfile(id="raphael", role="Design", icon="🎨", angle=162, color="#64748b"),
)

COO_AGENT = "alfred"
TRADING_AGENT = "gordon"
DEFAULT_TASK_AGENT = "alfred"

AGENT_CONNECTIONS: tuple[tuple[str, str], ...] = (
    ("daniel", "paul"),
    ("paul", "alfred"),
    ("alfred", "isaiah"),
    ("daniel", "alfred"),
    ("alfred", "raphael"),
    ("raphael", "isaiah"),
)

# freq "—" means unscheduled
SCANNER_DEFS: tuple[dict, ...] = (
    {"name": "Polymarket", "freq": "4h", "icon": "📈"},
    {"name": "Reddit", "freq": "6h", "icon": "🔴"},
    {"name": "Crypto Prices", "freq": "30m", "icon": "₿"},
    {"name": "GSC Keywords", "freq": "daily", "icon": "🔑"},
    {"name": "Hacker News", "freq": "—", "icon": "🟠"},
    {"name": "Product Hunt", "freq": "—", "icon": "🐱"},
    {"name": "Twitter/X", "freq": "—", "icon": "✕"},
    {"name": "Amazon", "freq": "—", "icon": "📦"},
)

CRON_ROSTER: tuple[dict, ...] = (
    {"t": "*/5m", "j": "Watchdog", "a": "system"},
    {"t": "*/30m", "j": "OAuth Refresh", "a": "system"},
    {"t": "*/30m", "j": "Crypto Scan", "a": "daniel"},
    {"t": "4h", "j": "Polymarket", "a": "daniel"},
    {"t": "6h", "j": "Reddit Scan", "a": "daniel"},
    {"t": "@reboot", "j": "Gateway", "a": "system"},
    {"t": "6 AM", "j": "Keywords", "a": "daniel"},
    {"t": "8 AM", "j": "Content", "a": "paul"},
    {"t": "9 AM", "j": "Heartbeat", "a": "alfred"},
    {"t": "10 AM", "j": "Review", "a": "alfred"},
    {"t": "8 PM", "j": "Report", "a": "alfred"},
    {"t": "Weekly", "j": "Memory", "a": "alfred"},
)

SOCIAL_ACCOUNTS: tuple[dict, ...] = (
    {"p": "X/Twitter", "h": "@GetPolyPulse", "s": "ok"},
    {"p": "X/Twitter", "h": "@aistackpicks", "s": "ok"},
    {"p": "Reddit", "h": "poly_trader_tx", "s": "farm"},
    {"p": "Reddit", "h": "Fit_Mike_txfisher", "s": "farm"},
    {"p": "Reddit", "h": "HonestFastTeam", "s": "brand"},
    {"p": "Telegram", "h": "@Albert_Botstein_bot", "s": "ok"},
    {"p": "GitHub", "h": "alfredbotstein-commits", "s": "ok"},
)

TOKEN_TIERS: tuple[dict, ...] = (
    {"key": "T1", "t": "T1 Routine", "m": "Kimi k2.5", "fallback": 30},
    {"key": "T2", "t": "T2 Standard", "m": "Sonnet 4.5", "fallback": 50},
    {"key": "T3", "t": "T3 Complex", "m": "Opus 4.5", "fallback": 20},
)

TRADING_DESK = {
    "strategies": ["Grid (Low)", "Momentum (Med)", "F&G DCA (Low)", "Arb (Opp)"],
    "risk": "2%/trade",
    "halt": "5% → HALT",
    "cash": "40% reserve",
}

INFRA_FACTS = {
    "mac": "online",
    "gw": ":18789",
    "oc": "2026.2.18",
    "tok": "~42K/200K",
    "res": "40K",
}

# Search-console figures are not wired to a live source yet.
CONTENT_SEARCH_BASELINE = {"crawls": 140, "indexed": 50}

OPTIMIZATION_BASELINE = {"total": 35, "done": 4}

DB_TABLES: tuple[str, ...] = (
    "factory_tasks",
    "factory_steps",
    "factory_events",
    "factory_policy",
    "factory_triggers",
    "revenue_events",
    "products",
    "opportunities",
    "agent_sessions",
    "token_usage",
    "model_routing",
    "v3_positions",
    "v3_signals",
    "affiliate_clicks",
)


def revenue_channels(total_revenue: float) -> list[dict]:
    return [
        {"c": "Stripe (SaaS)", "s": "Live" if total_revenue > 0 else "Wiring"},
        {"c": "Apple App Store", "s": "Blocked"},
        {"c": "Google Play", "s": "Blocked"},
        {"c": "Affiliate (AISP)", "s": "Live"},
        {"c": "Kraken Trading", "s": "Not started"},
    ]


def phases(total_revenue: float) -> list[dict]:
    return [
        {"n": "1", "nm": "Foundation", "p": 100},
        {"n": "1B", "nm": "Factory Tooling", "p": 65},
        {"n": "2", "nm": "First Revenue", "p": 40 if total_revenue > 0 else 20},
        {"n": "3", "nm": "Scale", "p": 0},
        {"n": "4", "nm": "Trading", "p": 0},
        {"n": "5", "nm": "Business Intake", "p": 0},
        {"n": "6", "nm": "Full Autonomy", "p": 10},
    ]


def connections(online_agents: set[str]) -> list[dict]:
    """Agent graph edges; an edge is active when both ends are online."""
    return [
        {"from": src, "to": dst, "active": src in online_agents and dst in online_agents}
        for src, dst in AGENT_CONNECTIONS
    ]

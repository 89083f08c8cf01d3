from .agent import AgentProfile, AgentStatus, TaskStatus
from .trading import POSITION_BUCKETS, PositionStatus, TradingMode
from .snapshot import FactorySnapshot, SnapshotConfig, TradingConfig

__all__ = [
    "AgentProfile",
    "AgentStatus",
    "TaskStatus",
    "POSITION_BUCKETS",
    "PositionStatus",
    "TradingMode",
    "FactorySnapshot",
    "SnapshotConfig",
    "TradingConfig",
]

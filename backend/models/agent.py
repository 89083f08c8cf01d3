from enum import Enum

from pydantic import BaseModel, ConfigDict


class AgentStatus(str, Enum):
    ONLINE = "online"
    STALE = "stale"  # session claims online but the heartbeat is too old
    OFFLINE = "offline"


class TaskStatus(str, Enum):
    QUEUED = "queued"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    BLOCKED = "blocked"
    CANCELLED = "cancelled"


class AgentProfile(BaseModel):
    """Roster entry: identity plus display metadata for the agent ring."""

    id: str
    role: str
    icon: str
    angle: int  # position on the dashboard ring, degrees
    color: str

    model_config = ConfigDict(frozen=True)

    @property
    def display_name(self) -> str:
        return self.id.upper()

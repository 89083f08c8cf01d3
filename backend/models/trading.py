from enum import Enum


class PositionStatus(str, Enum):
    OPEN = "open"
    SETTLED = "settled"
    CANCELLED = "cancelled"
    EXPIRED_UNPROCESSED = "expired_unprocessed"
    FLUSHED = "flushed"
    FLUSHED_STALE = "flushed_stale"


class TradingMode(str, Enum):
    PAPER = "paper"
    LIVE = "live"
    DECOMMISSIONED = "decommissioned"


# Positions whose status is in neither bucket land in "other" so the
# bucket counts always add up to the total.
POSITION_BUCKETS: dict[str, tuple[str, ...]] = {
    "open": (PositionStatus.OPEN.value,),
    "settled": (PositionStatus.SETTLED.value,),
    "cancelled": (PositionStatus.CANCELLED.value,),
    "expired_unprocessed": (PositionStatus.EXPIRED_UNPROCESSED.value,),
    "flushed": (PositionStatus.FLUSHED.value, PositionStatus.FLUSHED_STALE.value),
}

from .logger import setup_logging, get_logger, gateway_logger, api_logger
from .utcnow import utcnow, parse_timestamp, day_key, minutes_since
from .records import (
    to_float,
    to_int,
    round_half_up,
    round_money,
    percent,
    whole_percent,
    tags_of,
    has_tag,
    payload_of,
)

__all__ = [
    # Logger
    "setup_logging",
    "get_logger",
    "gateway_logger",
    "api_logger",

    # Time
    "utcnow",
    "parse_timestamp",
    "day_key",
    "minutes_since",

    # Record coercion
    "to_float",
    "to_int",
    "round_half_up",
    "round_money",
    "percent",
    "whole_percent",
    "tags_of",
    "has_tag",
    "payload_of",
]

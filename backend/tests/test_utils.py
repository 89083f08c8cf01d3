import json
import logging
import sys
from datetime import datetime
from pathlib import Path

BACKEND_ROOT = Path(__file__).resolve().parents[1]
if str(BACKEND_ROOT) not in sys.path:
    sys.path.insert(0, str(BACKEND_ROOT))

from utils.logger import JSONFormatter
from utils.records import first_present, percent, round_half_up, round_money, to_float, whole_percent
from utils.utcnow import clock_label, isoformat_z, minutes_since, parse_timestamp


def test_parse_timestamp_normalises_offsets_to_naive_utc():
    assert parse_timestamp("2026-03-15T10:00:00Z") == datetime(2026, 3, 15, 10, 0)
    assert parse_timestamp("2026-03-15T12:00:00+02:00") == datetime(2026, 3, 15, 10, 0)
    assert parse_timestamp("2026-03-15T10:00:00") == datetime(2026, 3, 15, 10, 0)
    assert parse_timestamp("yesterday") is None
    assert parse_timestamp(None) is None
    assert parse_timestamp("") is None


def test_clock_and_minutes_helpers(now):
    assert clock_label("2026-03-15T07:04:59Z") == "07:04"
    assert clock_label(None) == "—"
    assert minutes_since(datetime(2026, 3, 15, 11, 30, 40), now) == 29
    assert minutes_since(None, now) is None
    assert isoformat_z(datetime(2026, 3, 15, 9, 5, 1, 123999)) == "2026-03-15T09:05:01.123Z"


def test_half_up_rounding():
    assert round_money(0.125) == 0.13
    assert round_money(2.675) == 2.68
    assert round_money(-0.125) == -0.13
    assert round_half_up(12.5, 0) == 13.0
    assert whole_percent(1, 8) == 13


def test_percent_of_zero_whole_is_zero():
    assert percent(5, 0) == 0.0
    assert whole_percent(5, 0) == 0
    assert percent(1, 3) == 33.33


def test_tolerant_coercion():
    assert to_float("1.5") == 1.5
    assert to_float("n/a") == 0.0
    assert to_float(True) == 0.0
    assert first_present(None, "", "fallback") == "fallback"
    assert first_present(None, 0) is None


def test_json_formatter_emits_structured_data():
    record = logging.LogRecord(
        name="source_gateway",
        level=logging.WARNING,
        pathname=__file__,
        lineno=1,
        msg="Source read failed",
        args=(),
        exc_info=None,
    )
    record.extra_data = {"table": "products", "when": datetime(2026, 3, 15)}

    payload = json.loads(JSONFormatter().format(record))

    assert payload["level"] == "WARNING"
    assert payload["logger"] == "source_gateway"
    assert payload["message"] == "Source read failed"
    assert payload["data"] == {"table": "products", "when": "2026-03-15 00:00:00"}


def test_parse_timestamp_accepts_trimmed_fractions_and_offsets():
    assert parse_timestamp("2026-03-15T11:58:00.12345+00:00") == datetime(2026, 3, 15, 11, 58, 0, 123450)
    assert parse_timestamp("2026-03-15T11:58:00.1Z") == datetime(2026, 3, 15, 11, 58, 0, 100000)
    assert parse_timestamp("2026-03-15T11:58:00.1234567+00:00") == datetime(2026, 3, 15, 11, 58, 0, 123456)
    assert parse_timestamp("2026-03-15T06:58:00-05") == datetime(2026, 3, 15, 11, 58)
    assert parse_timestamp("2026-03-15") == datetime(2026, 3, 15)

import logging

import pytest
from loguru import logger

from clubstats.config.settings import load_settings, settings
from clubstats.logging.setup import InterceptHandler, sensitive_data_filter


@pytest.fixture
def captured():
    messages = []
    sink_id = logger.add(lambda message: messages.append(message.record), level="DEBUG")
    yield messages
    logger.remove(sink_id)


def test_intercept_handler_routes_stdlib_records_to_loguru(captured):
    std_logger = logging.getLogger("clubstats.tests.intercept")
    std_logger.addHandler(InterceptHandler())
    std_logger.setLevel(logging.DEBUG)
    std_logger.propagate = False
    try:
        std_logger.warning("rows fetched: %d", 3)
    finally:
        std_logger.handlers.clear()

    assert [(r["level"].name, r["message"]) for r in captured] == [("WARNING", "rows fetched: 3")]


def test_sensitive_extra_values_are_masked():
    record = {
        "message": "connecting",
        "extra": {"api_key": "abc123", "team": "Blues", "nested": {"auth_token": "zzz"}},
    }
    assert sensitive_data_filter(record) is True
    assert record["extra"] == {
        "api_key": "********",
        "team": "Blues",
        "nested": {"auth_token": "********"},
    }


def test_supabase_key_is_scrubbed_from_messages(monkeypatch):
    monkeypatch.setattr(settings, "supabase_key", "anon-key-1234567890")
    record = {"message": "using anon-key-1234567890 for reads", "extra": {}}
    sensitive_data_filter(record)
    assert record["message"] == "using ******** for reads"


@pytest.mark.parametrize("raw, expected", [("debug", "DEBUG"), ("Warning", "WARNING"), ("chatty", "INFO")])
def test_log_level_is_normalized(monkeypatch, raw, expected):
    monkeypatch.setenv("LOG_LEVEL", raw)
    assert load_settings().log_level == expected


def test_invalid_tie_policy_stops_startup(monkeypatch):
    monkeypatch.setenv("MERGE_TIE_POLICY", "random")
    with pytest.raises(SystemExit):
        load_settings()


def test_defaults(monkeypatch):
    for name in ("DEFAULT_AGGREGATION", "UNKNOWN_DATE_BUCKET", "MERGE_TIE_POLICY", "MATCHES_TABLE"):
        monkeypatch.delenv(name, raising=False)
    loaded = load_settings()
    assert loaded.default_aggregation == "avg"
    assert loaded.unknown_date_bucket == "unknown"
    assert loaded.merge_tie_policy == "first"
    assert loaded.matches_table == "matches"

"""Tests for the structlog/uvicorn logging configuration."""

from __future__ import annotations

import io
import logging
from collections.abc import Iterator

import pytest
import structlog

from teraplay.infrastructure.config.schema import AppConfig
from teraplay.infrastructure.logging.setup import (
    _add_record_created_timestamp_utc,
    _drop_color_message,
    _enable_async_logging,
    _LevelRangeFilter,
    _stop_async_listener,
    build_logging_config,
)


def _record(level: int, created: float = 0.0) -> logging.LogRecord:
    record = logging.LogRecord("teraplay", level, __file__, 1, "msg", None, None)
    record.created = created
    return record


class TestBuildLoggingConfig:
    def test_levels_follow_config(self) -> None:
        cfg = build_logging_config(AppConfig(log_level="DEBUG"))
        assert cfg["root"]["level"] == "DEBUG"
        assert {c["level"] for c in cfg["loggers"].values()} == {"DEBUG"}
        assert cfg["disable_existing_loggers"] is False

    def test_json_renderer_in_prod(self) -> None:
        cfg = build_logging_config(AppConfig(environment="prod"))
        processors = cfg["formatters"]["structlog"]["processors"]
        assert isinstance(processors[-1], structlog.processors.JSONRenderer)

    def test_console_renderer_in_dev(self) -> None:
        cfg = build_logging_config(AppConfig(environment="dev"))
        processors = cfg["formatters"]["structlog"]["processors"]
        assert isinstance(processors[-1], structlog.dev.ConsoleRenderer)

    def test_does_not_mutate_shared_logger_table(self) -> None:
        build_logging_config(AppConfig(log_level="ERROR"))
        cfg = build_logging_config(AppConfig(log_level="INFO"))
        assert cfg["loggers"]["uvicorn"]["level"] == "INFO"


class TestProcessors:
    def test_drop_color_message(self) -> None:
        event = {"event": "x", "color_message": "\x1b[32mx"}
        assert _drop_color_message(None, None, event) == {"event": "x"}

    def test_record_timestamp_is_utc(self) -> None:
        event = {"_record": _record(logging.INFO, created=0.0)}
        out = _add_record_created_timestamp_utc(None, None, event)
        assert out["timestamp"] == "1970-01-01T00:00:00Z"

    def test_no_record_leaves_event_untouched(self) -> None:
        assert _add_record_created_timestamp_utc(None, None, {"event": "x"}) == {"event": "x"}


class TestLevelRangeFilter:
    def test_upper_bound(self) -> None:
        f = _LevelRangeFilter(max_level=logging.WARNING)
        assert f.filter(_record(logging.WARNING))
        assert not f.filter(_record(logging.ERROR))

    def test_lower_bound(self) -> None:
        f = _LevelRangeFilter(min_level=logging.ERROR)
        assert f.filter(_record(logging.CRITICAL))
        assert not f.filter(_record(logging.INFO))


@pytest.fixture()
def restore_root_logger() -> Iterator[None]:
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    _stop_async_listener()
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.mark.usefixtures("restore_root_logger")
class TestAsyncLoggingStreams:
    def test_info_stream_receives_low_levels_only(self) -> None:
        info = io.StringIO()
        _enable_async_logging(AppConfig(log_level="INFO", environment="prod"), info)

        logger = logging.getLogger("teraplay.cli_output")
        logger.info("strategy_attempt")
        logger.error("strategy_crashed")
        _stop_async_listener()

        assert "strategy_attempt" in info.getvalue()
        assert "strategy_crashed" not in info.getvalue()

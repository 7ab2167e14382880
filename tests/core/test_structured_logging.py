"""Tests for structured logging with trace propagation."""

from __future__ import annotations

import io
import json
from pathlib import Path

from fxlive.core.logging import configure_logging, current_trace_id, get_logger, log_context, logger


def _read_records(stream: io.StringIO) -> list[dict[str, object]]:
    lines = [line for line in stream.getvalue().splitlines() if line.strip()]
    return [json.loads(line) for line in lines]


def test_record_carries_trace_and_context_fields() -> None:
    buffer = io.StringIO()
    configure_logging(console_stream=buffer)

    with log_context(trace_id="trace-123", provider="frankfurter", error_code="UPSTREAM_ERROR", endpoint="latest"):
        logger.warning("Refresh failed", symbol="USD")

    records = _read_records(buffer)
    assert len(records) == 1
    record = records[0]
    assert record["level"] == "WARNING"
    assert record["message"] == "Refresh failed"
    assert record["trace_id"] == "trace-123"
    assert record["provider"] == "frankfurter"
    assert record["error_code"] == "UPSTREAM_ERROR"
    assert record["context"] == {"endpoint": "latest", "symbol": "USD"}


def test_trace_id_is_scoped_to_its_context() -> None:
    buffer = io.StringIO()
    configure_logging(console_stream=buffer)

    assert current_trace_id() is None
    with log_context(operation="latest") as trace_id:
        logger.info("Fetching latest rates")
        with log_context(operation="series") as inner_trace:
            logger.info("Fetching rate series")
        logger.info("Provider responded")
        assert current_trace_id() == trace_id
    logger.info("outside context")

    records = _read_records(buffer)
    assert [r["trace_id"] for r in records] == [trace_id, inner_trace, trace_id, None]
    assert inner_trace != trace_id
    assert records[1]["context"]["operation"] == "series"
    assert records[2]["context"]["operation"] == "latest"
    assert "context" not in records[3]


def test_explicit_record_fields_win_over_context() -> None:
    buffer = io.StringIO()
    configure_logging(console_stream=buffer)

    with log_context(provider="frankfurter", generation=1):
        logger.info("Discarding superseded result", generation=2)

    record = _read_records(buffer)[0]
    assert record["provider"] == "frankfurter"
    assert record["context"]["generation"] == 2


def test_named_logger_records_its_name() -> None:
    buffer = io.StringIO()
    configure_logging(console_stream=buffer)

    get_logger("fxlive.core.services.refresh").info("Tracked symbols changed", symbols=["USD"])

    record = _read_records(buffer)[0]
    assert record["context"]["logger_name"] == "fxlive.core.services.refresh"
    assert record["context"]["symbols"] == ["USD"]
    assert record["provider"] is None


def test_level_filters_lower_records() -> None:
    buffer = io.StringIO()
    configure_logging("WARNING", console_stream=buffer)

    logger.info("hidden")
    logger.error("shown")

    assert [r["message"] for r in _read_records(buffer)] == ["shown"]


def test_exception_text_is_included() -> None:
    buffer = io.StringIO()
    configure_logging(console_stream=buffer)

    try:
        raise RuntimeError("socket closed")
    except RuntimeError:
        logger.exception("Unexpected fetch failure")

    record = _read_records(buffer)[0]
    assert record["level"] == "ERROR"
    assert record["exception"] == "socket closed"


def test_file_sink_writes_json_lines(tmp_path: Path) -> None:
    path = tmp_path / "logs" / "fxlive.log"
    configure_logging(console_output=False, file_output=True, file_path=str(path))

    logger.info("written to file")
    logger.info("appended")

    lines = path.read_text(encoding="utf-8").splitlines()
    assert [json.loads(line)["message"] for line in lines] == ["written to file", "appended"]

"""
Tests for the structured logger.

Covers:
- JSON lines written to a configured log file
- Level filtering through LoggingConfig
- Template rendering for stream output
"""

import orjson
import pytest

from convergence.logging import Logger, LoggingConfig, LogLevel
from convergence.logging.convergence_logging_models import (
    OperationInfo,
    PollDebug,
    ProbeTrace,
)


class TestLoggerFile:
    """Logger writing to a file."""

    @pytest.mark.asyncio
    async def test_writes_json_lines(self, tmp_path):
        LoggingConfig().update(log_level="info")
        logfile = tmp_path / "convergence.json"
        logger = Logger()
        logger.configure(name="harness", path=str(logfile))

        await logger.log(
            OperationInfo(message="Writing 1000 objects", operation="write_objects"),
            name="harness",
        )
        await logger.close()

        lines = logfile.read_text().splitlines()
        assert len(lines) == 1

        record = orjson.loads(lines[0])
        assert record["entry"]["message"] == "Writing 1000 objects"
        assert record["entry"]["operation"] == "write_objects"
        assert record["entry"]["level"] == "INFO"
        assert record["function_name"] == "test_writes_json_lines"

    @pytest.mark.asyncio
    async def test_filters_below_configured_level(self, tmp_path):
        LoggingConfig().update(log_level="info")
        logfile = tmp_path / "convergence.json"
        logger = Logger()
        logger.configure(name="harness", path=str(logfile))

        await logger.log(
            ProbeTrace(message="probe", node="dev1", probe="yz_solr:ping", outcome="negative"),
            name="harness",
        )
        await logger.log(
            PollDebug(
                message="not yet",
                node="dev1",
                condition="index up",
                attempt=1,
                max_attempts=60,
            ),
            name="harness",
        )
        await logger.log(OperationInfo(message="kept", operation="commit"), name="harness")
        await logger.close()

        lines = logfile.read_text().splitlines()
        assert [orjson.loads(line)["entry"]["message"] for line in lines] == ["kept"]

    @pytest.mark.asyncio
    async def test_disabled_logger_writes_nothing(self, tmp_path):
        LoggingConfig().update(log_level="info")
        LoggingConfig().disable("muted")
        logfile = tmp_path / "muted.json"
        logger = Logger()
        logger.configure(name="muted", path=str(logfile))

        await logger.log(OperationInfo(message="dropped", operation="commit"), name="muted")
        await logger.close()

        assert not logfile.exists() or logfile.read_text() == ""


class TestEntries:
    """Entry models."""

    def test_default_levels(self):
        assert ProbeTrace(node="dev1", probe="p", outcome="o").level == LogLevel.TRACE
        assert OperationInfo(operation="commit").level == LogLevel.INFO

    def test_to_template(self):
        entry = OperationInfo(message="Commit fruit", operation="commit", node="dev1")

        line = entry.to_template("{level} {operation}@{node}: {message}")

        assert line == "INFO commit@dev1: Commit fruit"

    def test_unknown_level_name(self):
        with pytest.raises(ValueError):
            LogLevel.to_level("loud")

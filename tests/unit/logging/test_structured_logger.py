"""
Tests unitaires Logging - Structured Logger

Couvre:
- Format JSON, champs obligatoires
- Timestamp ISO 8601 UTC avec millisecondes
- Filtrage par niveau
- Corrélation par appel
- Sorties console et fichier
"""

import json
import re
from pathlib import Path

import pytest

from juice_admin.logging import (
    ContextualLogger,
    FileOutputHandler,
    IStructuredLogger,
    LogConfig,
    LogLevel,
    MissingRequiredFieldError,
    StructuredLogger,
    console_output_handler,
)


TIMESTAMP_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}\.\d{3}Z$")


class TestJsonFormat:
    """Format JSON structuré."""

    def test_implements_interface(self) -> None:
        assert isinstance(StructuredLogger("test"), IStructuredLogger)

    def test_mandatory_fields(self) -> None:
        entry = StructuredLogger("juice_admin.session").info("Login succeeded")

        parsed = json.loads(entry.to_json())

        assert set(parsed) >= {"timestamp", "level", "correlation_id", "message", "logger"}
        assert parsed["level"] == "INFO"
        assert parsed["logger"] == "juice_admin.session"

    def test_timestamp_iso8601_utc_millis(self) -> None:
        entry = StructuredLogger("test").info("x")

        assert TIMESTAMP_PATTERN.match(entry.timestamp)

    def test_extra_included(self) -> None:
        entry = StructuredLogger("test").info("Request completed", method="GET", status_code=200)

        assert json.loads(entry.to_json())["extra"] == {"method": "GET", "status_code": 200}

    def test_empty_message_rejected(self) -> None:
        with pytest.raises(MissingRequiredFieldError):
            StructuredLogger("test").info("")

    def test_empty_name_rejected(self) -> None:
        with pytest.raises(ValueError):
            StructuredLogger(" ")


class TestLevels:
    """Filtrage par niveau minimum."""

    def test_debug_filtered_by_default(self) -> None:
        logger = StructuredLogger("test")

        assert logger.debug("hidden") is None
        assert logger.get_entries() == []

    def test_min_level_warn(self) -> None:
        logger = StructuredLogger("test", config=LogConfig(min_level=LogLevel.WARN))

        logger.info("skip")
        logger.warn("keep")
        logger.critical("keep too")

        assert [e.level for e in logger.get_entries()] == [LogLevel.WARN, LogLevel.CRITICAL]

    @pytest.mark.parametrize("raw,expected", [("debug", LogLevel.DEBUG), ("warning", LogLevel.WARN), ("ERROR", LogLevel.ERROR)])
    def test_parse_level(self, raw: str, expected: LogLevel) -> None:
        assert LogLevel.parse(raw) == expected

    def test_parse_unknown_level(self) -> None:
        with pytest.raises(ValueError):
            LogLevel.parse("verbose")

    def test_buffer_is_bounded(self) -> None:
        logger = StructuredLogger("test", config=LogConfig(max_entries=3))

        for i in range(5):
            logger.info(f"m{i}")

        assert [e.message for e in logger.get_entries()] == ["m2", "m3", "m4"]


class TestCorrelation:
    """Corrélation des lignes d'un même appel."""

    def test_generated_when_absent(self) -> None:
        logger = StructuredLogger("test")

        first = logger.info("a")
        second = logger.info("b")

        assert first.correlation_id != second.correlation_id

    def test_contextual_logger_pins_id(self) -> None:
        logger = StructuredLogger("test")
        context = logger.with_context("req-1")

        context.info("start")
        context.warn("end")

        assert isinstance(context, ContextualLogger)
        assert len(logger.get_entries_by_correlation("req-1")) == 2

    def test_default_correlation(self) -> None:
        logger = StructuredLogger("test")
        logger.set_default_correlation("boot")

        assert logger.info("x").correlation_id == "boot"


class TestOutputs:
    """Sorties."""

    def test_output_handler_receives_json(self) -> None:
        lines = []
        logger = StructuredLogger("test", output_handler=lines.append)

        logger.info("hello")

        assert json.loads(lines[0])["message"] == "hello"

    def test_child_shares_output(self) -> None:
        lines = []
        parent = StructuredLogger("juice_admin", output_handler=lines.append)

        child = parent.child("pipeline")
        child.info("x")

        assert child.name == "juice_admin.pipeline"
        assert json.loads(lines[0])["logger"] == "juice_admin.pipeline"

    def test_file_output(self, tmp_path: Path) -> None:
        path = tmp_path / "logs" / "admin-system.log"
        logger = StructuredLogger("test", output_handler=FileOutputHandler(path))

        logger.info("one")
        logger.info("two")

        lines = path.read_text(encoding="utf-8").splitlines()
        assert [json.loads(line)["message"] for line in lines] == ["one", "two"]

    def test_console_output(self, capsys) -> None:
        console_output_handler('{"message": "x"}')

        assert capsys.readouterr().err == '{"message": "x"}\n'

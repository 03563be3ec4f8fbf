# tests/core/test_logging.py
"""Tests for structured logging configuration."""

import json
import logging

import pytest


@pytest.mark.usefixtures("reset_logging")
class TestConfigureLogging:
    """configure_logging wires structlog and stdlib logging together."""

    def test_json_output(self, capsys: pytest.CaptureFixture[str]) -> None:
        """JSON mode writes one JSON object per event to stdout."""
        from transmute.core.logging import configure_logging, get_logger

        configure_logging(json_output=True, level="INFO")
        get_logger("tests.logging").info("converted", fields=2)

        line = capsys.readouterr().out.strip().splitlines()[-1]
        record = json.loads(line)

        assert record["event"] == "converted"
        assert record["fields"] == 2
        assert record["level"] == "info"
        assert "_record" not in record

    def test_stdlib_records_share_format(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Plain logging.getLogger records are rendered the same way."""
        from transmute.core.logging import configure_logging

        configure_logging(json_output=True)
        logging.getLogger("tests.stdlib").warning("plain %s", "record")

        record = json.loads(capsys.readouterr().out.strip().splitlines()[-1])

        assert record["event"] == "plain record"

    def test_level_filters(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Events below the configured level are dropped."""
        from transmute.core.logging import configure_logging, get_logger

        configure_logging(json_output=True, level="warning")
        get_logger("tests.logging").debug("hidden")

        assert capsys.readouterr().out == ""

    def test_noisy_loggers_quietened(self) -> None:
        """Third-party loggers stay at WARNING or above."""
        from transmute.core.logging import configure_logging

        configure_logging(level="DEBUG")

        assert logging.getLogger("dynaconf").level == logging.WARNING
        assert logging.getLogger("pluggy").level == logging.WARNING

    def test_unknown_level(self) -> None:
        """An unknown level name is rejected."""
        from transmute.core.logging import configure_logging

        with pytest.raises(ValueError, match="Unknown log level"):
            configure_logging(level="LOUD")

    def test_configure_from_settings(self, capsys: pytest.CaptureFixture[str]) -> None:
        """The logging section of loaded settings drives format and level."""
        from transmute.core import LoggingSettings, TransmuteSettings, configure_from, get_logger

        configure_from(TransmuteSettings(logging=LoggingSettings(level="warning", json_output=True)))
        log = get_logger("tests.settings")
        log.info("hidden")
        log.warning("shown")

        lines = capsys.readouterr().out.strip().splitlines()

        assert logging.getLogger().level == logging.WARNING
        assert [json.loads(line)["event"] for line in lines] == ["shown"]

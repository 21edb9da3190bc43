"""Tests for root logger configuration."""
import json
import logging

import pytest
from pythonjsonlogger.json import JsonFormatter

from linkdb.logging_config import configure_logging


@pytest.fixture
def root_logger():
    root = logging.getLogger()
    httpx_logger = logging.getLogger("httpx")
    saved = (root.handlers[:], root.level, httpx_logger.level)
    yield root
    root.handlers[:] = saved[0]
    root.setLevel(saved[1])
    httpx_logger.setLevel(saved[2])


def _record(message: str) -> logging.LogRecord:
    return logging.LogRecord(
        name="linkdb.services.fetcher",
        level=logging.WARNING,
        pathname=__file__,
        lineno=1,
        msg=message,
        args=(),
        exc_info=None,
    )


class TestConfigureLogging:
    def test_json_format(self, root_logger):
        configure_logging(log_format="json", log_level="debug")

        assert len(root_logger.handlers) == 1
        formatter = root_logger.handlers[0].formatter
        assert isinstance(formatter, JsonFormatter)
        assert root_logger.level == logging.DEBUG

        line = json.loads(formatter.format(_record("fetch failed")))
        assert line["message"] == "fetch failed"
        assert line["level"] == "WARNING"
        assert line["logger"] == "linkdb.services.fetcher"
        assert "timestamp" in line

    def test_text_format(self, root_logger):
        configure_logging(log_format="text", log_level="WARNING")

        assert len(root_logger.handlers) == 1
        formatter = root_logger.handlers[0].formatter
        assert not isinstance(formatter, JsonFormatter)
        assert root_logger.level == logging.WARNING

        line = formatter.format(_record("fetch failed"))
        assert line.endswith("WARNING linkdb.services.fetcher fetch failed")

    def test_reconfiguring_replaces_handler(self, root_logger):
        configure_logging(log_format="text")
        configure_logging(log_format="json")

        assert len(root_logger.handlers) == 1
        assert isinstance(root_logger.handlers[0].formatter, JsonFormatter)

    def test_unknown_level_falls_back_to_info(self, root_logger):
        configure_logging(log_level="chatty")

        assert root_logger.level == logging.INFO

    def test_quiets_httpx(self, root_logger):
        configure_logging()

        assert logging.getLogger("httpx").level == logging.WARNING

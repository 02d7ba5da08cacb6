"""Tests for the logging setup helper."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from imagechain.config.settings import LoggingConfig
from imagechain.utils.logging import setup_logging


@pytest.fixture(autouse=True)
def reset_logging():
    yield
    logger = logging.getLogger("imagechain")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)


class TestSetupLogging:
    def test_defaults(self) -> None:
        setup_logging()
        logger = logging.getLogger("imagechain")
        assert logger.level == logging.INFO
        assert len(logger.handlers) == 1

    def test_level_and_file_handler(self, tmp_path: Path) -> None:
        log_file = tmp_path / "imagechain.log"
        setup_logging(LoggingConfig(level="debug", file=str(log_file)))
        logger = logging.getLogger("imagechain")
        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 2
        logging.getLogger("imagechain.chain").debug("stage done")
        for handler in logger.handlers:
            handler.flush()
        assert "stage done" in log_file.read_text()

    def test_repeat_calls_do_not_duplicate_output(
        self, tmp_path: Path, capsys: pytest.CaptureFixture
    ) -> None:
        log_file = tmp_path / "imagechain.log"
        config = LoggingConfig(level="INFO", format="%(message)s", file=str(log_file))
        setup_logging(config)
        setup_logging(config)
        setup_logging(config)
        logger = logging.getLogger("imagechain")
        assert len(logger.handlers) == 2

        logging.getLogger("imagechain.capture").info("frame accepted")
        for handler in logger.handlers:
            handler.flush()
        assert capsys.readouterr().err.count("frame accepted") == 1
        assert log_file.read_text().count("frame accepted") == 1

    def test_unknown_level_falls_back_to_info(self) -> None:
        setup_logging(LoggingConfig(level="chatty"))
        assert logging.getLogger("imagechain").level == logging.INFO

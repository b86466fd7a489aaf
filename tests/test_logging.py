"""Tests for modgraph.logging."""

from __future__ import annotations

import logging
from pathlib import Path

from modgraph.logging import configure_logging, get_logger


def test_get_logger_is_namespaced() -> None:
    assert get_logger().name == "modgraph"
    assert get_logger("walker").name == "modgraph.walker"


def test_configure_logging_does_not_stack_handlers(tmp_path: Path) -> None:
    log_file = tmp_path / "modgraph.log"

    configure_logging()
    logger = configure_logging(verbose=True, log_file=log_file)

    assert logger.level == logging.DEBUG
    assert len(logger.handlers) == 2
    get_logger("detector").debug("scan finished")
    for handler in logger.handlers:
        handler.flush()
    assert "scan finished" in log_file.read_text(encoding="utf-8")

    configure_logging()
    assert len(logger.handlers) == 1

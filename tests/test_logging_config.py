from __future__ import annotations

import logging

from rich.logging import RichHandler

from plc_lens.logging_config import LOGGER_NAME, setup_logging


def test_setup_logging_levels() -> None:
    assert setup_logging().level == logging.WARNING
    assert setup_logging(verbose=True).level == logging.DEBUG
    assert setup_logging(verbose=True, quiet=True).level == logging.ERROR


def test_setup_logging_replaces_previous_handler() -> None:
    setup_logging()
    logger = setup_logging(quiet=True)
    rich_handlers = [item for item in logger.handlers if isinstance(item, RichHandler)]
    assert len(rich_handlers) == 1
    assert logger is logging.getLogger(LOGGER_NAME)
    assert logger.propagate is False

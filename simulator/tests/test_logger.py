from __future__ import annotations

import logging

from simulator.logger import setup_logger


def test_setup_logger_adds_one_console_handler_even_when_called_twice():
    name = "simulator.tests.logger_once"
    logging.getLogger(name).handlers.clear()

    first = setup_logger(name)
    second = setup_logger(name, logging.DEBUG)

    assert first is second
    assert len(second.handlers) == 1
    assert second.level == logging.DEBUG


def test_setup_logger_ignores_root_handlers():
    name = "simulator.tests.logger_root"
    logging.getLogger(name).handlers.clear()
    root_handler = logging.NullHandler()
    logging.getLogger().addHandler(root_handler)
    try:
        logger = setup_logger(name)
    finally:
        logging.getLogger().removeHandler(root_handler)

    assert len(logger.handlers) == 1

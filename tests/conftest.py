import logging

import pytest


@pytest.fixture(autouse=True)
def reset_autotask_logger():
    """setup_logging() configures the package logger once per process; undo it per test."""
    logger = logging.getLogger("autotask")
    handlers, level = list(logger.handlers), logger.level
    yield
    for handler in logger.handlers[:]:
        if handler not in handlers:
            logger.removeHandler(handler)
            handler.close()
    logger.setLevel(level)

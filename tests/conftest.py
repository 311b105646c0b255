"""Root pytest configuration for all tests.

This conftest applies to all test types (unit, integration).
"""

import logging

import pytest


@pytest.fixture(autouse=True)
def reset_app_logger():
    """Drop handlers the CLI attaches to the 'src' logger during a test.

    The CLI adds stream handlers bound to the stdout/stderr of the invoking
    CliRunner; left in place they would write to closed streams later on.
    """
    app_logger = logging.getLogger("src")
    handlers = list(app_logger.handlers)
    level = app_logger.level
    yield
    for handler in app_logger.handlers[:]:
        if handler not in handlers:
            handler.close()
            app_logger.removeHandler(handler)
    app_logger.setLevel(level)

import logging

import pytest


@pytest.fixture(autouse=True)
def reset_package_logger():
    # The CLI binds the package logger to the runner's stderr, which is closed afterwards
    yield
    package_logger = logging.getLogger("csvjson")
    package_logger.handlers.clear()
    package_logger.setLevel(logging.NOTSET)
    package_logger.propagate = True

import logging

import pytest

import sitewatch.logging_setup as ls


@pytest.fixture(autouse=True)
def reset_sitewatch_logger():
    """Undo setup_logging() between tests so caplog keeps seeing records."""
    yield
    logger = logging.getLogger("sitewatch")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
    ls._CONFIGURED = False

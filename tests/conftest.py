import logging
from collections.abc import Iterator

import pytest

from bases.bases_log import COMPONENTS


@pytest.fixture(autouse=True)  # type: ignore[misc]
def reset_bases_loggers() -> Iterator[None]:
    """Detach handlers the CLI or tests attached to the bases loggers."""
    names = ["bases", *COMPONENTS.values()]
    before = {name: list(logging.getLogger(name).handlers) for name in names}
    levels = {name: logging.getLogger(name).level for name in names}
    yield
    for name in names:
        logger = logging.getLogger(name)
        for handler in list(logger.handlers):
            if handler not in before[name]:
                logger.removeHandler(handler)
                handler.close()
        logger.setLevel(levels[name])

import logging
import logging.handlers

import numpy as np
import pytest

from geometry import ContainmentGeometry

# The handler classes setup_logging installs on the root logger.
INSTALLED_HANDLER_TYPES = (logging.StreamHandler, logging.handlers.RotatingFileHandler)


@pytest.fixture
def geometry():
    return ContainmentGeometry(
        cylinder_radius=200.0, cylinder_height=400.0, particle_radius=5.0, sphere_margin=20.0
    )


@pytest.fixture
def rng():
    return np.random.default_rng(1234)


@pytest.fixture(autouse=True)
def restore_root_logging():
    """Close whatever handlers setup_logging installed during the test."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    for handler in list(root.handlers):
        if handler not in handlers and type(handler) in INSTALLED_HANDLER_TYPES:
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)

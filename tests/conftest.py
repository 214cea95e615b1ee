"""Shared fixtures for the flock tests."""
import numpy as np
import pytest

from flocksim.config import Configuration, Viewport


@pytest.fixture
def config():
    """Weights used by the reference two-agent scenario."""
    return Configuration(attraction=100.0, repulsion=10.0, direction=10.0, closeness=5.0)


@pytest.fixture
def viewport():
    return Viewport(1000.0, 1000.0)


@pytest.fixture
def rng():
    return np.random.default_rng(1234)

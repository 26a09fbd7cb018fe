import numpy as np
import pytest


@pytest.fixture
def rng():
    """Seeded generator so statistical assertions are reproducible."""
    return np.random.default_rng(20190316)

"""Shared fixtures for reputation attack tests."""

import pytest
from reputation_attacks.config import get_rng
from reputation_attacks.ladder_attack import LadderConfig, build_ladder


@pytest.fixture
def rng():
    """Deterministic RNG for reproducible tests."""
    return get_rng(42)


@pytest.fixture
def regression_config():
    return LadderConfig.from_percentages(120_000, [100, 10, 25, 50])


@pytest.fixture
def regression_ladder(regression_config):
    """Reference ladder with hand-computed reputation and revenue values."""
    return build_ladder(regression_config)


@pytest.fixture
def climbing_ladder():
    """
    Three hop ladder where revenue doubles at the target and the target
    only just clears its peer's threshold, so mid-sized payments are
    effective attacks.
    """
    return build_ladder(LadderConfig.from_percentages(1_200_000, [100, 50, 10]))

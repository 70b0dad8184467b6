"""Tests for protocol parameters and scenario ranges."""

import pytest
from reputation_attacks.config import (
    DEFAULT_PARAMS,
    ProtocolParams,
    ScenarioRanges,
    validate_all_params,
)
from reputation_attacks.errors import ConfigError
from reputation_attacks.ladder_attack import LadderConfig, build_ladder
from reputation_attacks.surge_attack import surge_attack


class TestProtocolParams:

    def test_defaults_valid(self):
        assert DEFAULT_PARAMS.validate()
        assert validate_all_params()

    def test_window_ratio(self):
        assert DEFAULT_PARAMS.window_ratio == pytest.approx(2 / 24)
        assert DEFAULT_PARAMS.reproject(120_000) == 10_000

    @pytest.mark.parametrize("overrides", [
        {"reputation_period_weeks": 0},
        {"revenue_period_weeks": 0},
        {"revenue_period_weeks": 25},
        {"block_time_s": 0},
        {"resolution_period_s": 0},
        {"resolution_period_s": -90},
        {"max_hold_blocks": 0},
        {"reference_hold_blocks": 0},
        {"reference_hold_blocks": 2017},
        {"minimum_htlc_msat": 0},
    ])
    def test_invalid_params_rejected(self, overrides):
        """Windows and capacity constants are divisors, zero never gets through."""
        with pytest.raises(ConfigError):
            ProtocolParams(**overrides)

    def test_zero_reputation_window_never_reaches_models(self):
        with pytest.raises(ConfigError):
            build_ladder(LadderConfig.from_percentages(120_000, [100, 10, 25]),
                         ProtocolParams(reputation_period_weeks=0))
        with pytest.raises(ConfigError):
            surge_attack([100, 200], 0, ProtocolParams(reputation_period_weeks=0))


class TestScenarioRanges:

    @pytest.mark.parametrize("overrides", [
        {"min_route_length": 2},
        {"min_route_length": 8, "max_route_length": 5},
        {"max_amount": 0},
        {"max_peers": 0},
    ])
    def test_invalid_ranges_rejected(self, overrides):
        with pytest.raises(ConfigError):
            ScenarioRanges(**overrides)

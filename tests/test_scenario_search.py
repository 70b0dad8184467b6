"""Tests for the Monte Carlo scenario search."""

from reputation_attacks.config import DEFAULT_PARAMS, SCENARIO_RANGES
from reputation_attacks.scenario_search import (
    Scenario,
    ScenarioSampler,
    ScenarioSearch,
    evaluate_scenario,
    generate_search_table,
)


def regression_scenario(**overrides):
    values = dict(
        first_node_traffic=120_000,
        attacker_payment=30_000,
        hold_duration=300,
        traffic_flows=[100, 10, 25, 50],
        honest_peers=[240_000, 120_000],
        cutoff_index=0,
    )
    values.update(overrides)
    return Scenario(**values)


class TestEvaluateScenario:

    def test_regression_scenario(self):
        result = evaluate_scenario(regression_scenario())

        assert result.endorsed == 10
        assert result.ladder_error is None
        assert result.ladder_outcome.target_cost == 420_000
        assert not result.ladder_effective

        assert result.surge_error is None
        assert result.surge_outcome.peace_revenue == 30_000
        assert result.surge_success is False

    def test_invalid_flow_discards_ladder_only(self):
        result = evaluate_scenario(regression_scenario(traffic_flows=[100, 0, 25]))
        assert result.ladder_outcome is None
        assert result.endorsed is None
        assert "outside [1, 100]" in result.ladder_error
        assert not result.ladder_effective
        assert result.surge_outcome is not None

    def test_invalid_hold_discards_ladder(self):
        result = evaluate_scenario(regression_scenario(hold_duration=0))
        assert result.ladder_outcome is None
        assert result.ladder_error

    def test_invalid_cutoff_discards_surge_only(self):
        result = evaluate_scenario(regression_scenario(cutoff_index=5))
        assert result.surge_outcome is None
        assert result.surge_success is None
        assert result.surge_error
        assert result.ladder_outcome is not None


class TestScenarioSampler:

    def test_draws_within_ranges(self):
        sampler = ScenarioSampler(seed=7)
        for _ in range(500):
            s = sampler.sample()
            assert SCENARIO_RANGES.min_route_length <= len(s.traffic_flows) <= SCENARIO_RANGES.max_route_length
            assert all(0 <= p <= 100 for p in s.traffic_flows)
            assert 1 <= s.hold_duration <= DEFAULT_PARAMS.max_hold_blocks
            assert 1 <= s.first_node_traffic <= SCENARIO_RANGES.max_amount
            assert 1 <= len(s.honest_peers) <= SCENARIO_RANGES.max_peers
            assert all(p > 0 for p in s.honest_peers)
            assert 0 <= s.cutoff_index <= len(s.honest_peers)

    def test_same_seed_same_scenarios(self):
        a = ScenarioSampler(seed=11)
        b = ScenarioSampler(seed=11)
        assert [a.sample() for _ in range(20)] == [b.sample() for _ in range(20)]


class TestScenarioSearch:

    def test_counts_add_up(self):
        summary = ScenarioSearch(seed=3).run(n_samples=300)
        assert summary.samples == 300
        assert summary.ladder_evaluated + summary.ladder_discarded == 300
        assert summary.surge_evaluated + summary.surge_discarded == 300
        assert summary.ladder_effective <= summary.ladder_cheaper
        assert summary.ladder_effective <= summary.ladder_lost_reputation
        assert summary.surge_successful <= summary.surge_evaluated

    def test_raw_draws_are_filtered(self):
        """Zero percentages and out of range cutoffs are drawn and discarded."""
        summary = ScenarioSearch(seed=5).run(n_samples=1_000)
        assert summary.ladder_discarded > 0
        assert summary.surge_discarded > 0
        assert summary.ladder_evaluated > 0
        assert summary.surge_evaluated > 0

    def test_deterministic(self):
        first = ScenarioSearch(seed=42).run(n_samples=200)
        second = ScenarioSearch(seed=42).run(n_samples=200)
        assert first == second

    def test_examples_are_successful(self):
        summary = ScenarioSearch(seed=1, max_examples=3).run(n_samples=500)
        assert len(summary.examples) <= 3
        for result in summary.examples:
            assert result.ladder_effective or result.surge_success

    def test_rates(self):
        summary = ScenarioSearch(seed=9).run(n_samples=200)
        assert 0.0 <= summary.ladder_success_rate <= 1.0
        assert 0.0 <= summary.surge_success_rate <= 1.0

    def test_table(self):
        summary = ScenarioSearch(seed=2).run(n_samples=50)
        table = generate_search_table(summary)
        assert "Laddering" in table
        assert "Surge" in table

"""
Reputation Attack Scenario Search
=================================

Monte Carlo search for economically viable laddering and surge attacks.

Scenarios are drawn from raw uniform ranges, the same way a fuzzer would feed
bytes to the models. Scenarios that a model rejects as malformed are discarded
for that model; every other scenario is evaluated and any effective attack is
kept as a reproducible example.

Usage:
    python -m reputation_attacks.scenario_search --samples 10000 --seed 42
"""

import argparse
from dataclasses import dataclass, field
from typing import List, Optional
import numpy as np
from tabulate import tabulate

from .config import (
    RANDOM_SEED,
    DEFAULT_SAMPLES,
    DEFAULT_PARAMS,
    SCENARIO_RANGES,
    ProtocolParams,
    ScenarioRanges,
    get_rng,
)
from .errors import ConfigError, InsufficientHoldDurationError
from .ladder_attack import AttackOutcome, LadderConfig, build_ladder
from .surge_attack import SurgeAttackOutcome, surge_attack


# Errors that mean the scenario itself is unusable, rather than a model defect.
DISCARD_ERRORS = (ConfigError, InsufficientHoldDurationError)


@dataclass
class Scenario:
    """Raw inputs for one evaluation of both attack models."""
    first_node_traffic: int
    attacker_payment: int
    hold_duration: int
    traffic_flows: List[int]
    honest_peers: List[int]
    cutoff_index: int


@dataclass
class ScenarioResult:
    """Outcome of both attack models for a single scenario."""

    scenario: Scenario

    # Laddering attack, None when the scenario was discarded.
    endorsed: Optional[int] = None
    ladder_outcome: Optional[AttackOutcome] = None
    ladder_error: Optional[str] = None

    # Surge attack, None when the scenario was discarded.
    surge_outcome: Optional[SurgeAttackOutcome] = None
    surge_success: Optional[bool] = None
    surge_error: Optional[str] = None

    @property
    def ladder_effective(self) -> bool:
        if self.ladder_outcome is None:
            return False
        return self.ladder_outcome.effective(self.scenario.attacker_payment)


@dataclass
class SearchSummary:
    """Aggregated results from a scenario search."""

    samples: int
    seed: int

    ladder_evaluated: int = 0
    ladder_discarded: int = 0
    ladder_effective: int = 0
    ladder_cheaper: int = 0
    ladder_lost_reputation: int = 0

    surge_evaluated: int = 0
    surge_discarded: int = 0
    surge_successful: int = 0

    # Endorsed amounts for evaluated ladders with nonzero capacity.
    endorsed_median: float = 0.0
    endorsed_p99: float = 0.0

    examples: List[ScenarioResult] = field(default_factory=list)

    @property
    def ladder_success_rate(self) -> float:
        if self.ladder_evaluated == 0:
            return 0.0
        return self.ladder_effective / self.ladder_evaluated

    @property
    def surge_success_rate(self) -> float:
        if self.surge_evaluated == 0:
            return 0.0
        return self.surge_successful / self.surge_evaluated


def evaluate_scenario(scenario: Scenario, params: ProtocolParams = DEFAULT_PARAMS) -> ScenarioResult:
    """
    Run both attack models on a scenario.

    Malformed inputs are recorded per model as an error string. Invariant
    violations are model defects and propagate to the caller.
    """
    result = ScenarioResult(scenario=scenario)

    try:
        ladder = build_ladder(
            LadderConfig.from_percentages(scenario.first_node_traffic, scenario.traffic_flows),
            params,
        )
        result.endorsed = ladder.total_endorsed_on_target(
            scenario.attacker_payment, scenario.hold_duration
        )
        result.ladder_outcome = ladder.attack_outcome(result.endorsed, scenario.hold_duration)
    except DISCARD_ERRORS as e:
        result.ladder_error = str(e)

    try:
        outcome = surge_attack(scenario.honest_peers, scenario.cutoff_index, params)
        result.surge_success = outcome.success(params)
        result.surge_outcome = outcome
    except DISCARD_ERRORS as e:
        result.surge_error = str(e)

    return result


class ScenarioSampler:
    """
    Draws raw scenarios from uniform ranges.

    Traffic portions are drawn from [0, 100] and cutoff indexes from
    [0, peer count], so that the models' own validation acts as the
    acceptance filter.
    """

    def __init__(
        self,
        params: ProtocolParams = DEFAULT_PARAMS,
        ranges: ScenarioRanges = SCENARIO_RANGES,
        seed: int = RANDOM_SEED,
    ):
        self.params = params
        self.ranges = ranges
        self.rng = get_rng(seed)

    def _amount(self) -> int:
        return int(self.rng.integers(1, self.ranges.max_amount, endpoint=True))

    def sample(self) -> Scenario:
        route_length = int(self.rng.integers(
            self.ranges.min_route_length, self.ranges.max_route_length, endpoint=True
        ))
        flows = self.rng.integers(0, 100, size=route_length, endpoint=True)

        peer_count = int(self.rng.integers(1, self.ranges.max_peers, endpoint=True))
        peers = self.rng.integers(1, self.ranges.max_amount, size=peer_count, endpoint=True)

        return Scenario(
            first_node_traffic=self._amount(),
            attacker_payment=self._amount(),
            hold_duration=int(self.rng.integers(1, self.params.max_hold_blocks, endpoint=True)),
            traffic_flows=[int(f) for f in flows],
            honest_peers=[int(p) for p in peers],
            cutoff_index=int(self.rng.integers(0, peer_count, endpoint=True)),
        )


class ScenarioSearch:
    """Evaluates sampled scenarios and aggregates the attack outcomes."""

    def __init__(
        self,
        params: ProtocolParams = DEFAULT_PARAMS,
        ranges: ScenarioRanges = SCENARIO_RANGES,
        seed: int = RANDOM_SEED,
        max_examples: int = 5,
    ):
        self.params = params
        self.seed = seed
        self.max_examples = max_examples
        self.sampler = ScenarioSampler(params, ranges, seed)

    def run(self, n_samples: int = DEFAULT_SAMPLES) -> SearchSummary:
        summary = SearchSummary(samples=n_samples, seed=self.seed)
        endorsed = []

        for _ in range(n_samples):
            result = evaluate_scenario(self.sampler.sample(), self.params)
            payment = result.scenario.attacker_payment
            interesting = False

            if result.ladder_outcome is None:
                summary.ladder_discarded += 1
            else:
                summary.ladder_evaluated += 1
                if result.endorsed:
                    endorsed.append(result.endorsed)
                if result.ladder_outcome.ladder_cheaper(payment):
                    summary.ladder_cheaper += 1
                if result.ladder_outcome.lost_reputation():
                    summary.ladder_lost_reputation += 1
                if result.ladder_effective:
                    summary.ladder_effective += 1
                    interesting = True

            if result.surge_outcome is None:
                summary.surge_discarded += 1
            else:
                summary.surge_evaluated += 1
                if result.surge_success:
                    summary.surge_successful += 1
                    interesting = True

            if interesting and len(summary.examples) < self.max_examples:
                summary.examples.append(result)

        if endorsed:
            # Amounts can exceed int64, so summarise them as floats.
            values = np.array(endorsed, dtype=float)
            summary.endorsed_median = float(np.median(values))
            summary.endorsed_p99 = float(np.percentile(values, 99))

        return summary


def generate_search_table(summary: SearchSummary) -> str:
    """Generate the per-attack summary table."""
    headers = ["Attack", "Evaluated", "Discarded", "Successful", "Success Rate"]

    rows = [
        [
            "Laddering",
            f"{summary.ladder_evaluated:,}",
            f"{summary.ladder_discarded:,}",
            f"{summary.ladder_effective:,}",
            f"{summary.ladder_success_rate * 100:.2f}%",
        ],
        [
            "Surge",
            f"{summary.surge_evaluated:,}",
            f"{summary.surge_discarded:,}",
            f"{summary.surge_successful:,}",
            f"{summary.surge_success_rate * 100:.2f}%",
        ],
    ]

    return tabulate(rows, headers=headers, tablefmt="simple")


def main():
    """Run the scenario search and report any viable attacks."""
    parser = argparse.ArgumentParser(
        description="Monte Carlo search for viable reputation attacks"
    )
    parser.add_argument(
        "--samples", "-n",
        type=int,
        default=DEFAULT_SAMPLES,
        help=f"Number of scenarios to draw (default: {DEFAULT_SAMPLES:,})"
    )
    parser.add_argument(
        "--seed", "-s",
        type=int,
        default=RANDOM_SEED,
        help=f"Random seed for reproducibility (default: {RANDOM_SEED})"
    )
    parser.add_argument(
        "--examples", "-e",
        type=int,
        default=5,
        help="Number of successful scenarios to print (default: 5)"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Print ladder sub-condition counts"
    )

    args = parser.parse_args()

    print(f"Reputation Attack Scenario Search")
    print(f"=================================")
    print(f"Samples: {args.samples:,}")
    print(f"Seed: {args.seed}")
    print(f"Route length: {SCENARIO_RANGES.min_route_length}-{SCENARIO_RANGES.max_route_length} hops")
    print(f"Max hold: {DEFAULT_PARAMS.max_hold_blocks:,} blocks")
    print()

    search = ScenarioSearch(seed=args.seed, max_examples=args.examples)
    summary = search.run(n_samples=args.samples)

    print("Attack Viability")
    print("=" * 60)
    print(generate_search_table(summary))
    print()
    print(f"Endorsed on target: median {summary.endorsed_median:,.0f}, p99 {summary.endorsed_p99:,.0f}")

    if args.verbose:
        print()
        print("Laddering sub-conditions:")
        print(f"  Cheaper than direct: {summary.ladder_cheaper:,}")
        print(f"  Target lost reputation: {summary.ladder_lost_reputation:,}")

    if summary.examples:
        print()
        print("Successful scenarios:")
        for result in summary.examples:
            s = result.scenario
            print(f"  - traffic={s.first_node_traffic} payment={s.attacker_payment} "
                  f"hold={s.hold_duration} flows={s.traffic_flows}")
            if result.ladder_effective:
                print(f"      ladder: {result.ladder_outcome}")
            if result.surge_success:
                print(f"      surge (cutoff {s.cutoff_index}): {result.surge_outcome}")


if __name__ == "__main__":
    main()

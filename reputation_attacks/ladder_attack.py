"""
Laddering Attack Model
======================

Closed-form model of a laddering attack against reputation-based endorsement.

The attacker connects to a small node A on a route A - B - C - ... - target
and uses the reputation that each node has already built with its peer to get
HTLCs endorsed one hop further along. Once it has endorsed capacity on the
target's outgoing link, it slow jams that capacity so that the target loses
its reputation with its own peer.

This module computes:
- The ladder of reputation/revenue values along the route
- The largest HTLC the attacker can get endorsed on the target's link
- Whether the attack is cheaper than building reputation with the target
  directly, and whether it actually costs the target its reputation
"""

import argparse
from dataclasses import dataclass, field
from typing import Iterator, List, Sequence, Tuple
from tabulate import tabulate

from .config import DEFAULT_PARAMS, ProtocolParams
from .errors import ConfigError, InsufficientHoldDurationError, SimulationError
from .reputation_cost import endorsable_capacity, htlc_reputation_cost


@dataclass(frozen=True)
class Channel:
    """One hop's standing with its upstream peer and its downstream threshold."""
    incoming_reputation: int
    outgoing_revenue: int

    def __str__(self) -> str:
        return f"reputation={self.incoming_reputation} revenue={self.outgoing_revenue}"


@dataclass(frozen=True)
class TrafficFlow:
    """Percentage of a hop's outgoing traffic that comes from its predecessor."""
    portion: int


@dataclass
class LadderConfig:
    """Input for building a ladder."""

    # Traffic forwarded by the node the attacker connects to, expressed as
    # total volume over the reputation window. This node is smaller than the
    # target, otherwise the attacker would just connect to the target.
    first_node_traffic: int

    # For each hop, the share of total traffic on the outgoing link that the
    # preceding node provides. With first_node_traffic of 100,000 and a first
    # flow of 50, the first node has 200,000 flowing through it.
    traffic_flows: List[TrafficFlow] = field(default_factory=list)

    @classmethod
    def from_percentages(cls, first_node_traffic: int, portions: Sequence[int]) -> "LadderConfig":
        return cls(first_node_traffic, [TrafficFlow(p) for p in portions])


@dataclass(frozen=True)
class AttackOutcome:
    """Result of evaluating a laddering attack against the target node."""

    # Reputation the target had with its peer to start with.
    target_reputation: int

    # Threshold below which the target loses reputation with its peer.
    target_threshold: int

    # Reputation the target lost to the slow jam.
    reputation_change: int

    # Cost of building the same reputation with the target directly.
    target_cost: int

    def ladder_cheaper(self, attacker_payment: int) -> bool:
        return self.target_cost > attacker_payment

    def lost_reputation(self) -> bool:
        return self.target_reputation < self.target_threshold + self.reputation_change

    def effective(self, attacker_payment: int) -> bool:
        """An attack is only interesting if it is both cheap and damaging."""
        return self.ladder_cheaper(attacker_payment) and self.lost_reputation()

    def __str__(self) -> str:
        return (
            f"Target has reputation: {self.target_reputation} vs threshold: "
            f"{self.target_threshold} reputation changed by {self.reputation_change} "
            f"which would have cost {self.target_cost} to acquire with the target directly"
        )


@dataclass(frozen=True)
class Ladder:
    """
    Route of channels leading up to the target.

    The attack targets the penultimate channel: in A - B - C - D, we are
    trying to sabotage C's reputation with D.
    """
    channels: Tuple[Channel, ...]
    params: ProtocolParams = DEFAULT_PARAMS

    def __post_init__(self):
        if len(self.channels) < 3:
            raise ConfigError(
                f"must have at least three channels: {len(self.channels)}"
            )

        # Connecting to a bigger node to attack a smaller one is never a
        # cost saving, so the route must not shrink.
        for i in range(1, len(self.channels)):
            previous = self.channels[i - 1].outgoing_revenue
            current = self.channels[i].outgoing_revenue
            if current < previous:
                raise ConfigError(
                    f"revenue decreases at hop {i}: {current} < {previous}"
                )

    def __iter__(self) -> Iterator[Channel]:
        return iter(self.channels)

    def __len__(self) -> int:
        return len(self.channels)

    def __getitem__(self, index):
        return self.channels[index]

    def __str__(self) -> str:
        lines = [f"Channels: {len(self.channels)}"]
        lines.extend(f"  - {channel}" for channel in self.channels)
        return "\n".join(lines)

    def total_endorsed_on_target(self, attacker_payment: int, hold_duration: int) -> int:
        """
        Largest HTLC the attacker can get endorsed on the target's link.

        The attacker's payment acts as its reputation with the first node.
        At each following hop it relies on the previous node's reputation
        instead, so the endorsed amount is limited by the tightest hop.
        """
        if hold_duration <= 0 or hold_duration > self.params.max_hold_blocks:
            raise InsufficientHoldDurationError(
                f"hold duration {hold_duration} outside (0, {self.params.max_hold_blocks}]"
            )

        candidate_reputation = attacker_payment
        total_endorsed = 0

        for channel in self.channels[:-1]:
            # No endorsement at all below the revenue threshold.
            if candidate_reputation < channel.outgoing_revenue:
                return 0

            # Only reputation built above the threshold is available for
            # in-flight endorsed HTLCs.
            hop_endorsed = endorsable_capacity(
                candidate_reputation - channel.outgoing_revenue,
                hold_duration,
                self.params,
            )
            if hop_endorsed == 0:
                return 0

            # Endorsed capacity can only shrink along the route.
            if total_endorsed == 0 or hop_endorsed < total_endorsed:
                total_endorsed = hop_endorsed

            candidate_reputation = channel.incoming_reputation

        return total_endorsed

    def attack_outcome(self, total_endorsed: int, hold_duration: int) -> AttackOutcome:
        """Evaluate the damage of slow jamming ``total_endorsed`` on the target."""
        target = self.channels[-2]
        final_threshold = self.channels[-1].outgoing_revenue

        slow_jam_cost = htlc_reputation_cost(total_endorsed, hold_duration, self.params)

        # The target never had good reputation with its peer, so there was
        # nothing to attack.
        reputation_change = 0
        if target.incoming_reputation >= final_threshold:
            reputation_change = slow_jam_cost

        return AttackOutcome(
            target_reputation=target.incoming_reputation,
            target_threshold=final_threshold,
            reputation_change=reputation_change,
            target_cost=target.outgoing_revenue + slow_jam_cost,
        )

    def run(self, attacker_payment: int, hold_duration: int) -> AttackOutcome:
        """Propagate the attacker's payment and evaluate the outcome."""
        endorsed = self.total_endorsed_on_target(attacker_payment, hold_duration)
        return self.attack_outcome(endorsed, hold_duration)

    def effective(self, attacker_payment: int, hold_duration: int) -> bool:
        return self.run(attacker_payment, hold_duration).effective(attacker_payment)


def build_ladder(config: LadderConfig, params: ProtocolParams = DEFAULT_PARAMS) -> Ladder:
    """
    Build the ladder of channels described by ``config``.

    Raises:
        ConfigError: fewer than three hops, a traffic portion outside
            [1, 100], non-positive first node traffic, or revenue that
            decreases along the route.
    """
    if len(config.traffic_flows) < 3:
        raise ConfigError(
            f"must have at least three channels: {len(config.traffic_flows)}"
        )
    if config.first_node_traffic <= 0:
        raise ConfigError(
            f"first node traffic must be positive: {config.first_node_traffic}"
        )

    incoming_traffic = config.first_node_traffic
    channels = []

    for i, flow in enumerate(config.traffic_flows):
        if flow.portion <= 0 or flow.portion > 100:
            raise ConfigError(f"traffic portion {flow.portion} at hop {i} outside [1, 100]")

        # The incoming link contributes this share of the traffic on our
        # outgoing link, which gives us our total traffic over the window.
        incoming_traffic = incoming_traffic * 100 // flow.portion
        channels.append(Channel(
            incoming_reputation=incoming_traffic,
            outgoing_revenue=params.reproject(incoming_traffic),
        ))

    # Ladder validates hop count and route monotonicity.
    return Ladder(channels=tuple(channels), params=params)


def generate_ladder_table(ladder: Ladder) -> str:
    """Generate the per-hop reputation/revenue table for a ladder."""
    headers = ["Hop", "Incoming Reputation", "Outgoing Revenue", "Role"]

    rows = []
    for i, channel in enumerate(ladder):
        if i == len(ladder) - 2:
            role = "target"
        elif i == len(ladder) - 1:
            role = "target's peer"
        else:
            role = "ladder"
        rows.append([
            i,
            f"{channel.incoming_reputation:,}",
            f"{channel.outgoing_revenue:,}",
            role,
        ])

    return tabulate(rows, headers=headers, tablefmt="simple")


def generate_outcome_table(outcome: AttackOutcome, attacker_payment: int) -> str:
    """Generate the attack outcome summary table."""
    headers = ["Metric", "Value"]
    rows = [
        ["Target reputation", f"{outcome.target_reputation:,}"],
        ["Target threshold", f"{outcome.target_threshold:,}"],
        ["Reputation change", f"{outcome.reputation_change:,}"],
        ["Direct cost", f"{outcome.target_cost:,}"],
        ["Attacker payment", f"{attacker_payment:,}"],
        ["Ladder cheaper", outcome.ladder_cheaper(attacker_payment)],
        ["Lost reputation", outcome.lost_reputation()],
        ["Effective", outcome.effective(attacker_payment)],
    ]
    return tabulate(rows, headers=headers, tablefmt="simple")


def _parse_int_list(value: str) -> List[int]:
    return [int(v) for v in value.split(",") if v.strip()]


def main():
    """Evaluate a single laddering attack scenario."""
    parser = argparse.ArgumentParser(
        description="Laddering attack against reputation-based endorsement"
    )
    parser.add_argument(
        "--traffic", "-t",
        type=int,
        default=120_000,
        help="Traffic of the first node over the reputation window (default: 120,000)"
    )
    parser.add_argument(
        "--flows", "-f",
        type=str,
        default="100,10,25,50",
        help="Comma-separated traffic portions per hop (default: '100,10,25,50')"
    )
    parser.add_argument(
        "--payment", "-p",
        type=int,
        default=30_000,
        help="Amount paid by the attacker (default: 30,000)"
    )
    parser.add_argument(
        "--hold",
        type=int,
        default=300,
        help="Blocks the attacker holds its HTLC for (default: 300)"
    )

    args = parser.parse_args()

    print(f"Laddering Attack Model")
    print(f"======================")
    print(f"First node traffic: {args.traffic:,}")
    print(f"Traffic flows: {args.flows}")
    print(f"Attacker payment: {args.payment:,}")
    print(f"Hold duration: {args.hold} blocks")
    print()

    try:
        ladder = build_ladder(LadderConfig.from_percentages(args.traffic, _parse_int_list(args.flows)))
        endorsed = ladder.total_endorsed_on_target(args.payment, args.hold)
        outcome = ladder.attack_outcome(endorsed, args.hold)
    except (SimulationError, ValueError) as e:
        parser.error(str(e))

    print("Ladder")
    print("=" * 60)
    print(generate_ladder_table(ladder))
    print()
    print(f"Total endorsed on target: {endorsed:,}")
    print()
    print("Attack Outcome")
    print("=" * 60)
    print(generate_outcome_table(outcome, args.payment))
    print()
    print(outcome)


if __name__ == "__main__":
    main()

"""
Surge Attack Model
==================

Closed-form model of a reputation surge attack.

The attacker inflates the revenue on one of the target node's outgoing links
so that its revenue threshold rises above the reputation of the node's honest
peers. With those peers cut off from protected slots, the attacker general
jams the link for a full revenue window. The attack succeeds when the node
earns less during the attack (what the attacker paid plus revenue from the
peers that kept their reputation) than it would have in peacetime.

Reference: reputation-based channel jamming mitigation, surge attack analysis
"""

import argparse
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple
from tabulate import tabulate

from .config import DEFAULT_PARAMS, ProtocolParams
from .errors import ConfigError, InvariantViolation, SimulationError
from .reputation_cost import htlc_reputation_cost


@dataclass(frozen=True)
class SurgeAttackOutcome:
    """Revenue of the targeted node in peacetime and under a surge attack."""

    # Reputation of the most valuable peer the attacker cuts off.
    cutoff_reputation: int

    # Revenue over the revenue window without an attack.
    peace_revenue: int

    # Revenue from peers that keep their reputation during the attack.
    attack_revenue: int

    @property
    def attack_possible(self) -> bool:
        """Whether the cutoff peer had reputation above the revenue threshold."""
        return self.cutoff_reputation >= self.peace_revenue

    @property
    def attacker_paid(self) -> int:
        """Amount the attacker pays to raise the threshold to the cutoff."""
        return max(self.cutoff_reputation - self.peace_revenue, 0)

    @property
    def revenue_loss_percent(self) -> Optional[float]:
        """
        Share of peacetime revenue the node loses, negative for a gain.
        None when there was no reputation to attack.
        """
        if not self.attack_possible:
            return None
        if self.peace_revenue == 0:
            return 0.0
        earned = self.attacker_paid + self.attack_revenue
        return (self.peace_revenue - earned) * 100 / self.peace_revenue

    def success(self, params: ProtocolParams = DEFAULT_PARAMS) -> bool:
        """
        Whether the attack leaves the node with less revenue than peacetime.

        Raises:
            InvariantViolation: if the attack-time revenue exceeds peacetime
                revenue, which the model can never produce.
        """
        # If the cutoff peer's reputation doesn't clear peacetime revenue by
        # at least a minimal HTLC, the peers never had reputation worth
        # stripping. The hold duration is not very relevant here.
        floor = htlc_reputation_cost(
            params.minimum_htlc_msat, params.reference_hold_blocks, params
        )
        if self.cutoff_reputation < self.peace_revenue + floor:
            return False

        # The attacker only pays the difference between the threshold and
        # the best peer it cuts off.
        attacker_pays = self.cutoff_reputation - self.peace_revenue

        # Traffic is only ever cut off, never added.
        if self.attack_revenue > self.peace_revenue:
            raise InvariantViolation(
                f"attack revenue: {self.attack_revenue} should be <= peace: {self.peace_revenue}"
            )

        return attacker_pays + self.attack_revenue < self.peace_revenue

    def __str__(self) -> str:
        if not self.attack_possible:
            return (
                f"No attack: cutoff reputation: {self.cutoff_reputation} is already "
                f"below threshold: {self.peace_revenue}"
            )
        return (
            f"Node lost: {self.revenue_loss_percent:.1f} % of revenue - attacker paid: "
            f"{self.attacker_paid} to meet threshold: {self.peace_revenue}, node still "
            f"earned: {self.attack_revenue + self.attacker_paid} "
            f"({self.attack_revenue} honest + {self.attacker_paid} attacker)"
        )


def surge_attack(
    honest_peers: Sequence[int],
    cutoff_index: int,
    params: ProtocolParams = DEFAULT_PARAMS,
) -> SurgeAttackOutcome:
    """
    Compute peacetime and under-attack revenue for a surge attack.

    Args:
        honest_peers: Revenue-equivalent reputation of each honest peer
        cutoff_index: Rank (ascending) of the most valuable peer the attacker
            cuts off. Zero cuts off only the least valuable peer.
        params: Protocol parameters

    Raises:
        ConfigError: no peers, a non-positive peer amount, or a cutoff index
            outside the peer list.
    """
    if not honest_peers:
        raise ConfigError("surge attack needs at least one honest peer")
    if cutoff_index < 0 or cutoff_index >= len(honest_peers):
        raise ConfigError(f"cutoff: {cutoff_index} outside peer count: {len(honest_peers)}")
    for amount in honest_peers:
        if amount <= 0:
            raise ConfigError(f"peer amount must be positive: {amount}")

    peace_revenue = 0
    attack_revenue = 0
    reputation_to_cut_off = 0

    # Least to most valuable peer.
    for i, reputation in enumerate(sorted(honest_peers)):
        # Constant traffic: the peer's share of revenue-window revenue.
        contribution = params.reproject(reputation)
        peace_revenue += contribution

        # Up to the cutoff the attacker has to outbid this peer's
        # reputation, past it the peer keeps earning us fees.
        if i <= cutoff_index:
            reputation_to_cut_off = reputation
        else:
            attack_revenue += contribution

    return SurgeAttackOutcome(
        cutoff_reputation=reputation_to_cut_off,
        peace_revenue=peace_revenue,
        attack_revenue=attack_revenue,
    )


def generate_surge_table(
    outcomes: List[Tuple[int, SurgeAttackOutcome]],
    params: ProtocolParams = DEFAULT_PARAMS,
) -> str:
    """Generate a table of (cutoff, outcome) pairs, one row per cutoff."""
    headers = [
        "Cutoff",
        "Cutoff Reputation",
        "Peace Revenue",
        "Attack Revenue",
        "Attacker Paid",
        "Revenue Loss",
        "Success",
    ]

    rows = []
    for cutoff, o in outcomes:
        loss = o.revenue_loss_percent
        rows.append([
            cutoff,
            f"{o.cutoff_reputation:,}",
            f"{o.peace_revenue:,}",
            f"{o.attack_revenue:,}",
            f"{o.attacker_paid:,}" if o.attack_possible else "n/a",
            "n/a" if loss is None else f"{loss:.1f}%",
            o.success(params),
        ])

    return tabulate(rows, headers=headers, tablefmt="simple")


def main():
    """Evaluate a surge attack against a node's honest peers."""
    parser = argparse.ArgumentParser(
        description="Surge attack against reputation-based endorsement"
    )
    parser.add_argument(
        "--peers",
        type=str,
        default="5000000000,20000000000,60000000000,400000000000",
        help="Comma-separated reputation of each honest peer (msat)"
    )
    parser.add_argument(
        "--cutoff", "-c",
        type=int,
        default=None,
        help="Cutoff rank to evaluate (default: every rank)"
    )

    args = parser.parse_args()
    peers = [int(p) for p in args.peers.split(",") if p.strip()]

    print(f"Surge Attack Model")
    print(f"==================")
    print(f"Honest peers: {len(peers)}")
    print(f"Revenue window: {DEFAULT_PARAMS.revenue_period_weeks} weeks")
    print(f"Reputation window: {DEFAULT_PARAMS.reputation_period_weeks} weeks")
    print()

    cutoffs = range(len(peers)) if args.cutoff is None else [args.cutoff]
    try:
        outcomes = [(c, surge_attack(peers, c)) for c in cutoffs]
        table = generate_surge_table(outcomes)
    except SimulationError as e:
        parser.error(str(e))

    print("Surge Attack Outcomes")
    print("=" * 80)
    print(table)
    print()
    for c, outcome in outcomes:
        print(f"  cutoff {c}: {outcome}")


if __name__ == "__main__":
    main()

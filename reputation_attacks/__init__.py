"""
Reputation Attack Models
========================

Closed-form economic models of attacks against reputation-based channel
jamming mitigation for payment-routing nodes.

Modules:
- config: Protocol parameters, accounting windows and scenario ranges
- errors: Error taxonomy shared by the models
- reputation_cost: Conversion between HTLC amounts and reputation
- ladder_attack: Laddering attack (ladder, endorsement propagation, outcome)
- surge_attack: Reputation surge attack followed by general jamming
- scenario_search: Monte Carlo search for viable attacks
"""

from .config import (
    RANDOM_SEED,
    DEFAULT_SAMPLES,
    DEFAULT_PARAMS,
    ProtocolParams,
    get_rng,
)
from .errors import (
    SimulationError,
    ConfigError,
    InsufficientHoldDurationError,
    InvariantViolation,
)
from .reputation_cost import endorsable_capacity, htlc_reputation_cost
from .ladder_attack import (
    AttackOutcome,
    Channel,
    Ladder,
    LadderConfig,
    TrafficFlow,
    build_ladder,
)
from .surge_attack import SurgeAttackOutcome, surge_attack

__version__ = "1.0.0"

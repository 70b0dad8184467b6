"""
Conversion between HTLC amounts and reputation.

Holding an endorsed HTLC for ``hold`` blocks is charged as if the HTLC had
occupied the channel for ``hold * block_time / resolution_period`` well
behaved payments. Both directions use the same ProtocolParams.
"""

from .config import DEFAULT_PARAMS, ProtocolParams
from .errors import InsufficientHoldDurationError


def _check_hold(hold: int) -> None:
    if hold <= 0:
        raise InsufficientHoldDurationError(
            f"hold duration must be positive: {hold}"
        )


def htlc_reputation_cost(
    amount: int,
    hold: int,
    params: ProtocolParams = DEFAULT_PARAMS,
) -> int:
    """Reputation cost of getting ``amount`` endorsed and holding it for ``hold`` blocks."""
    _check_hold(hold)
    return amount * hold * params.block_time_s // params.resolution_period_s


def endorsable_capacity(
    surplus: int,
    hold: int,
    params: ProtocolParams = DEFAULT_PARAMS,
) -> int:
    """Largest amount that ``surplus`` reputation can get endorsed for ``hold`` blocks."""
    _check_hold(hold)
    return surplus * params.resolution_period_s // (hold * params.block_time_s)

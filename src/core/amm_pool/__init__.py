"""`amm_pool`: integer-only state engine for a two-asset constant-product pool.

- deterministic, integer-only transitions on unsigned 64-bit fields,
- immutable state (frozen dataclasses) passed explicitly to every call,
- fail-closed guards and invariant checks; a rejected step changes nothing.

Public API:
- `initial_state() -> PoolState`
- `step(state, params) -> StepResult`
- `step_or_raise(state, params) -> StepResult` (raises on rejection)
- `quote_swap(amount_in, reserve_in, reserve_out, fee_rate_milli) -> (amount_out, fee_amount)`
"""

from .engine import step, step_or_raise
from .errors import (
    AlreadyInitialized,
    ArithmeticOverflow,
    ContractPaused,
    DivisionByZero,
    ErrorCode,
    InsufficientShares,
    InvalidInput,
    NotInitialized,
    PoolError,
    PoolInvariantError,
    SlippageExceeded,
    Unauthorized,
)
from .math import (
    FEE_DENOM_MILLI,
    U64_MAX,
    compute_shares_minted,
    compute_withdrawal,
    quote_swap,
    quote_swap_exact_out,
    spot_price_milli,
)
from .state import initial_state, state_from_dict, state_to_dict
from .types import (
    Action,
    ActionParams,
    Asset,
    Direction,
    Effect,
    Event,
    Party,
    PoolState,
    StepResult,
    TransferInstruction,
)

__all__ = [
    "step",
    "step_or_raise",
    "initial_state",
    "state_from_dict",
    "state_to_dict",
    "quote_swap",
    "quote_swap_exact_out",
    "spot_price_milli",
    "compute_shares_minted",
    "compute_withdrawal",
    "FEE_DENOM_MILLI",
    "U64_MAX",
    "Action",
    "ActionParams",
    "Asset",
    "Direction",
    "Effect",
    "Event",
    "Party",
    "PoolState",
    "StepResult",
    "TransferInstruction",
    "ErrorCode",
    "PoolError",
    "InvalidInput",
    "ContractPaused",
    "SlippageExceeded",
    "DivisionByZero",
    "InsufficientShares",
    "NotInitialized",
    "AlreadyInitialized",
    "ArithmeticOverflow",
    "Unauthorized",
    "PoolInvariantError",
]

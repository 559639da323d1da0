"""Guard functions for `amm_pool`.

One pure function per action. Each inspects the PRE-state and the parameters
and raises the matching ``PoolError`` when the action is not allowed; returning
normally means the update may be applied.

Guards re-run the same arithmetic the update performs so that every overflow,
underflow and slippage failure is detected before any state is produced.
"""

from __future__ import annotations

from .errors import (
    AlreadyInitialized,
    ContractPaused,
    DivisionByZero,
    InvalidInput,
    NotInitialized,
    SlippageExceeded,
    Unauthorized,
)
from .math import (
    checked_add_u64,
    compute_shares_minted,
    compute_withdrawal,
    quote_swap,
    require_fee_rate,
)
from .types import ActionParams, Direction, PoolState


def _require_initialized(state: PoolState) -> None:
    if not state.initialized:
        raise NotInitialized("pool has not been initialized")


def _require_authorized(params: ActionParams) -> None:
    # The authorization decision itself belongs to the caller.
    if not params.authorized:
        raise Unauthorized(f"{params.action.value} requires an authorized caller")


def guard_initialize(state: PoolState, params: ActionParams) -> None:
    if state.initialized:
        raise AlreadyInitialized("pool is already initialized")
    require_fee_rate(params.fee_rate_milli)


def guard_add_liquidity(state: PoolState, params: ActionParams) -> None:
    _require_initialized(state)
    if params.amount_a == 0 or params.amount_b == 0:
        raise InvalidInput(f"deposit amounts must be positive: ({params.amount_a}, {params.amount_b})")

    shares = compute_shares_minted(
        params.amount_a, params.amount_b,
        state.reserve_a, state.reserve_b, state.total_shares,
    )
    checked_add_u64(state.reserve_a, params.amount_a, name="reserve_a")
    checked_add_u64(state.reserve_b, params.amount_b, name="reserve_b")
    checked_add_u64(state.total_shares, shares, name="total_shares")


def guard_swap(state: PoolState, params: ActionParams) -> None:
    _require_initialized(state)
    if state.paused:
        raise ContractPaused("swaps are paused")
    if params.amount_in == 0:
        raise InvalidInput("amount_in must be positive")

    reserve_in, reserve_out = state.reserves_for(params.direction)
    if reserve_in == 0 or reserve_out == 0:
        raise DivisionByZero("cannot swap against an empty pool")

    amount_out, fee_amount = quote_swap(
        params.amount_in, reserve_in, reserve_out, state.fee_rate_milli,
    )
    if amount_out < params.minimum_out:
        raise SlippageExceeded(f"amount_out ({amount_out}) < minimum_out ({params.minimum_out})")

    checked_add_u64(reserve_in, params.amount_in - fee_amount, name="reserve_in")
    accrued_out = state.accrued_fee_b if params.direction is Direction.A_TO_B else state.accrued_fee_a
    checked_add_u64(accrued_out, fee_amount, name="accrued fee")


def guard_remove_liquidity(state: PoolState, params: ActionParams) -> None:
    _require_initialized(state)
    compute_withdrawal(params.shares, state.reserve_a, state.reserve_b, state.total_shares)


def guard_distribute_fees(state: PoolState, params: ActionParams) -> None:
    _require_initialized(state)
    _require_authorized(params)


def guard_set_paused(state: PoolState, params: ActionParams) -> None:
    _require_initialized(state)
    _require_authorized(params)


def guard_set_fee_rate(state: PoolState, params: ActionParams) -> None:
    _require_initialized(state)
    _require_authorized(params)
    require_fee_rate(params.fee_rate_milli)

"""State transition functions for `amm_pool`.

One pure function per action. Each returns a new `PoolState` with the
action's updates applied.

Semantics:
- updates evaluate against the PRE-state,
- callers run the matching guard first; updates assume it passed,
- we implement updates via `dataclasses.replace()` on frozen dataclasses.
"""

from __future__ import annotations

from dataclasses import replace

from .math import checked_sub_u64, compute_shares_minted, compute_withdrawal, quote_swap
from .types import ActionParams, Direction, PoolState


def apply_initialize(state: PoolState, params: ActionParams) -> PoolState:
    return PoolState(fee_rate_milli=params.fee_rate_milli, initialized=True)


def apply_add_liquidity(state: PoolState, params: ActionParams) -> PoolState:
    shares = compute_shares_minted(
        params.amount_a, params.amount_b,
        state.reserve_a, state.reserve_b, state.total_shares,
    )
    return replace(
        state,
        reserve_a=state.reserve_a + params.amount_a,
        reserve_b=state.reserve_b + params.amount_b,
        total_shares=state.total_shares + shares,
    )


def apply_swap(state: PoolState, params: ActionParams) -> PoolState:
    reserve_in, reserve_out = state.reserves_for(params.direction)
    amount_out, fee_amount = quote_swap(
        params.amount_in, reserve_in, reserve_out, state.fee_rate_milli,
    )
    new_in = reserve_in + (params.amount_in - fee_amount)
    new_out = checked_sub_u64(reserve_out, amount_out, name="reserve_out")

    # Fees accrue on the output side: A->B credits accrued_fee_b.
    if params.direction is Direction.A_TO_B:
        return replace(
            state,
            reserve_a=new_in,
            reserve_b=new_out,
            accrued_fee_b=state.accrued_fee_b + fee_amount,
        )
    return replace(
        state,
        reserve_b=new_in,
        reserve_a=new_out,
        accrued_fee_a=state.accrued_fee_a + fee_amount,
    )


def apply_remove_liquidity(state: PoolState, params: ActionParams) -> PoolState:
    amount_a, amount_b = compute_withdrawal(
        params.shares, state.reserve_a, state.reserve_b, state.total_shares,
    )
    return replace(
        state,
        reserve_a=checked_sub_u64(state.reserve_a, amount_a, name="reserve_a"),
        reserve_b=checked_sub_u64(state.reserve_b, amount_b, name="reserve_b"),
        total_shares=checked_sub_u64(state.total_shares, params.shares, name="total_shares"),
    )


def apply_distribute_fees(state: PoolState, params: ActionParams) -> PoolState:
    return replace(state, accrued_fee_a=0, accrued_fee_b=0)


def apply_set_paused(state: PoolState, params: ActionParams) -> PoolState:
    return replace(state, paused=params.paused)


def apply_set_fee_rate(state: PoolState, params: ActionParams) -> PoolState:
    return replace(state, fee_rate_milli=params.fee_rate_milli)

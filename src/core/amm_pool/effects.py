"""Effect functions for the amm_pool engine.

One pure function per action. Each builds the ``Effect`` from the PRE-state and
the POST-state: reported quantities are the deltas between the two, so a record
always describes what the transition actually did (the fee distribution, for
instance, reports the accumulators captured before they were zeroed).

Zero-amount transfers are omitted from ``Effect.transfers``.
"""

from __future__ import annotations

from .types import (
    ActionParams,
    Asset,
    Direction,
    Effect,
    Event,
    Party,
    PoolState,
    TransferInstruction,
)


def _transfer(asset: Asset, source: Party, destination: Party, amount: int) -> tuple[TransferInstruction, ...]:
    if amount <= 0:
        return ()
    return (TransferInstruction(asset=asset, source=source, destination=destination, amount=amount),)


def effect_initialize(pre: PoolState, post: PoolState, params: ActionParams) -> Effect:
    return Effect(event=Event.POOL_INITIALIZED, actor=params.actor, fee_rate_milli=post.fee_rate_milli)


def effect_add_liquidity(pre: PoolState, post: PoolState, params: ActionParams) -> Effect:
    return Effect(
        event=Event.LIQUIDITY_ADDED,
        actor=params.actor,
        amount_a=params.amount_a,
        amount_b=params.amount_b,
        shares=post.total_shares - pre.total_shares,
        transfers=(
            _transfer(Asset.A, Party.ACTOR, Party.POOL, params.amount_a)
            + _transfer(Asset.B, Party.ACTOR, Party.POOL, params.amount_b)
        ),
    )


def effect_swap(pre: PoolState, post: PoolState, params: ActionParams) -> Effect:
    direction = params.direction
    _, reserve_out_pre = pre.reserves_for(direction)
    _, reserve_out_post = post.reserves_for(direction)
    amount_out = reserve_out_pre - reserve_out_post
    if direction is Direction.A_TO_B:
        fee_amount = post.accrued_fee_b - pre.accrued_fee_b
    else:
        fee_amount = post.accrued_fee_a - pre.accrued_fee_a

    # The reserve share of the input goes to the pool and the fee share to fee
    # custody, so pool custody stays equal to the reserves.
    inbound: tuple[TransferInstruction, ...] = ()
    if params.inbound_transfer:
        inbound = (
            _transfer(direction.asset_in, Party.ACTOR, Party.POOL, params.amount_in - fee_amount)
            + _transfer(direction.asset_in, Party.ACTOR, Party.FEE_CUSTODY, fee_amount)
        )

    return Effect(
        event=Event.SWAPPED,
        actor=params.actor,
        amount_in=params.amount_in,
        amount_out=amount_out,
        fee_amount=fee_amount,
        direction=direction,
        transfers=inbound + _transfer(direction.asset_out, Party.POOL, Party.ACTOR, amount_out),
    )


def effect_remove_liquidity(pre: PoolState, post: PoolState, params: ActionParams) -> Effect:
    amount_a = pre.reserve_a - post.reserve_a
    amount_b = pre.reserve_b - post.reserve_b
    return Effect(
        event=Event.LIQUIDITY_REMOVED,
        actor=params.actor,
        amount_a=amount_a,
        amount_b=amount_b,
        shares=params.shares,
        transfers=(
            _transfer(Asset.A, Party.POOL, Party.ACTOR, amount_a)
            + _transfer(Asset.B, Party.POOL, Party.ACTOR, amount_b)
        ),
    )


def effect_distribute_fees(pre: PoolState, post: PoolState, params: ActionParams) -> Effect:
    amount_a = pre.accrued_fee_a
    amount_b = pre.accrued_fee_b
    return Effect(
        event=Event.FEES_DISTRIBUTED,
        actor=params.actor,
        amount_a=amount_a,
        amount_b=amount_b,
        transfers=(
            _transfer(Asset.A, Party.FEE_CUSTODY, Party.FEE_RECEIVER, amount_a)
            + _transfer(Asset.B, Party.FEE_CUSTODY, Party.FEE_RECEIVER, amount_b)
        ),
    )


def effect_set_paused(pre: PoolState, post: PoolState, params: ActionParams) -> Effect:
    return Effect(event=Event.PAUSE_CHANGED, actor=params.actor, paused=post.paused)


def effect_set_fee_rate(pre: PoolState, post: PoolState, params: ActionParams) -> Effect:
    return Effect(
        event=Event.FEE_RATE_CHANGED,
        actor=params.actor,
        fee_rate_milli=post.fee_rate_milli,
        previous_fee_rate_milli=pre.fee_rate_milli,
    )

"""Tests for src/core/amm_pool/engine.py — dispatch table + step function.

Tests cover every action through the engine, including the reference
lifecycle (initialize, deposit, trade, withdraw).
"""

import pytest
from dataclasses import replace

from src.core.amm_pool import (
    Action,
    ActionParams,
    Asset,
    ContractPaused,
    Direction,
    ErrorCode,
    Event,
    InsufficientShares,
    InvalidInput,
    NotInitialized,
    Party,
    PoolInvariantError,
    PoolState,
    SlippageExceeded,
    U64_MAX,
    Unauthorized,
    initial_state,
    step,
    step_or_raise,
)


def _active(fee_rate_milli: int = 30, **kwargs) -> PoolState:
    """Helper: initialized pool with the given fields."""
    return replace(initial_state(), initialized=True, fee_rate_milli=fee_rate_milli, **kwargs)


def _funded(reserve_a: int = 500, reserve_b: int = 500, total_shares: int = 1000, **kwargs) -> PoolState:
    return _active(reserve_a=reserve_a, reserve_b=reserve_b, total_shares=total_shares, **kwargs)


def _swap(amount_in: int, direction: Direction = Direction.A_TO_B, **kwargs) -> ActionParams:
    return ActionParams(action=Action.SWAP, actor="trader", amount_in=amount_in, direction=direction, **kwargs)


# ---------------------------------------------------------------------------
# initialize
# ---------------------------------------------------------------------------

class TestInitialize:
    def test_basic(self):
        r = step(initial_state(), ActionParams(action=Action.INITIALIZE, fee_rate_milli=30))
        assert r.accepted
        assert r.state == PoolState(fee_rate_milli=30, initialized=True)
        assert r.effect is not None
        assert r.effect.event == Event.POOL_INITIALIZED
        assert r.effect.fee_rate_milli == 30
        assert r.effect.transfers == ()

    def test_zero_fee_allowed(self):
        r = step(initial_state(), ActionParams(action=Action.INITIALIZE, fee_rate_milli=0))
        assert r.accepted

    def test_fee_rate_1000_rejected(self):
        r = step(initial_state(), ActionParams(action=Action.INITIALIZE, fee_rate_milli=1000))
        assert not r.accepted
        assert r.error == ErrorCode.INVALID_INPUT
        assert r.state is None

    def test_twice_rejected(self):
        r = step(_active(), ActionParams(action=Action.INITIALIZE, fee_rate_milli=30))
        assert not r.accepted
        assert r.error == ErrorCode.ALREADY_INITIALIZED

    @pytest.mark.parametrize(
        "params",
        [
            ActionParams(action=Action.ADD_LIQUIDITY, amount_a=1, amount_b=1),
            ActionParams(action=Action.SWAP, amount_in=1),
            ActionParams(action=Action.REMOVE_LIQUIDITY, shares=1),
            ActionParams(action=Action.DISTRIBUTE_FEES, authorized=True),
            ActionParams(action=Action.SET_PAUSED, paused=True, authorized=True),
            ActionParams(action=Action.SET_FEE_RATE, fee_rate_milli=5, authorized=True),
        ],
    )
    def test_uninitialized_rejects_everything_else(self, params):
        r = step(initial_state(), params)
        assert not r.accepted
        assert r.error == ErrorCode.NOT_INITIALIZED
        with pytest.raises(NotInitialized):
            step_or_raise(initial_state(), params)


# ---------------------------------------------------------------------------
# add_liquidity
# ---------------------------------------------------------------------------

class TestAddLiquidity:
    def test_bootstrap_mints_sum(self):
        r = step(_active(), ActionParams(action=Action.ADD_LIQUIDITY, actor="lp", amount_a=500, amount_b=500))
        assert r.accepted
        assert (r.state.reserve_a, r.state.reserve_b, r.state.total_shares) == (500, 500, 1000)
        assert r.effect.event == Event.LIQUIDITY_ADDED
        assert r.effect.shares == 1000
        assert r.effect.actor == "lp"

    def test_transfers_move_deposit_into_pool(self):
        r = step(_active(), ActionParams(action=Action.ADD_LIQUIDITY, amount_a=7, amount_b=9))
        assert [(t.asset, t.source, t.destination, t.amount) for t in r.effect.transfers] == [
            (Asset.A, Party.ACTOR, Party.POOL, 7),
            (Asset.B, Party.ACTOR, Party.POOL, 9),
        ]

    def test_proportional_takes_minimum(self):
        r = step(_funded(), ActionParams(action=Action.ADD_LIQUIDITY, amount_a=100, amount_b=300))
        assert r.accepted
        assert r.effect.shares == 200
        assert r.state.total_shares == 1200
        # the whole deposit is retained, including the excess B
        assert (r.state.reserve_a, r.state.reserve_b) == (600, 800)

    def test_zero_amount_rejected(self):
        r = step(_active(), ActionParams(action=Action.ADD_LIQUIDITY, amount_a=0, amount_b=5))
        assert not r.accepted
        assert r.error == ErrorCode.INVALID_INPUT

    def test_zero_share_deposit_kept_by_pool(self):
        s = _funded(reserve_a=5000, reserve_b=5000, total_shares=1000)
        r = step(s, ActionParams(action=Action.ADD_LIQUIDITY, amount_a=1, amount_b=1))
        assert r.accepted
        assert r.effect.shares == 0
        assert (r.state.reserve_a, r.state.reserve_b, r.state.total_shares) == (5001, 5001, 1000)
        assert [t.amount for t in r.effect.transfers] == [1, 1]

    def test_allowed_while_paused(self):
        r = step(_funded(paused=True), ActionParams(action=Action.ADD_LIQUIDITY, amount_a=50, amount_b=50))
        assert r.accepted

    def test_reserve_overflow(self):
        half = 1 << 63
        s = _funded(reserve_a=half, reserve_b=half, total_shares=half)
        r = step(s, ActionParams(action=Action.ADD_LIQUIDITY, amount_a=half, amount_b=half))
        assert not r.accepted
        assert r.error == ErrorCode.ARITHMETIC_OVERFLOW

    def test_bootstrap_share_overflow(self):
        r = step(_active(), ActionParams(action=Action.ADD_LIQUIDITY, amount_a=U64_MAX, amount_b=1))
        assert not r.accepted
        assert r.error == ErrorCode.ARITHMETIC_OVERFLOW

    def test_non_int_amount_rejected(self):
        r = step(_active(), ActionParams(action=Action.ADD_LIQUIDITY, amount_a="5", amount_b=5))
        assert not r.accepted
        assert r.error == ErrorCode.INVALID_INPUT


# ---------------------------------------------------------------------------
# swap
# ---------------------------------------------------------------------------

class TestSwap:
    def test_a_to_b(self):
        r = step(_funded(), _swap(100))
        assert r.accepted
        s = r.state
        assert (s.reserve_a, s.reserve_b) == (597, 419)
        assert (s.accrued_fee_a, s.accrued_fee_b) == (0, 3)
        assert s.total_shares == 1000
        e = r.effect
        assert e.event == Event.SWAPPED
        assert (e.amount_in, e.amount_out, e.fee_amount) == (100, 81, 3)
        assert e.direction is Direction.A_TO_B

    def test_b_to_a_accrues_fee_in_a(self):
        r = step(_funded(), _swap(100, Direction.B_TO_A))
        assert r.accepted
        assert (r.state.reserve_a, r.state.reserve_b) == (419, 597)
        assert (r.state.accrued_fee_a, r.state.accrued_fee_b) == (3, 0)

    def test_transfers_inbound_then_outbound(self):
        r = step(_funded(), _swap(100))
        assert [(t.asset, t.source, t.destination, t.amount) for t in r.effect.transfers] == [
            (Asset.A, Party.ACTOR, Party.POOL, 97),
            (Asset.A, Party.ACTOR, Party.FEE_CUSTODY, 3),
            (Asset.B, Party.POOL, Party.ACTOR, 81),
        ]

    def test_without_inbound_transfer(self):
        r = step(_funded(), _swap(100, inbound_transfer=False))
        assert r.accepted
        assert [(t.asset, t.destination, t.amount) for t in r.effect.transfers] == [(Asset.B, Party.ACTOR, 81)]

    def test_invariant_product_non_decreasing(self):
        s = _funded()
        r = step(s, _swap(100))
        assert r.state.reserve_a * r.state.reserve_b >= s.reserve_a * s.reserve_b

    def test_paused_rejected_without_change(self):
        s = _funded(paused=True)
        r = step(s, _swap(100))
        assert not r.accepted
        assert r.error == ErrorCode.CONTRACT_PAUSED
        assert s.reserve_a == 500 and s.accrued_fee_b == 0

    def test_slippage(self):
        r = step(_funded(), _swap(100, minimum_out=82))
        assert not r.accepted
        assert r.error == ErrorCode.SLIPPAGE_EXCEEDED

    def test_minimum_out_exact_ok(self):
        r = step(_funded(), _swap(100, minimum_out=81))
        assert r.accepted

    def test_empty_pool_is_division_by_zero(self):
        r = step(_active(), _swap(100))
        assert not r.accepted
        assert r.error == ErrorCode.DIVISION_BY_ZERO

    def test_zero_amount_rejected(self):
        r = step(_funded(), _swap(0))
        assert not r.accepted
        assert r.error == ErrorCode.INVALID_INPUT

    def test_zero_output_accepted(self):
        r = step(_funded(), _swap(1))
        assert r.accepted
        assert (r.effect.amount_out, r.effect.fee_amount) == (0, 0)
        assert (r.state.reserve_a, r.state.reserve_b) == (501, 500)
        # only the inbound leg; nothing leaves the pool
        assert [(t.asset, t.destination, t.amount) for t in r.effect.transfers] == [(Asset.A, Party.POOL, 1)]

    def test_zero_output_blocked_by_minimum_out(self):
        r = step(_funded(), _swap(1, minimum_out=1))
        assert not r.accepted
        assert r.error == ErrorCode.SLIPPAGE_EXCEEDED

    def test_fee_only_swap_credits_reserve_net_of_fee(self):
        s = _funded(reserve_a=1000, reserve_b=1, total_shares=1001)
        r = step(s, _swap(40))
        assert r.accepted
        assert (r.effect.amount_out, r.effect.fee_amount) == (0, 1)
        assert r.state.reserve_a == 1000 + 40 - 1
        assert r.state.accrued_fee_b == 1

    def test_direction_must_be_enum(self):
        r = step(_funded(), _swap(100, direction="a_to_b"))
        assert not r.accepted
        assert r.error == ErrorCode.INVALID_INPUT
        assert "direction" in r.detail
        with pytest.raises(InvalidInput, match="direction"):
            step_or_raise(_funded(), _swap(100, direction="a_to_b"))

    def test_reserve_never_drained(self):
        s = _funded(reserve_a=1, reserve_b=1000, total_shares=1001, fee_rate_milli=0)
        r = step(s, _swap(U64_MAX - 1))
        assert r.accepted
        assert r.state.reserve_b > 0

    def test_reserve_in_overflow(self):
        s = _funded(reserve_a=U64_MAX - 10, reserve_b=U64_MAX - 10, total_shares=1000)
        r = step(s, _swap(1000))
        assert not r.accepted
        assert r.error == ErrorCode.ARITHMETIC_OVERFLOW

    def test_amount_above_u64_rejected(self):
        r = step(_funded(), _swap(U64_MAX + 1))
        assert not r.accepted
        assert r.error == ErrorCode.ARITHMETIC_OVERFLOW


# ---------------------------------------------------------------------------
# remove_liquidity
# ---------------------------------------------------------------------------

class TestRemoveLiquidity:
    def test_reference_values(self):
        s = _funded(reserve_a=597, reserve_b=419, accrued_fee_b=3)
        r = step(s, ActionParams(action=Action.REMOVE_LIQUIDITY, actor="lp", shares=500))
        assert r.accepted
        assert (r.effect.amount_a, r.effect.amount_b) == (298, 209)
        assert (r.state.reserve_a, r.state.reserve_b, r.state.total_shares) == (299, 210, 500)
        assert r.state.accrued_fee_b == 3
        assert r.effect.event == Event.LIQUIDITY_REMOVED

    def test_burn_all_empties_pool(self):
        r = step(_funded(), ActionParams(action=Action.REMOVE_LIQUIDITY, shares=1000))
        assert r.accepted
        assert (r.state.reserve_a, r.state.reserve_b, r.state.total_shares) == (0, 0, 0)
        assert r.state.initialized

    def test_allowed_while_paused(self):
        r = step(_funded(paused=True), ActionParams(action=Action.REMOVE_LIQUIDITY, shares=10))
        assert r.accepted

    def test_exceeding_supply(self):
        r = step(_funded(), ActionParams(action=Action.REMOVE_LIQUIDITY, shares=1001))
        assert not r.accepted
        assert r.error == ErrorCode.INSUFFICIENT_SHARES

    def test_zero_shares(self):
        r = step(_funded(), ActionParams(action=Action.REMOVE_LIQUIDITY, shares=0))
        assert not r.accepted
        assert r.error == ErrorCode.INVALID_INPUT

    def test_zero_amount_side_has_no_transfer(self):
        s = _funded(reserve_a=1000, reserve_b=3, total_shares=1000)
        r = step(s, ActionParams(action=Action.REMOVE_LIQUIDITY, shares=1))
        assert r.accepted
        assert (r.effect.amount_a, r.effect.amount_b) == (1, 0)
        assert [(t.asset, t.source, t.amount) for t in r.effect.transfers] == [(Asset.A, Party.POOL, 1)]


# ---------------------------------------------------------------------------
# distribute_fees
# ---------------------------------------------------------------------------

class TestDistributeFees:
    def test_pays_out_and_resets(self):
        s = _funded(accrued_fee_a=10, accrued_fee_b=7)
        r = step(s, ActionParams(action=Action.DISTRIBUTE_FEES, authorized=True))
        assert r.accepted
        assert (r.effect.amount_a, r.effect.amount_b) == (10, 7)
        assert (r.state.accrued_fee_a, r.state.accrued_fee_b) == (0, 0)
        assert (r.state.reserve_a, r.state.reserve_b) == (500, 500)
        assert [(t.asset, t.source, t.destination, t.amount) for t in r.effect.transfers] == [
            (Asset.A, Party.FEE_CUSTODY, Party.FEE_RECEIVER, 10),
            (Asset.B, Party.FEE_CUSTODY, Party.FEE_RECEIVER, 7),
        ]

    def test_second_call_reports_zero(self):
        s = _funded(accrued_fee_a=10, accrued_fee_b=7)
        r1 = step(s, ActionParams(action=Action.DISTRIBUTE_FEES, authorized=True))
        r2 = step(r1.state, ActionParams(action=Action.DISTRIBUTE_FEES, authorized=True))
        assert r2.accepted
        assert (r2.effect.amount_a, r2.effect.amount_b) == (0, 0)
        assert r2.effect.transfers == ()

    def test_unauthorized(self):
        r = step(_funded(accrued_fee_a=10), ActionParams(action=Action.DISTRIBUTE_FEES))
        assert not r.accepted
        assert r.error == ErrorCode.UNAUTHORIZED

    def test_allowed_while_paused(self):
        s = _funded(paused=True, accrued_fee_b=4)
        r = step(s, ActionParams(action=Action.DISTRIBUTE_FEES, authorized=True))
        assert r.accepted


# ---------------------------------------------------------------------------
# set_paused / set_fee_rate
# ---------------------------------------------------------------------------

class TestSetPaused:
    def test_pause_and_resume(self):
        r = step(_funded(), ActionParams(action=Action.SET_PAUSED, paused=True, authorized=True))
        assert r.accepted and r.state.paused
        assert r.effect.event == Event.PAUSE_CHANGED
        assert r.effect.paused is True
        r2 = step(r.state, ActionParams(action=Action.SET_PAUSED, paused=False, authorized=True))
        assert r2.accepted and not r2.state.paused

    def test_idempotent(self):
        r = step(_funded(paused=True), ActionParams(action=Action.SET_PAUSED, paused=True, authorized=True))
        assert r.accepted and r.state.paused

    def test_unauthorized(self):
        r = step(_funded(), ActionParams(action=Action.SET_PAUSED, paused=True))
        assert not r.accepted
        assert r.error == ErrorCode.UNAUTHORIZED


class TestSetFeeRate:
    def test_changes_rate(self):
        r = step(_funded(), ActionParams(action=Action.SET_FEE_RATE, fee_rate_milli=5, authorized=True))
        assert r.accepted
        assert r.state.fee_rate_milli == 5
        assert r.effect.event == Event.FEE_RATE_CHANGED
        assert (r.effect.previous_fee_rate_milli, r.effect.fee_rate_milli) == (30, 5)

    def test_out_of_range(self):
        r = step(_funded(), ActionParams(action=Action.SET_FEE_RATE, fee_rate_milli=1000, authorized=True))
        assert not r.accepted
        assert r.error == ErrorCode.INVALID_INPUT

    def test_unauthorized(self):
        r = step(_funded(), ActionParams(action=Action.SET_FEE_RATE, fee_rate_milli=5))
        assert not r.accepted
        assert r.error == ErrorCode.UNAUTHORIZED


# ---------------------------------------------------------------------------
# Lifecycle + step_or_raise
# ---------------------------------------------------------------------------

class TestLifecycle:
    def test_reference_scenario(self):
        s = initial_state()
        s = step_or_raise(s, ActionParams(action=Action.INITIALIZE, fee_rate_milli=30)).state
        s = step_or_raise(s, ActionParams(action=Action.ADD_LIQUIDITY, amount_a=500, amount_b=500)).state
        assert (s.reserve_a, s.reserve_b, s.total_shares) == (500, 500, 1000)

        r = step_or_raise(s, _swap(100))
        assert (r.effect.amount_out, r.effect.fee_amount) == (81, 3)
        s = r.state
        assert (s.reserve_a, s.reserve_b, s.accrued_fee_b) == (597, 419, 3)

        r = step_or_raise(s, ActionParams(action=Action.REMOVE_LIQUIDITY, shares=500))
        assert (r.effect.amount_a, r.effect.amount_b) == (298, 209)
        assert (r.state.reserve_a, r.state.reserve_b, r.state.total_shares) == (299, 210, 500)

    def test_rejection_does_not_touch_input(self):
        s = _funded()
        r = step(s, _swap(100, minimum_out=10_000))
        assert not r.accepted
        assert s == _funded()


class TestStepOrRaise:
    def test_paused(self):
        with pytest.raises(ContractPaused):
            step_or_raise(_funded(paused=True), _swap(100))

    def test_slippage(self):
        with pytest.raises(SlippageExceeded):
            step_or_raise(_funded(), _swap(100, minimum_out=1000))

    def test_insufficient_shares_is_invalid_input(self):
        with pytest.raises(InsufficientShares) as excinfo:
            step_or_raise(_funded(), ActionParams(action=Action.REMOVE_LIQUIDITY, shares=5000))
        assert isinstance(excinfo.value, InvalidInput)
        assert excinfo.value.code == ErrorCode.INSUFFICIENT_SHARES

    def test_unauthorized(self):
        with pytest.raises(Unauthorized):
            step_or_raise(_funded(), ActionParams(action=Action.SET_PAUSED, paused=True))

    def test_invariant_violation(self):
        # A corrupted pre-state is carried into the post-state and caught there.
        s = _funded(fee_rate_milli=1000)
        r = step(s, ActionParams(action=Action.SET_PAUSED, paused=True, authorized=True))
        assert not r.accepted
        assert r.error == ErrorCode.INVARIANT_VIOLATION
        assert "inv_fee_rate_bounded" in r.detail
        with pytest.raises(PoolInvariantError) as excinfo:
            step_or_raise(s, ActionParams(action=Action.SET_PAUSED, paused=True, authorized=True))
        assert excinfo.value.violations == ["inv_fee_rate_bounded"]

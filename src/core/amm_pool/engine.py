"""Dispatch-table engine for `amm_pool`.

``step(state, params)`` is the single entry point. It:

1. Validates parameter domains (unsigned 64-bit amounts).
2. Dispatches to the correct guard / update / effect functions.
3. Checks all invariants on the post-state.
4. Returns a ``StepResult`` (accepted or rejected with an ``ErrorCode``).

The engine is pure: it never mutates its input and never talks to a ledger.
Moving assets according to ``Effect.transfers`` is the caller's job, and the
caller must only persist ``StepResult.state`` once those transfers succeeded.
"""

from __future__ import annotations

from typing import Callable

from .effects import (
    effect_add_liquidity,
    effect_distribute_fees,
    effect_initialize,
    effect_remove_liquidity,
    effect_set_fee_rate,
    effect_set_paused,
    effect_swap,
)
from .errors import ERROR_TYPES, ErrorCode, InvalidInput, PoolError, PoolInvariantError
from .guards import (
    guard_add_liquidity,
    guard_distribute_fees,
    guard_initialize,
    guard_remove_liquidity,
    guard_set_fee_rate,
    guard_set_paused,
    guard_swap,
)
from .invariants import check_all
from .math import require_u64
from .types import Action, ActionParams, Direction, Effect, PoolState, StepResult
from .updates import (
    apply_add_liquidity,
    apply_distribute_fees,
    apply_initialize,
    apply_remove_liquidity,
    apply_set_fee_rate,
    apply_set_paused,
    apply_swap,
)

GuardFn = Callable[[PoolState, ActionParams], None]
UpdateFn = Callable[[PoolState, ActionParams], PoolState]
EffectFn = Callable[[PoolState, PoolState, ActionParams], Effect]

_DISPATCH: dict[Action, tuple[GuardFn, UpdateFn, EffectFn]] = {
    Action.INITIALIZE: (
        guard_initialize, apply_initialize, effect_initialize,
    ),
    Action.ADD_LIQUIDITY: (
        guard_add_liquidity, apply_add_liquidity, effect_add_liquidity,
    ),
    Action.SWAP: (
        guard_swap, apply_swap, effect_swap,
    ),
    Action.REMOVE_LIQUIDITY: (
        guard_remove_liquidity, apply_remove_liquidity, effect_remove_liquidity,
    ),
    Action.DISTRIBUTE_FEES: (
        guard_distribute_fees, apply_distribute_fees, effect_distribute_fees,
    ),
    Action.SET_PAUSED: (
        guard_set_paused, apply_set_paused, effect_set_paused,
    ),
    Action.SET_FEE_RATE: (
        guard_set_fee_rate, apply_set_fee_rate, effect_set_fee_rate,
    ),
}

# Per-action unsigned 64-bit parameters.
_U64_PARAMS: dict[Action, tuple[str, ...]] = {
    Action.INITIALIZE: ("fee_rate_milli",),
    Action.ADD_LIQUIDITY: ("amount_a", "amount_b"),
    Action.SWAP: ("amount_in", "minimum_out"),
    Action.REMOVE_LIQUIDITY: ("shares",),
    Action.DISTRIBUTE_FEES: (),
    Action.SET_PAUSED: (),
    Action.SET_FEE_RATE: ("fee_rate_milli",),
}


def _validate_params(params: ActionParams) -> None:
    for field in _U64_PARAMS.get(params.action, ()):
        require_u64(field, getattr(params, field))
    if params.action is Action.SWAP and not isinstance(params.direction, Direction):
        raise InvalidInput(f"direction must be a Direction, got {params.direction!r}")


def step(state: PoolState, params: ActionParams) -> StepResult:
    """Execute one action against the given state.

    Returns ``StepResult`` with ``accepted=True`` on success,
    or ``accepted=False`` with an ``error`` code and ``detail``.
    """
    entry = _DISPATCH.get(params.action)
    if entry is None:
        return StepResult(
            accepted=False,
            error=ErrorCode.INVALID_INPUT,
            detail=f"unknown_action:{params.action}",
        )

    guard_fn, update_fn, effect_fn = entry

    try:
        _validate_params(params)
        guard_fn(state, params)
        new_state = update_fn(state, params)
    except PoolError as exc:
        return StepResult(accepted=False, error=exc.code, detail=str(exc))

    violations = check_all(new_state)
    if violations:
        return StepResult(
            accepted=False,
            error=ErrorCode.INVARIANT_VIOLATION,
            detail=",".join(violations),
        )

    effect = effect_fn(state, new_state, params)
    return StepResult(accepted=True, state=new_state, effect=effect)


def step_or_raise(state: PoolState, params: ActionParams) -> StepResult:
    """Like ``step()`` but raises on rejection instead of returning a result.

    Raises:
        PoolInvariantError: Post-state violates one or more invariants.
        PoolError: The subclass matching ``StepResult.error`` for any other rejection.
    """
    result = step(state, params)
    if result.accepted:
        return result

    code = result.error or ErrorCode.INVALID_INPUT
    detail = result.detail or code.value
    if code is ErrorCode.INVARIANT_VIOLATION:
        raise PoolInvariantError(detail.split(","))
    raise ERROR_TYPES[code](detail)

"""Invariant checkers for `amm_pool`.

Each function returns True when the invariant holds, and `check_all()` returns
the list of violated invariant IDs (empty = all pass).
"""

from __future__ import annotations

from typing import Callable

from .math import MAX_FEE_RATE_MILLI, U64_MAX
from .types import PoolState

_NUMERIC_FIELDS: tuple[str, ...] = (
    "reserve_a",
    "reserve_b",
    "fee_rate_milli",
    "total_shares",
    "accrued_fee_a",
    "accrued_fee_b",
)


def inv_fields_in_u64_range(s: PoolState) -> bool:
    return all(0 <= getattr(s, name) <= U64_MAX for name in _NUMERIC_FIELDS)


def inv_fee_rate_bounded(s: PoolState) -> bool:
    return s.fee_rate_milli <= MAX_FEE_RATE_MILLI


def inv_empty_or_funded(s: PoolState) -> bool:
    empty_a = s.reserve_a == 0
    empty_b = s.reserve_b == 0
    no_shares = s.total_shares == 0
    return empty_a == empty_b and empty_b == no_shares


def inv_shares_backed(s: PoolState) -> bool:
    if s.total_shares == 0:
        return True
    return s.reserve_a > 0 and s.reserve_b > 0


def inv_uninitialized_zeroed(s: PoolState) -> bool:
    if s.initialized:
        return True
    return not s.paused and all(getattr(s, name) == 0 for name in _NUMERIC_FIELDS)


# ---------------------------------------------------------------------------
# Registry + check_all
# ---------------------------------------------------------------------------

INVARIANT_REGISTRY: dict[str, Callable[[PoolState], bool]] = {
    "inv_fields_in_u64_range": inv_fields_in_u64_range,
    "inv_fee_rate_bounded": inv_fee_rate_bounded,
    "inv_empty_or_funded": inv_empty_or_funded,
    "inv_shares_backed": inv_shares_backed,
    "inv_uninitialized_zeroed": inv_uninitialized_zeroed,
}


def check_all(state: PoolState) -> list[str]:
    """Return list of violated invariant IDs (empty = all pass)."""
    return [
        inv_id
        for inv_id, check_fn in INVARIANT_REGISTRY.items()
        if not check_fn(state)
    ]

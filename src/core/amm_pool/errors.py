"""Exception types for the amm_pool engine.

Used by ``step_or_raise()`` in ``engine.py`` for callers
that prefer exceptions over ``StepResult`` inspection, and raised directly by
the pure pricing helpers in ``math.py``.
"""

from __future__ import annotations

from enum import Enum, unique


@unique
class ErrorCode(Enum):
    """Rejection reasons reported in ``StepResult.error``."""
    INVALID_INPUT = "invalid_input"
    CONTRACT_PAUSED = "contract_paused"
    SLIPPAGE_EXCEEDED = "slippage_exceeded"
    DIVISION_BY_ZERO = "division_by_zero"
    INSUFFICIENT_SHARES = "insufficient_shares"
    UNAUTHORIZED = "unauthorized"
    NOT_INITIALIZED = "not_initialized"
    ALREADY_INITIALIZED = "already_initialized"
    ARITHMETIC_OVERFLOW = "arithmetic_overflow"
    INVARIANT_VIOLATION = "invariant_violation"


class PoolError(ValueError):
    """Base class for every engine rejection."""

    code: ErrorCode = ErrorCode.INVALID_INPUT


class InvalidInput(PoolError):
    """Zero or out-of-range argument."""

    code = ErrorCode.INVALID_INPUT


class ContractPaused(PoolError):
    """Swap attempted while the pool is paused."""

    code = ErrorCode.CONTRACT_PAUSED


class SlippageExceeded(PoolError):
    """Computed output is below the caller's floor."""

    code = ErrorCode.SLIPPAGE_EXCEEDED


class DivisionByZero(PoolError):
    """Pricing or share math attempted against an empty reserve."""

    code = ErrorCode.DIVISION_BY_ZERO


class InsufficientShares(InvalidInput):
    """Burn exceeds the outstanding share supply."""

    code = ErrorCode.INSUFFICIENT_SHARES


class NotInitialized(InvalidInput):
    code = ErrorCode.NOT_INITIALIZED


class AlreadyInitialized(InvalidInput):
    code = ErrorCode.ALREADY_INITIALIZED


class ArithmeticOverflow(InvalidInput):
    """A 64-bit field would leave [0, 2**64 - 1]."""

    code = ErrorCode.ARITHMETIC_OVERFLOW


class Unauthorized(PoolError):
    """Admin operation invoked without the caller's authorization flag."""

    code = ErrorCode.UNAUTHORIZED


class PoolInvariantError(PoolError):
    """Raised when a post-state violates one or more invariants."""

    code = ErrorCode.INVARIANT_VIOLATION

    def __init__(self, violations: list[str]) -> None:
        self.violations = violations
        super().__init__(f"invariant violations: {', '.join(violations)}")


ERROR_TYPES: dict[ErrorCode, type[PoolError]] = {
    cls.code: cls
    for cls in (
        InvalidInput,
        ContractPaused,
        SlippageExceeded,
        DivisionByZero,
        InsufficientShares,
        NotInitialized,
        AlreadyInitialized,
        ArithmeticOverflow,
        Unauthorized,
        PoolInvariantError,
    )
}

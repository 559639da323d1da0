"""
Core pool algorithms
"""

from .amm_pool import (
    ActionParams,
    PoolState,
    StepResult,
    initial_state,
    quote_swap,
    step,
    step_or_raise,
)

__all__ = [
    "ActionParams",
    "PoolState",
    "StepResult",
    "initial_state",
    "quote_swap",
    "step",
    "step_or_raise",
]

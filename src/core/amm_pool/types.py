"""Data types for the `amm_pool` engine.

All types are frozen dataclasses (immutable).

Units/conventions:
- every amount, reserve and share count is an unsigned 64-bit integer,
- `fee_rate_milli` is parts-per-thousand (30 = 0.3%),
- `accrued_fee_*` is denominated in the asset named by its suffix.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, unique

from .errors import ErrorCode


@unique
class Action(Enum):
    INITIALIZE = "initialize"
    ADD_LIQUIDITY = "add_liquidity"
    SWAP = "swap"
    REMOVE_LIQUIDITY = "remove_liquidity"
    DISTRIBUTE_FEES = "distribute_fees"
    SET_PAUSED = "set_paused"
    SET_FEE_RATE = "set_fee_rate"


@unique
class Event(Enum):
    POOL_INITIALIZED = "PoolInitialized"
    LIQUIDITY_ADDED = "LiquidityAdded"
    SWAPPED = "Swapped"
    LIQUIDITY_REMOVED = "LiquidityRemoved"
    FEES_DISTRIBUTED = "FeesDistributed"
    PAUSE_CHANGED = "PauseChanged"
    FEE_RATE_CHANGED = "FeeRateChanged"


@unique
class Asset(Enum):
    A = "A"
    B = "B"


@unique
class Direction(Enum):
    A_TO_B = "a_to_b"
    B_TO_A = "b_to_a"

    @property
    def asset_in(self) -> Asset:
        return Asset.A if self is Direction.A_TO_B else Asset.B

    @property
    def asset_out(self) -> Asset:
        return Asset.B if self is Direction.A_TO_B else Asset.A


@unique
class Party(Enum):
    """Symbolic transfer endpoints, resolved to ledger accounts by the caller."""
    ACTOR = "actor"                # depositor / trader / withdrawer
    POOL = "pool"                  # reserve custody
    FEE_CUSTODY = "fee_custody"
    FEE_RECEIVER = "fee_receiver"


@dataclass(frozen=True)
class PoolState:
    """Complete state of one two-asset pool."""

    reserve_a: int = 0
    reserve_b: int = 0
    fee_rate_milli: int = 0
    total_shares: int = 0
    accrued_fee_a: int = 0
    accrued_fee_b: int = 0
    paused: bool = False
    initialized: bool = False

    def reserves_for(self, direction: Direction) -> tuple[int, int]:
        """``(reserve_in, reserve_out)`` for a trade in ``direction``."""
        if direction is Direction.A_TO_B:
            return self.reserve_a, self.reserve_b
        return self.reserve_b, self.reserve_a


@dataclass(frozen=True)
class ActionParams:
    """Parameters for an action. Unused fields default to 0/False."""

    action: Action
    actor: str = ""                            # identity reported in the record
    amount_a: int = 0                          # add_liquidity
    amount_b: int = 0                          # add_liquidity
    amount_in: int = 0                         # swap
    direction: Direction = Direction.A_TO_B    # swap
    minimum_out: int = 0                       # swap
    shares: int = 0                            # remove_liquidity
    fee_rate_milli: int = 0                    # initialize / set_fee_rate
    paused: bool = False                       # set_paused
    inbound_transfer: bool = True              # swap: request amount_in from the trader
    authorized: bool = False                   # distribute_fees / set_paused / set_fee_rate


@dataclass(frozen=True)
class TransferInstruction:
    """One quantity the ledger must move for a transition to be valid."""

    asset: Asset
    source: Party
    destination: Party
    amount: int


@dataclass(frozen=True)
class Effect:
    """Record of a successful step: what to report and what the ledger must move."""

    event: Event
    actor: str = ""
    amount_a: int = 0
    amount_b: int = 0
    shares: int = 0
    amount_in: int = 0
    amount_out: int = 0
    fee_amount: int = 0
    direction: Direction | None = None
    paused: bool | None = None
    fee_rate_milli: int | None = None
    previous_fee_rate_milli: int | None = None
    transfers: tuple[TransferInstruction, ...] = ()


@dataclass(frozen=True)
class StepResult:
    """Result of a single engine step."""

    accepted: bool
    state: PoolState | None = None
    effect: Effect | None = None
    error: ErrorCode | None = None
    detail: str | None = None

"""
Pool service: imperative shell around the `amm_pool` functional core.

Each public method performs one atomic operation:
- derive the caller's authorization (privileged operations only),
- run one engine step (`step_or_raise`),
- resolve the effect's symbolic transfers into ledger accounts and execute them
  as a single all-or-nothing batch,
- commit the post-state, then emit the event record.

Engine rejections (`PoolError`) and ledger failures (`LedgerError`) propagate
to the caller; in both cases the pool state is left exactly as it was.
Operations on one service are serialized by a lock.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Any, Dict, Optional, Union

from ..core.amm_pool import (
    Action,
    ActionParams,
    Asset,
    Direction,
    Effect,
    InvalidInput,
    Party,
    PoolError,
    PoolState,
    TransferInstruction,
    initial_state,
    quote_swap,
    spot_price_milli,
    step_or_raise,
)
from .access import Authorizer, Role, StaticAuthorizer
from .config import PoolServiceConfig
from .events import EventSink, NullEventSink, effect_to_record
from .ledger import Ledger, LedgerError, Transfer
from .pool_snapshot import PoolSnapshot, snapshot_from_state

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OperationReceipt:
    effect: Effect
    record: Dict[str, Any]
    transfers: tuple[Transfer, ...]
    state: PoolState


class PoolService:
    def __init__(
        self,
        ledger: Ledger,
        config: Optional[PoolServiceConfig] = None,
        *,
        authorizer: Optional[Authorizer] = None,
        event_sink: Optional[EventSink] = None,
        state: Optional[PoolState] = None,
    ):
        self._config = config if config is not None else PoolServiceConfig()
        self._ledger = ledger
        if authorizer is None:
            authorizer = StaticAuthorizer.from_sets(
                admins=self._config.admin_signers,
                fee_collectors=self._config.fee_collector_signers,
            )
        self._authorizer = authorizer
        self._event_sink = event_sink if event_sink is not None else NullEventSink()
        self._state = state if state is not None else initial_state()
        self._lock = threading.Lock()

    @property
    def config(self) -> PoolServiceConfig:
        return self._config

    @property
    def state(self) -> PoolState:
        return self._state

    # -- Operations ----------------------------------------------------------

    def initialize(self, caller: str = "", fee_rate_milli: Optional[int] = None) -> OperationReceipt:
        rate = self._config.fee_rate_milli if fee_rate_milli is None else fee_rate_milli
        return self._execute(ActionParams(action=Action.INITIALIZE, actor=caller, fee_rate_milli=rate))

    def add_liquidity(self, caller: str, amount_a: int, amount_b: int) -> OperationReceipt:
        _require_caller(caller)
        return self._execute(
            ActionParams(action=Action.ADD_LIQUIDITY, actor=caller, amount_a=amount_a, amount_b=amount_b)
        )

    def swap(
        self,
        caller: str,
        amount_in: int,
        direction: Union[Direction, str],
        minimum_out: int = 0,
    ) -> OperationReceipt:
        _require_caller(caller)
        return self._execute(
            ActionParams(
                action=Action.SWAP,
                actor=caller,
                amount_in=amount_in,
                direction=_parse_direction(direction),
                minimum_out=minimum_out,
                inbound_transfer=self._config.swap_inbound_transfer,
            )
        )

    def remove_liquidity(self, caller: str, shares: int) -> OperationReceipt:
        _require_caller(caller)
        return self._execute(ActionParams(action=Action.REMOVE_LIQUIDITY, actor=caller, shares=shares))

    def distribute_fees(self, caller: str) -> OperationReceipt:
        return self._execute(
            ActionParams(
                action=Action.DISTRIBUTE_FEES,
                actor=caller,
                authorized=self._is_authorized(caller, Role.FEE_COLLECTOR),
            )
        )

    def set_paused(self, caller: str, paused: bool) -> OperationReceipt:
        return self._execute(
            ActionParams(
                action=Action.SET_PAUSED,
                actor=caller,
                paused=bool(paused),
                authorized=self._is_authorized(caller, Role.ADMIN),
            )
        )

    def set_fee_rate(self, caller: str, fee_rate_milli: int) -> OperationReceipt:
        return self._execute(
            ActionParams(
                action=Action.SET_FEE_RATE,
                actor=caller,
                fee_rate_milli=fee_rate_milli,
                authorized=self._is_authorized(caller, Role.ADMIN),
            )
        )

    # -- Read-only -------------------------------------------------------------

    def quote(self, amount_in: int, direction: Union[Direction, str]) -> tuple[int, int]:
        """``(amount_out, fee_amount)`` a swap would produce against the current state."""
        state = self._state
        reserve_in, reserve_out = state.reserves_for(_parse_direction(direction))
        return quote_swap(amount_in, reserve_in, reserve_out, state.fee_rate_milli)

    def spot_price_milli(self, direction: Union[Direction, str]) -> int:
        """Output per 1000 units of input at the current reserves, before fees."""
        reserve_in, reserve_out = self._state.reserves_for(_parse_direction(direction))
        return spot_price_milli(reserve_in, reserve_out)

    def snapshot(self) -> PoolSnapshot:
        return snapshot_from_state(self._state, pool_id=self._config.pool_id)

    # -- Internals -------------------------------------------------------------

    def _is_authorized(self, caller: str, role: Role) -> bool:
        return bool(caller) and self._authorizer.is_authorized_signer(caller, role)

    def _account(self, party: Party, actor: str) -> str:
        if party is Party.ACTOR:
            return actor
        if party is Party.POOL:
            return self._config.pool_account
        if party is Party.FEE_CUSTODY:
            return self._config.fee_custody_account
        return self._config.fee_receiver_account

    def _asset(self, asset: Asset) -> str:
        return self._config.asset_a if asset is Asset.A else self._config.asset_b

    def _to_ledger(self, instruction: TransferInstruction, actor: str) -> Transfer:
        return Transfer(
            asset=self._asset(instruction.asset),
            source=self._account(instruction.source, actor),
            destination=self._account(instruction.destination, actor),
            amount=instruction.amount,
        )

    def _execute(self, params: ActionParams) -> OperationReceipt:
        pool_id = self._config.pool_id
        with self._lock:
            try:
                result = step_or_raise(self._state, params)
            except PoolError as exc:
                logger.info("pool %s rejected %s from %r: %s", pool_id, params.action.value, params.actor, exc)
                raise

            effect = result.effect
            new_state = result.state
            assert effect is not None and new_state is not None

            transfers = tuple(self._to_ledger(t, params.actor) for t in effect.transfers)
            if transfers:
                try:
                    self._ledger.transfer_batch(transfers)
                except LedgerError as exc:
                    logger.warning(
                        "pool %s %s from %r aborted by ledger: %s",
                        pool_id, params.action.value, params.actor, exc,
                    )
                    raise

            self._state = new_state

        record = effect_to_record(effect, pool_id=pool_id)
        self._emit(record)
        logger.debug("pool %s applied %s: %s", pool_id, params.action.value, record)
        return OperationReceipt(effect=effect, record=record, transfers=transfers, state=new_state)

    def _emit(self, record: Dict[str, Any]) -> None:
        try:
            self._event_sink.emit(record)
        except Exception:
            # Delivery is best effort; the transition is already committed.
            logger.exception("event sink failed for pool %s record %s", self._config.pool_id, record["event"])


def _require_caller(caller: str) -> None:
    if not isinstance(caller, str) or not caller:
        raise InvalidInput("caller must be a non-empty account id")


def _parse_direction(direction: Union[Direction, str]) -> Direction:
    if isinstance(direction, Direction):
        return direction
    try:
        return Direction(str(direction).strip().lower())
    except ValueError as exc:
        raise InvalidInput(f"unknown swap direction: {direction!r}") from exc

"""
Custody ledger boundary for the pool service.

The pool engine only *instructs* transfers; a `Ledger` executes them. The
service shell relies on `transfer_batch` being all-or-nothing so that pool
state is committed only when every instructed transfer went through.

`InMemoryLedger` is the reference implementation used by tests and the demo
tool: an opened-account registry over a `BalanceTable`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Protocol, Sequence, Set

from ..state.balances import AccountId, Amount, AssetId, BalanceTable


class LedgerError(Exception):
    """Base class for transfer failures reported by a ledger."""


class InsufficientFunds(LedgerError):
    def __init__(self, account: AccountId, asset: AssetId, available: Amount, requested: Amount) -> None:
        self.account = account
        self.asset = asset
        self.available = available
        self.requested = requested
        super().__init__(
            f"insufficient funds in {account!r} for {asset!r}: {available} < {requested}"
        )


class AccountError(LedgerError):
    """Unknown account or malformed transfer request."""


@dataclass(frozen=True)
class Transfer:
    """A transfer between concrete ledger accounts."""

    asset: AssetId
    source: AccountId
    destination: AccountId
    amount: Amount


class Ledger(Protocol):
    def transfer(self, asset: AssetId, source: AccountId, destination: AccountId, amount: Amount) -> None:
        ...

    def transfer_batch(self, transfers: Sequence[Transfer]) -> None:
        """Apply every transfer or none of them."""
        ...


def _apply_transfer(balances: BalanceTable, accounts: Set[AccountId], transfer: Transfer) -> None:
    amount = transfer.amount
    if not isinstance(amount, int) or isinstance(amount, bool) or amount < 0:
        raise AccountError(f"transfer amount must be a non-negative int: {amount!r}")
    for account in (transfer.source, transfer.destination):
        if account not in accounts:
            raise AccountError(f"unknown account: {account!r}")
    if amount == 0 or transfer.source == transfer.destination:
        return
    available = balances.get(transfer.source, transfer.asset)
    if available < amount:
        raise InsufficientFunds(transfer.source, transfer.asset, available, amount)
    balances.subtract(transfer.source, transfer.asset, amount)
    balances.add(transfer.destination, transfer.asset, amount)


class InMemoryLedger:
    """
    Reference custody ledger.

    Accounts must be opened before they can send or receive. Balances never go
    negative; a failing batch leaves every balance untouched.
    """

    def __init__(self, accounts: Iterable[AccountId] = ()):
        self._accounts: Set[AccountId] = set()
        self._balances = BalanceTable()
        for account in accounts:
            self.open_account(account)

    def open_account(self, account: AccountId) -> None:
        if not isinstance(account, str) or not account:
            raise AccountError("account must be a non-empty string")
        self._accounts.add(account)

    def has_account(self, account: AccountId) -> bool:
        return account in self._accounts

    def deposit(self, account: AccountId, asset: AssetId, amount: Amount) -> None:
        """Credit ``amount`` out of thin air (funding for tests and demos)."""
        if account not in self._accounts:
            raise AccountError(f"unknown account: {account!r}")
        if amount < 0:
            raise AccountError(f"deposit amount must be non-negative: {amount}")
        self._balances.add(account, asset, amount)

    def balance(self, account: AccountId, asset: AssetId) -> Amount:
        return self._balances.get(account, asset)

    def balances(self) -> BalanceTable:
        return self._balances.copy()

    def total_supply(self, asset: AssetId) -> Amount:
        """Units of ``asset`` held across every account; transfers never change it."""
        return self._balances.total_supply(asset)

    def transfer(self, asset: AssetId, source: AccountId, destination: AccountId, amount: Amount) -> None:
        self.transfer_batch([Transfer(asset=asset, source=source, destination=destination, amount=amount)])

    def transfer_batch(self, transfers: Sequence[Transfer]) -> None:
        staged = self._balances.copy()
        for transfer in transfers:
            _apply_transfer(staged, self._accounts, transfer)
        self._balances = staged

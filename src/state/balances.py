"""
Per-account asset balances for the reference custody ledger.

Implements BalanceTable[AccountId, AssetId] -> Amount
"""

from typing import Dict, Tuple


# Type aliases
AccountId = str  # ledger account name, e.g. "amm:pool" or a signer id
AssetId = str  # asset identifier as configured for the pool
Amount = int  # Non-negative integer (arbitrary precision)


class BalanceTable:
    """
    Balance table mapping (account, asset) -> amount.

    Zero balances are not stored. Do not rely on dict iteration order; callers
    that serialize or hash balances sort the keys themselves.
    """

    def __init__(self):
        """Initialize empty balance table."""
        self._balances: Dict[Tuple[AccountId, AssetId], Amount] = {}

    def get(self, account: AccountId, asset: AssetId) -> Amount:
        """Get balance for (account, asset). Returns 0 if not found."""
        return self._balances.get((account, asset), 0)

    def set(self, account: AccountId, asset: AssetId, amount: Amount) -> None:
        """
        Set balance for (account, asset).

        Raises:
            ValueError: If amount is negative
        """
        if amount < 0:
            raise ValueError(f"Balance cannot be negative: {amount}")
        if amount == 0:
            self._balances.pop((account, asset), None)
        else:
            self._balances[(account, asset)] = amount

    def add(self, account: AccountId, asset: AssetId, delta: Amount) -> None:
        """
        Add delta to balance. Equivalent to set(account, asset, get(...) + delta).

        Args:
            account: Ledger account
            asset: Asset identifier
            delta: Amount to add (can be negative for subtraction)

        Raises:
            ValueError: If resulting balance would be negative
        """
        current = self.get(account, asset)
        new_balance = current + delta
        if new_balance < 0:
            raise ValueError(
                f"Insufficient balance: {current} + {delta} = {new_balance} < 0"
            )
        self.set(account, asset, new_balance)

    def subtract(self, account: AccountId, asset: AssetId, delta: Amount) -> None:
        """
        Subtract delta from balance. Equivalent to add(account, asset, -delta).

        Raises:
            ValueError: If delta is negative or insufficient balance
        """
        if delta < 0:
            raise ValueError(f"Delta must be non-negative: {delta}")
        self.add(account, asset, -delta)

    def copy(self) -> "BalanceTable":
        """Independent copy, used to stage a batch of transfers."""
        copied = BalanceTable()
        copied._balances = dict(self._balances)
        return copied

    def total_supply(self, asset: AssetId) -> Amount:
        """Sum of every account's balance of ``asset``."""
        return sum(amount for (_, a), amount in self._balances.items() if a == asset)

    def __repr__(self) -> str:
        return f"BalanceTable({len(self._balances)} entries)"

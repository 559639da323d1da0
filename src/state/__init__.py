"""
State containers shared by the pool engine's collaborators
"""

from .balances import BalanceTable
from .canonical import canonical_json_bytes, commitment

__all__ = [
    "BalanceTable",
    "canonical_json_bytes",
    "commitment",
]

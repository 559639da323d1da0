"""
Service shell and reference collaborators for the pool engine
"""

from .access import Role, StaticAuthorizer
from .config import PoolServiceConfig, config_from_env, load_config
from .events import RecordingEventSink, effect_to_record
from .ledger import AccountError, InMemoryLedger, InsufficientFunds, LedgerError, Transfer
from .pool_service import OperationReceipt, PoolService
from .pool_snapshot import PoolSnapshot, snapshot_from_state, state_from_snapshot

__all__ = [
    "Role",
    "StaticAuthorizer",
    "PoolServiceConfig",
    "config_from_env",
    "load_config",
    "RecordingEventSink",
    "effect_to_record",
    "AccountError",
    "InMemoryLedger",
    "InsufficientFunds",
    "LedgerError",
    "Transfer",
    "OperationReceipt",
    "PoolService",
    "PoolSnapshot",
    "snapshot_from_state",
    "state_from_snapshot",
]

"""
Pool state snapshot encoding.

Goals:
- Deterministic JSON serialization for hashing / durable storage.
- Exact round-trip into the engine's `PoolState`.
- Explicit versioning.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping

from ..core.amm_pool.invariants import check_all
from ..core.amm_pool.math import U64_MAX
from ..core.amm_pool.state import STATE_VAR_NAMES, state_from_dict, state_to_dict
from ..core.amm_pool.types import PoolState
from ..state.canonical import canonical_json_bytes, commitment, to_hex


POOL_SNAPSHOT_VERSION = 1

_BOOL_VARS = frozenset({"paused", "initialized"})


def _require_int(value: Any, *, name: str) -> int:
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"{name} must be an int")
    if value < 0 or value > U64_MAX:
        raise ValueError(f"{name} out of 64-bit range: {value}")
    return int(value)


@dataclass(frozen=True)
class PoolSnapshot:
    """
    Deterministic, versioned snapshot of `PoolState`.

    The commitment is *not* included inside `data` to avoid self-reference.
    """

    version: int
    data: Dict[str, Any]

    def canonical_bytes(self) -> bytes:
        return canonical_json_bytes(self.data)

    def commitment_bytes(self) -> bytes:
        return commitment("pool_snapshot", self.version, self.canonical_bytes())

    def commitment_hex(self) -> str:
        return to_hex(self.commitment_bytes())


def snapshot_from_state(state: PoolState, *, pool_id: str = "", version: int = POOL_SNAPSHOT_VERSION) -> PoolSnapshot:
    if not isinstance(version, int) or isinstance(version, bool) or version <= 0:
        raise ValueError("version must be a positive int")
    data: Dict[str, Any] = {
        "version": int(version),
        "pool_id": pool_id,
        "pool": state_to_dict(state),
    }
    return PoolSnapshot(version=version, data=data)


def state_from_snapshot(snapshot: Mapping[str, Any]) -> PoolState:
    if not isinstance(snapshot, Mapping):
        raise TypeError("snapshot must be a mapping")

    version = snapshot.get("version", POOL_SNAPSHOT_VERSION)
    if not isinstance(version, int) or isinstance(version, bool) or version <= 0:
        raise ValueError("snapshot.version must be a positive int")
    if version != POOL_SNAPSHOT_VERSION:
        raise ValueError(f"unsupported snapshot version: {version}")

    pool = snapshot.get("pool")
    if not isinstance(pool, Mapping):
        raise TypeError("snapshot.pool must be an object")
    missing = [name for name in STATE_VAR_NAMES if name not in pool]
    if missing:
        raise ValueError(f"snapshot.pool missing fields: {', '.join(missing)}")
    extra = sorted(set(pool) - set(STATE_VAR_NAMES))
    if extra:
        raise ValueError(f"snapshot.pool has unknown fields: {', '.join(map(str, extra))}")

    for name in STATE_VAR_NAMES:
        if name not in _BOOL_VARS:
            _require_int(pool[name], name=f"pool.{name}")

    state = state_from_dict(pool)
    violations = check_all(state)
    if violations:
        raise ValueError(f"snapshot violates pool invariants: {', '.join(violations)}")
    return state

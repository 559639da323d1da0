"""State construction and serialization for `amm_pool`.

`initial_state()` returns the `Uninitialized` pool.

Round-trip property (tested): `state_from_dict(state_to_dict(s)) == s` for all valid states.
"""

from __future__ import annotations

from typing import Any, Mapping

from .types import PoolState

# Auto-derived from PoolState field definitions (single source of truth).
STATE_VAR_NAMES: tuple[str, ...] = tuple(PoolState.__dataclass_fields__)

_BOOL_VARS = frozenset({"paused", "initialized"})


def initial_state() -> PoolState:
    """Return the canonical uninitialized PoolState (every field zero/False)."""
    return PoolState()


def state_to_dict(state: PoolState) -> dict[str, bool | int]:
    """Serialize a PoolState to a plain dict."""
    return {name: getattr(state, name) for name in STATE_VAR_NAMES}


def state_from_dict(d: Mapping[str, Any]) -> PoolState:
    """Deserialize a dict to a PoolState. Raises KeyError on missing fields."""
    kwargs: dict[str, Any] = {}
    for name in STATE_VAR_NAMES:
        val = d[name]
        if name in _BOOL_VARS:
            if not isinstance(val, bool):
                raise TypeError(f"state var {name!r} must be bool, got {type(val).__name__}")
            kwargs[name] = val
        elif isinstance(val, int) and not isinstance(val, bool):
            kwargs[name] = int(val)  # normalize int subclasses (e.g. numpy)
        else:
            raise TypeError(f"state var {name!r} must be int, got {type(val).__name__}")
    return PoolState(**kwargs)

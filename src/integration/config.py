"""
Runtime configuration for the pool service shell.

A `PoolServiceConfig` can be built directly, from `AMM_POOL_*` environment
variables (`config_from_env`), or from a YAML mapping (`load_config`).
"""

from __future__ import annotations

import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Mapping, Optional

import yaml

from ..core.amm_pool.math import MAX_FEE_RATE_MILLI

ENV_PREFIX = "AMM_POOL_"


@dataclass(frozen=True)
class PoolServiceConfig:
    pool_id: str = "default"

    # Ledger asset ids for the pool's two sides.
    asset_a: str = "A"
    asset_b: str = "B"

    # Ledger accounts the engine's symbolic parties resolve to.
    pool_account: str = "amm:pool"
    fee_custody_account: str = "amm:fees"
    fee_receiver_account: str = "amm:treasury"

    # Used by `PoolService.initialize()` when no rate is passed.
    fee_rate_milli: int = 30

    # Request `amount_in` from the trader on every swap. With this off the
    # trader keeps the input and pool custody drifts from the reserves.
    swap_inbound_transfer: bool = True

    admin_signers: tuple[str, ...] = ()
    fee_collector_signers: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        for name in ("pool_id", "asset_a", "asset_b", "pool_account", "fee_custody_account", "fee_receiver_account"):
            value = getattr(self, name)
            if not isinstance(value, str) or not value.strip():
                raise ValueError(f"{name} must be a non-empty string")
        if self.asset_a == self.asset_b:
            raise ValueError(f"asset_a and asset_b must differ: {self.asset_a!r}")
        if self.pool_account == self.fee_receiver_account:
            raise ValueError("pool_account and fee_receiver_account must differ")
        fee = self.fee_rate_milli
        if not isinstance(fee, int) or isinstance(fee, bool) or not (0 <= fee <= MAX_FEE_RATE_MILLI):
            raise ValueError(f"fee_rate_milli must be an int in [0, {MAX_FEE_RATE_MILLI}]: {fee!r}")
        if not isinstance(self.swap_inbound_transfer, bool):
            raise ValueError("swap_inbound_transfer must be a bool")
        for name in ("admin_signers", "fee_collector_signers"):
            members = getattr(self, name)
            if not isinstance(members, tuple) or not all(isinstance(m, str) and m for m in members):
                raise ValueError(f"{name} must be a tuple of non-empty strings")


_FIELD_NAMES = frozenset(f.name for f in fields(PoolServiceConfig))


def _bool_env(name: str, *, default: bool, environ: Mapping[str, str]) -> bool:
    raw = environ.get(name)
    if raw is None:
        return bool(default)
    v = raw.strip().lower()
    if v in {"1", "true", "yes", "on"}:
        return True
    if v in {"0", "false", "no", "off"}:
        return False
    return bool(default)


def _split_signers(raw: str) -> tuple[str, ...]:
    return tuple(part.strip() for part in raw.split(",") if part.strip())


def config_from_env(environ: Optional[Mapping[str, str]] = None) -> PoolServiceConfig:
    env = os.environ if environ is None else environ
    defaults = PoolServiceConfig()
    kwargs: dict[str, Any] = {}

    for name in ("pool_id", "asset_a", "asset_b", "pool_account", "fee_custody_account", "fee_receiver_account"):
        raw = env.get(ENV_PREFIX + name.upper(), "").strip()
        if raw:
            kwargs[name] = raw

    raw_fee = env.get(ENV_PREFIX + "FEE_RATE_MILLI", "").strip()
    if raw_fee:
        try:
            kwargs["fee_rate_milli"] = int(raw_fee, 10)
        except ValueError as exc:
            raise ValueError(f"{ENV_PREFIX}FEE_RATE_MILLI must be an integer: {raw_fee!r}") from exc

    kwargs["swap_inbound_transfer"] = _bool_env(
        ENV_PREFIX + "SWAP_INBOUND_TRANSFER", default=defaults.swap_inbound_transfer, environ=env,
    )
    kwargs["admin_signers"] = _split_signers(env.get(ENV_PREFIX + "ADMIN_SIGNERS", ""))
    kwargs["fee_collector_signers"] = _split_signers(env.get(ENV_PREFIX + "FEE_COLLECTOR_SIGNERS", ""))
    return PoolServiceConfig(**kwargs)


def config_from_mapping(obj: Mapping[str, Any]) -> PoolServiceConfig:
    if not isinstance(obj, Mapping):
        raise TypeError("config must be a mapping")
    unknown = sorted(set(obj) - _FIELD_NAMES)
    if unknown:
        raise ValueError(f"unknown config keys: {', '.join(map(str, unknown))}")

    kwargs = dict(obj)
    for name in ("admin_signers", "fee_collector_signers"):
        if name in kwargs:
            members = kwargs[name]
            if isinstance(members, str) or not isinstance(members, (list, tuple)):
                raise ValueError(f"{name} must be a list of strings")
            kwargs[name] = tuple(members)
    return PoolServiceConfig(**kwargs)


def load_config(path: Path | str) -> PoolServiceConfig:
    """Load a `PoolServiceConfig` from a YAML file. An empty file yields the defaults."""
    text = Path(path).read_text(encoding="utf-8")
    obj = yaml.safe_load(text)
    if obj is None:
        return PoolServiceConfig()
    if not isinstance(obj, Mapping):
        raise TypeError("config YAML must be a mapping")
    return config_from_mapping(obj)

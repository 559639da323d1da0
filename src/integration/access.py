"""
Authorization boundary for privileged pool operations.

The engine itself trusts an explicit `authorized` flag; the service shell
derives that flag by asking an `Authorizer` whether the caller holds the role
an operation needs.
"""

from __future__ import annotations

from enum import Enum, unique
from typing import AbstractSet, Iterable, Mapping, Protocol


@unique
class Role(Enum):
    ADMIN = "admin"                  # set_paused / set_fee_rate
    FEE_COLLECTOR = "fee_collector"  # distribute_fees


class Authorizer(Protocol):
    def is_authorized_signer(self, caller: str, role: Role) -> bool:
        ...


class StaticAuthorizer:
    """Fixed role -> signer-set mapping. Unknown callers are never authorized."""

    def __init__(self, signers: Mapping[Role, Iterable[str]]):
        self._signers: dict[Role, frozenset[str]] = {
            Role(role): frozenset(members) for role, members in signers.items()
        }

    @classmethod
    def from_sets(cls, *, admins: Iterable[str] = (), fee_collectors: Iterable[str] = ()) -> "StaticAuthorizer":
        return cls({Role.ADMIN: admins, Role.FEE_COLLECTOR: fee_collectors})

    def signers(self, role: Role) -> AbstractSet[str]:
        return self._signers.get(role, frozenset())

    def is_authorized_signer(self, caller: str, role: Role) -> bool:
        return bool(caller) and caller in self.signers(role)


class DenyAll:
    """Authorizer used when none is configured: every privileged call fails."""

    def is_authorized_signer(self, caller: str, role: Role) -> bool:
        return False

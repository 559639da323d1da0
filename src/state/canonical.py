"""
Canonical encoding and commitments for pool snapshots.

Snapshot payloads are flat JSON objects of ints, bools and strings. Equal
payloads must encode to equal bytes, so that persisted copies can be
compared by hash.
"""

from __future__ import annotations

import hashlib
import json
import re
from typing import Any

_LABEL_RE = re.compile(r"[a-z][a-z0-9_]*")


def _check_encodable(value: Any, path: str = "$") -> None:
    if isinstance(value, dict):
        for key, item in value.items():
            if not isinstance(key, str):
                raise TypeError(f"{path}: object keys must be str, got {type(key).__name__}")
            _check_encodable(item, f"{path}.{key}")
        return
    # bool is an int subclass; floats, None and sequences have no place in a snapshot.
    if not isinstance(value, (int, str)):
        raise TypeError(f"{path}: {type(value).__name__} is not allowed in canonical encoding")


def canonical_json_bytes(value: Any) -> bytes:
    """
    Deterministic JSON: sorted keys, no whitespace, ASCII output.

    Non-ASCII text is escaped, so the bytes do not depend on how a caller
    normalizes its strings.
    """
    _check_encodable(value)
    return json.dumps(value, sort_keys=True, separators=(",", ":"), ensure_ascii=True).encode("ascii")


def domain_tag(label: str, version: int) -> bytes:
    """``cpamm:<label>:v<version>`` followed by a NUL byte."""
    if not isinstance(label, str) or not _LABEL_RE.fullmatch(label):
        raise ValueError(f"domain label must match {_LABEL_RE.pattern}: {label!r}")
    if not isinstance(version, int) or isinstance(version, bool) or version <= 0:
        raise ValueError("version must be a positive int")
    return f"cpamm:{label}:v{version}".encode("ascii") + b"\x00"


def commitment(label: str, version: int, payload: bytes) -> bytes:
    """SHA-256 over the domain tag and ``payload``."""
    return hashlib.sha256(domain_tag(label, version) + payload).digest()


def to_hex(digest: bytes) -> str:
    return "0x" + digest.hex()

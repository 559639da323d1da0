"""
Event records for external consumption.

`effect_to_record()` flattens an engine `Effect` into a plain, JSON-safe dict
holding only the fields meaningful for its event type. Sinks receive these
dicts; delivery is fire-and-forget from the service's point of view.
"""

from __future__ import annotations

from typing import Any, Dict, List, Protocol

from ..core.amm_pool.types import Effect, Event


_RECORD_FIELDS: Dict[Event, tuple[str, ...]] = {
    Event.POOL_INITIALIZED: ("actor", "fee_rate_milli"),
    Event.LIQUIDITY_ADDED: ("actor", "amount_a", "amount_b", "shares"),
    Event.SWAPPED: ("actor", "amount_in", "amount_out", "direction", "fee_amount"),
    Event.LIQUIDITY_REMOVED: ("actor", "amount_a", "amount_b", "shares"),
    Event.FEES_DISTRIBUTED: ("actor", "amount_a", "amount_b"),
    Event.PAUSE_CHANGED: ("actor", "paused"),
    Event.FEE_RATE_CHANGED: ("actor", "fee_rate_milli", "previous_fee_rate_milli"),
}


def effect_to_record(effect: Effect, *, pool_id: str = "") -> Dict[str, Any]:
    record: Dict[str, Any] = {"event": effect.event.value}
    if pool_id:
        record["pool_id"] = pool_id
    for name in _RECORD_FIELDS[effect.event]:
        value = getattr(effect, name)
        if name == "direction" and value is not None:
            value = value.value
        record[name] = value
    return record


class EventSink(Protocol):
    def emit(self, record: Dict[str, Any]) -> None:
        ...


class RecordingEventSink:
    """Keeps every emitted record in order."""

    def __init__(self) -> None:
        self.records: List[Dict[str, Any]] = []

    def emit(self, record: Dict[str, Any]) -> None:
        self.records.append(dict(record))

    def of_type(self, event: Event) -> List[Dict[str, Any]]:
        return [r for r in self.records if r["event"] == event.value]


class NullEventSink:
    def emit(self, record: Dict[str, Any]) -> None:
        return None

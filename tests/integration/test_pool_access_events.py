# [TESTER] v1

from __future__ import annotations

from src.core.amm_pool import Direction, Effect, Event
from src.integration.access import DenyAll, Role, StaticAuthorizer
from src.integration.events import NullEventSink, RecordingEventSink, effect_to_record


def test_static_authorizer_roles_are_separate() -> None:
    auth = StaticAuthorizer.from_sets(admins=["ops"], fee_collectors=["treasurer"])
    assert auth.is_authorized_signer("ops", Role.ADMIN)
    assert not auth.is_authorized_signer("ops", Role.FEE_COLLECTOR)
    assert auth.is_authorized_signer("treasurer", Role.FEE_COLLECTOR)
    assert not auth.is_authorized_signer("", Role.ADMIN)
    assert auth.signers(Role.ADMIN) == frozenset({"ops"})


def test_deny_all() -> None:
    assert not DenyAll().is_authorized_signer("ops", Role.ADMIN)


def test_swap_record_fields() -> None:
    effect = Effect(
        event=Event.SWAPPED,
        actor="trader",
        amount_in=100,
        amount_out=81,
        fee_amount=3,
        direction=Direction.A_TO_B,
    )
    assert effect_to_record(effect, pool_id="main") == {
        "event": "Swapped",
        "pool_id": "main",
        "actor": "trader",
        "amount_in": 100,
        "amount_out": 81,
        "direction": "a_to_b",
        "fee_amount": 3,
    }


def test_record_omits_empty_pool_id() -> None:
    record = effect_to_record(Effect(event=Event.PAUSE_CHANGED, actor="ops", paused=True))
    assert record == {"event": "PauseChanged", "actor": "ops", "paused": True}


def test_recording_sink_filters_by_event() -> None:
    sink = RecordingEventSink()
    sink.emit({"event": "Swapped", "amount_out": 1})
    sink.emit({"event": "PauseChanged", "paused": True})
    assert [r["event"] for r in sink.of_type(Event.SWAPPED)] == ["Swapped"]
    assert NullEventSink().emit({"event": "Swapped"}) is None

from __future__ import annotations

from src.choir_console.choir_console.storage.gateway import PersistenceGateway
from src.choir_console.choir_console.state.app_state import AppState
from src.choir_console.choir_console.sync.signal import SyncSignal


def test_announce_notifies_other_instances_only(store):
    first = SyncSignal(store)
    second = SyncSignal(store)
    calls = []
    first.subscribe(lambda: calls.append("first"))
    second.subscribe(lambda: calls.append("second"))

    first.announce()

    assert first.poll() is False
    assert second.poll() is True
    assert second.poll() is False
    assert calls == ["second"]


def test_unsubscribed_listener_is_not_called(store):
    sender, receiver = SyncSignal(store), SyncSignal(store)
    calls = []

    def listener():
        calls.append(1)

    receiver.subscribe(listener)
    receiver.unsubscribe(listener)

    sender.announce()

    assert receiver.poll() is True
    assert calls == []


def test_failing_listener_does_not_stop_the_others(store):
    sender, receiver = SyncSignal(store), SyncSignal(store)
    calls = []

    def broken():
        raise RuntimeError("boom")

    receiver.subscribe(broken)
    receiver.subscribe(lambda: calls.append("ok"))

    sender.announce()
    receiver.poll()

    assert calls == ["ok"]


def test_sibling_state_reloads_after_commit(store):
    tab_a = AppState.load(PersistenceGateway(store), sync=SyncSignal(store))
    tab_b_sync = SyncSignal(store)
    tab_b = AppState.load(PersistenceGateway(store), sync=tab_b_sync)

    tab_a.login("Admin")
    tab_a.add_event(name="Concierto", date="2026-03-14", time="18:00", location="Plaza")

    assert all(e.name != "Concierto" for e in tab_b.events)
    assert tab_b_sync.poll() is True
    assert any(e.name == "Concierto" for e in tab_b.events)

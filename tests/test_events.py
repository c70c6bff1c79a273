"""Tests for the event emitter."""

import pytest

from ljkit.protocol.events import (
    DID_LOGIN,
    DID_LOGOUT,
    AccountEvent,
    EventEmitter,
    next_connection_id,
)


class StubAccount:
    identifier = "alice@www.example.com:443"


@pytest.fixture
def emitter():
    return EventEmitter()


class TestEventEmitter:

    def test_delivers_in_subscription_order(self, emitter):
        calls = []
        emitter.subscribe(lambda event: calls.append(("first", event.name)))
        emitter.subscribe(lambda event: calls.append(("second", event.name)))

        emitter.emit(AccountEvent(DID_LOGIN, StubAccount()))

        assert calls == [("first", DID_LOGIN), ("second", DID_LOGIN)]

    def test_filter_by_name(self, emitter):
        calls = []
        emitter.subscribe(lambda event: calls.append(event.name), DID_LOGOUT)

        emitter.emit(AccountEvent(DID_LOGIN, StubAccount()))
        emitter.emit(AccountEvent(DID_LOGOUT, StubAccount()))

        assert calls == [DID_LOGOUT]

    def test_unsubscribe(self, emitter):
        calls = []
        unsubscribe = emitter.subscribe(calls.append)
        unsubscribe()
        unsubscribe()

        emitter.emit(AccountEvent(DID_LOGIN, StubAccount()))

        assert calls == []
        assert len(emitter) == 0

    def test_unknown_event_name(self, emitter):
        with pytest.raises(ValueError):
            emitter.subscribe(lambda event: None, "didExplode")

    def test_listener_errors_propagate(self, emitter):
        def broken(event):
            raise RuntimeError("listener failed")

        emitter.subscribe(broken)
        with pytest.raises(RuntimeError):
            emitter.emit(AccountEvent(DID_LOGIN, StubAccount()))

    def test_connection_ids_increase(self):
        first = next_connection_id()
        assert next_connection_id() > first

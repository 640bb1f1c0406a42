"""Tests for BroadcastHub ordering, replay and subscriber isolation."""

from __future__ import annotations

import pytest

from chessmirror.hub.broadcast import BroadcastHub


def test_subscriber_receives_published_values_in_order() -> None:
    hub: BroadcastHub[str] = BroadcastHub()
    received: list[str] = []
    hub.subscribe(received.append)

    hub.publish("a")
    hub.publish("b")

    assert received == ["a", "b"]
    assert hub.current == "b"
    assert hub.sequence == 2


def test_late_subscriber_gets_current_value_immediately() -> None:
    hub: BroadcastHub[str] = BroadcastHub()
    hub.publish("a")
    hub.publish("b")

    received: list[str] = []
    subscription = hub.subscribe(received.append)

    assert received == ["b"]
    assert subscription.last_sequence == 2


def test_no_replay_before_first_publish() -> None:
    hub: BroadcastHub[str] = BroadcastHub()
    received: list[str] = []
    hub.subscribe(received.append)
    assert received == []


def test_reentrant_publish_is_delivered_after_current_fan_out() -> None:
    hub: BroadcastHub[str] = BroadcastHub()
    first: list[str] = []
    second: list[str] = []

    def echo(value: str) -> None:
        first.append(value)
        if value == "a":
            hub.publish("b")

    hub.subscribe(echo)
    hub.subscribe(second.append)
    hub.publish("a")

    assert first == ["a", "b"]
    assert second == ["a", "b"]


def test_subscriber_joining_mid_fan_out_never_goes_backwards() -> None:
    hub: BroadcastHub[str] = BroadcastHub()
    late: list[str] = []

    def joiner(value: str) -> None:
        if value == "a":
            hub.publish("b")
            hub.subscribe(late.append)

    hub.subscribe(joiner)
    hub.publish("a")

    assert late == ["b"]


def test_failing_subscriber_does_not_affect_others(caplog: pytest.LogCaptureFixture) -> None:
    hub: BroadcastHub[int] = BroadcastHub()
    received: list[int] = []

    def broken(_value: int) -> None:
        raise RuntimeError("socket gone")

    hub.subscribe(broken)
    hub.subscribe(received.append)
    with caplog.at_level("WARNING"):
        hub.publish(1)
        hub.publish(2)

    assert received == [1, 2]
    assert "failed on update" in caplog.text


def test_unsubscribe_is_idempotent() -> None:
    hub: BroadcastHub[int] = BroadcastHub()
    received: list[int] = []
    subscription = hub.subscribe(received.append)

    subscription.unsubscribe()
    subscription.unsubscribe()
    hub.publish(1)

    assert not subscription.active
    assert hub.subscriber_count == 0
    assert received == []


def test_unsubscribe_during_fan_out_stops_delivery() -> None:
    hub: BroadcastHub[int] = BroadcastHub()
    received: list[int] = []
    holder: list[object] = []

    def first(_value: int) -> None:
        holder[0].unsubscribe()  # type: ignore[attr-defined]

    hub.subscribe(first)
    holder.append(hub.subscribe(received.append))
    hub.publish(1)

    assert received == []

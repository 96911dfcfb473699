"""Tests for the change feed."""

from weight_tracker.services.subscriptions import ChangeFeed


def test_publish_reaches_all_subscribers_of_topic() -> None:
    feed = ChangeFeed()
    first: list[object] = []
    second: list[object] = []
    other: list[object] = []
    feed.subscribe("weights:a", first.append)
    feed.subscribe("weights:a", second.append)
    feed.subscribe("weights:b", other.append)

    feed.publish("weights:a", ["snapshot"])

    assert first == [["snapshot"]]
    assert second == [["snapshot"]]
    assert other == []


def test_cancel_stops_delivery_and_is_idempotent() -> None:
    feed = ChangeFeed()
    received: list[object] = []
    subscription = feed.subscribe("profile:a", received.append)

    subscription.cancel()
    subscription.cancel()
    feed.publish("profile:a", {"username": "ana"})

    assert received == []
    assert not subscription.active
    assert feed.listener_count("profile:a") == 0


def test_failing_listener_does_not_block_others() -> None:
    feed = ChangeFeed()
    received: list[object] = []

    def broken(_snapshot: object) -> None:
        raise RuntimeError("boom")

    feed.subscribe("weights:a", broken)
    feed.subscribe("weights:a", received.append)

    feed.publish("weights:a", [])

    assert received == [[]]

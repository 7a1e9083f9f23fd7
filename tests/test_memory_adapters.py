import asyncio

import pytest

from events_router.adapters.memory import (
    InMemoryDeadLetterQueue,
    InMemorySubscriptionRepo,
    RecordingNotifier,
)
from events_router.core import DeliveryOutcomeRecord, Event, Subscription

SUB = Subscription(type="aType", subscriber_kind="kinesis", destination_resource="StreamName")


def test_subscription_repo_returns_copies() -> None:
    repo = InMemorySubscriptionRepo([SUB])
    first = asyncio.run(repo.get_all())
    first.clear()

    assert asyncio.run(repo.get_all()) == [SUB]
    assert repo.calls == 2


def test_subscription_repo_add_remove() -> None:
    repo = InMemorySubscriptionRepo()
    repo.add(SUB)
    repo.remove(SUB)
    assert asyncio.run(repo.get_all()) == []

    with pytest.raises(ValueError):
        repo.remove(SUB)


def test_recording_notifier_tags_failures() -> None:
    events = [Event(type="aType", payload=1), Event(type="aType", payload=2)]
    notifier = RecordingNotifier(
        lambda event, sub: ("throttled", 400) if event.payload == 2 else None
    )

    result = asyncio.run(notifier.publish_batch(events, SUB))

    assert [r.failed for r in result.records] == [False, True]
    assert result.records[1].error == "throttled"
    assert result.records[1].error_code == 400
    assert result.failures() == [result.records[1]]
    assert notifier.calls[0].events == events


def test_dead_letter_queue_acknowledges() -> None:
    queue = InMemoryDeadLetterQueue()
    record = DeliveryOutcomeRecord(
        event=Event(type="aType"), subscription=SUB, error="boom"
    )

    assert asyncio.run(queue.put(record)) is True
    assert queue.records == [record]

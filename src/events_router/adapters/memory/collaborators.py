from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Optional, Union

from events_router.core import (
    DeliveryOutcomeRecord,
    Event,
    PublishResult,
    Subscription,
)

FailurePredicate = Callable[[Event, Subscription], Optional[Union[str, tuple[str, Union[int, str]]]]]


class InMemorySubscriptionRepo:
    """Subscription resolver backed by a list."""

    def __init__(self, subscriptions: Iterable[Subscription] = ()) -> None:
        self._subscriptions: list[Subscription] = list(subscriptions)
        self.calls = 0

    async def get_all(self) -> list[Subscription]:
        self.calls += 1
        return list(self._subscriptions)

    def add(self, subscription: Subscription) -> None:
        self._subscriptions.append(subscription)

    def remove(self, subscription: Subscription) -> None:
        self._subscriptions.remove(subscription)


@dataclass(frozen=True)
class PublishCall:
    events: list[Event]
    subscription: Subscription


class RecordingNotifier:
    """Notifier that records every call and reports failures via a predicate.

    ``fail(event, subscription)`` returns None for success, an error message,
    or an ``(error, error_code)`` tuple.
    """

    def __init__(self, fail: FailurePredicate | None = None) -> None:
        self._fail = fail
        self.calls: list[PublishCall] = []

    async def publish_batch(self, events: list[Event], subscription: Subscription) -> PublishResult:
        self.calls.append(PublishCall(events=list(events), subscription=subscription))
        records = []
        for event in events:
            outcome = self._fail(event, subscription) if self._fail else None
            if outcome is None:
                records.append(DeliveryOutcomeRecord(event=event, subscription=subscription))
                continue
            error, code = outcome if isinstance(outcome, tuple) else (outcome, None)
            records.append(
                DeliveryOutcomeRecord(
                    event=event, subscription=subscription, error=error, error_code=code
                )
            )
        return PublishResult(records=records)


class InMemoryDeadLetterQueue:
    def __init__(self) -> None:
        self._records: list[DeliveryOutcomeRecord] = []

    async def put(self, record: DeliveryOutcomeRecord) -> bool:
        self._records.append(record)
        return True

    @property
    def records(self) -> list[DeliveryOutcomeRecord]:
        return list(self._records)

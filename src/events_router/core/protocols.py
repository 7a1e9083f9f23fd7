"""Collaborator contracts (duck-typed).

Any object providing the matching async method works; nothing here needs to
be subclassed.
"""

from __future__ import annotations

from typing import Any, Protocol, Sequence, runtime_checkable

from events_router.core.models import DeliveryOutcomeRecord, Event, Subscription


@runtime_checkable
class SubscriptionResolver(Protocol):
    """Serves the complete current set of subscriptions."""

    async def get_all(self) -> Sequence[Subscription]:  # pragma: no cover
        ...


@runtime_checkable
class Notifier(Protocol):
    """Delivers a batch of events to one subscription's destination.

    Must return one outcome per input event, in input order. Raises only for
    systemic failure of the whole call.
    """

    async def publish_batch(
        self, events: list[Event], subscription: Subscription
    ) -> Any:  # pragma: no cover
        ...


@runtime_checkable
class DeadLetterSink(Protocol):
    """Durably records one failed delivery outcome."""

    async def put(self, record: DeliveryOutcomeRecord) -> bool:  # pragma: no cover
        ...

from __future__ import annotations

from typing import Iterable, Sequence

from events_router.core.models import Event, Subscription


def group_by_type(events: Iterable[Event]) -> dict[str, list[Event]]:
    """Partition events by type in one pass.

    Groups appear in first-seen order and keep batch order within each group.
    """
    groups: dict[str, list[Event]] = {}
    for event in events:
        groups.setdefault(event.type, []).append(event)
    return groups


def pair_subscriptions(
    groups: dict[str, list[Event]],
    subscriptions: Sequence[Subscription],
) -> tuple[list[tuple[list[Event], Subscription]], list[str]]:
    """Join event groups against subscriptions.

    Returns the (events, subscription) pairs to publish, one per matching
    subscription, plus the types that matched nothing.
    """
    by_type: dict[str, list[Subscription]] = {}
    for subscription in subscriptions:
        by_type.setdefault(subscription.type, []).append(subscription)

    pairs: list[tuple[list[Event], Subscription]] = []
    unrouted: list[str] = []
    for event_type, events in groups.items():
        matches = by_type.get(event_type)
        if not matches:
            unrouted.append(event_type)
            continue
        for subscription in matches:
            pairs.append((list(events), subscription))
    return pairs, unrouted

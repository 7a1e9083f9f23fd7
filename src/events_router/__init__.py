"""Route decoded stream events to subscribed notifiers, dead-lettering failures."""

from events_router.core import (
    DeliveryOutcomeRecord,
    Event,
    EventsRouter,
    ExecutionReport,
    NotifierRegistry,
    PublishResult,
    RawBatch,
    Subscription,
)

__all__ = [
    "DeliveryOutcomeRecord",
    "Event",
    "EventsRouter",
    "ExecutionReport",
    "NotifierRegistry",
    "PublishResult",
    "RawBatch",
    "Subscription",
]

"""Core (framework-agnostic) primitives for events-router."""

from events_router.core.codec import decode_batch, decode_record, encode_event
from events_router.core.events import RoutingEvent
from events_router.core.exceptions import (
    DeadLetterError,
    DecodeError,
    EventsRouterError,
    NotifierNotFound,
    PublishError,
    RegistryError,
    SubscriptionResolutionError,
)
from events_router.core.grouping import group_by_type, pair_subscriptions
from events_router.core.models import (
    DeliveryOutcomeRecord,
    EncodedRecord,
    Event,
    KinesisData,
    PublishResult,
    RawBatch,
    Subscription,
)
from events_router.core.protocols import DeadLetterSink, Notifier, SubscriptionResolver
from events_router.core.registry import NotifierRegistry
from events_router.core.router import PUBLISH_FAILED_CODE, EventsRouter, ExecutionReport

__all__ = [
    "EventsRouterError",
    "DecodeError",
    "SubscriptionResolutionError",
    "RegistryError",
    "NotifierNotFound",
    "PublishError",
    "DeadLetterError",
    "Event",
    "EncodedRecord",
    "KinesisData",
    "RawBatch",
    "Subscription",
    "DeliveryOutcomeRecord",
    "PublishResult",
    "decode_record",
    "decode_batch",
    "encode_event",
    "group_by_type",
    "pair_subscriptions",
    "SubscriptionResolver",
    "Notifier",
    "DeadLetterSink",
    "NotifierRegistry",
    "RoutingEvent",
    "EventsRouter",
    "ExecutionReport",
    "PUBLISH_FAILED_CODE",
]

from __future__ import annotations


class EventsRouterError(Exception):
    """Base error for events-router."""


class DecodeError(EventsRouterError):
    """Raised when an encoded record cannot be decoded into an event."""

    def __init__(self, message: str, *, event_id: str | None = None) -> None:
        super().__init__(message if event_id is None else f"{message} (record {event_id})")
        self.event_id = event_id


class SubscriptionResolutionError(EventsRouterError):
    """Raised when the subscription resolver fails; nothing is routed."""


class RegistryError(EventsRouterError):
    """Raised for invalid notifier registrations."""


class NotifierNotFound(RegistryError):
    """Raised when no notifier is registered for a subscriber kind."""


class PublishError(EventsRouterError):
    """Raised when a publish call fails outright or breaks the outcome contract."""


class DeadLetterError(EventsRouterError):
    """Raised when one or more dead-letter writes were not acknowledged."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Mapping
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, AsyncIterator, Literal, Optional, Union

from pydantic import BaseModel
from pydantic_core import ValidationError

from events_router.core.codec import decode_batch
from events_router.core.events import (
    BATCH_DECODED,
    DEAD_LETTER_FAILED,
    DEAD_LETTER_PUT,
    EXECUTE_COMPLETE,
    GROUP_UNROUTED,
    PUBLISH_FAILED,
    PUBLISH_START,
    PUBLISH_SUCCESS,
    SUBSCRIPTIONS_FAILED,
    SUBSCRIPTIONS_RESOLVED,
    RoutingEvent,
)
from events_router.core.exceptions import (
    DeadLetterError,
    PublishError,
    SubscriptionResolutionError,
)
from events_router.core.grouping import group_by_type, pair_subscriptions
from events_router.core.models import (
    DeliveryOutcomeRecord,
    Event,
    PublishResult,
    RawBatch,
    Subscription,
)
from events_router.core.protocols import DeadLetterSink, Notifier, SubscriptionResolver
from events_router.core.registry import NotifierRegistry

if TYPE_CHECKING:
    from events_router.config import RouterSettings

PublishFailurePolicy = Literal["raise", "dead_letter"]

PUBLISH_FAILED_CODE = "PUBLISH_FAILED"


@dataclass(frozen=True)
class ExecutionReport:
    decoded: int
    published_pairs: int
    delivered: int
    dead_lettered: int
    unrouted_types: tuple[str, ...] = ()


def _coerce_publish_result(obj: Any) -> PublishResult:
    if isinstance(obj, PublishResult):
        return obj
    try:
        if isinstance(obj, Mapping):
            return PublishResult.model_validate(obj)
        if isinstance(obj, BaseModel):
            return PublishResult.model_validate(obj.model_dump())
        records = getattr(obj, "records", None)
        if records is None:
            raise PublishError("Notifier result must provide 'records'.")
        return PublishResult(records=list(records))
    except ValidationError as exc:
        raise PublishError(str(exc)) from exc


def _describe(subscription: Subscription) -> dict[str, str]:
    return {
        "type": subscription.type,
        "subscriber_kind": subscription.subscriber_kind,
        "destination": subscription.destination_resource,
    }


class EventsRouter:
    """Decode a stream batch, fan events out to subscribed notifiers and
    dead-letter every per-event delivery failure.

    One call to :meth:`execute` handles one batch. Subscriptions are fetched
    from the resolver on every call. Publish calls for distinct
    (type, subscription) pairs run concurrently, as do the dead-letter writes
    that follow; ``execute`` returns only once all of them have settled.
    """

    def __init__(
        self,
        *,
        resolver: SubscriptionResolver,
        notifiers: Union[NotifierRegistry, Mapping[str, Notifier]],
        dead_letter_sink: DeadLetterSink,
        publish_failure_policy: PublishFailurePolicy = "raise",
        max_concurrent_publishes: Optional[int] = None,
        on_event: Callable[[RoutingEvent], None] | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        if publish_failure_policy not in ("raise", "dead_letter"):
            raise ValueError(f"Unknown publish failure policy: {publish_failure_policy!r}")
        if max_concurrent_publishes is not None and max_concurrent_publishes < 1:
            raise ValueError("max_concurrent_publishes must be >= 1 when set.")
        self._resolver = resolver
        self._notifiers = (
            notifiers
            if isinstance(notifiers, NotifierRegistry)
            else NotifierRegistry.from_mapping(notifiers)
        )
        self._sink = dead_letter_sink
        self._publish_failure_policy = publish_failure_policy
        self._max_concurrent_publishes = max_concurrent_publishes
        self._on_event = on_event
        self._logger = logger or logging.getLogger(__name__)

    @classmethod
    def from_settings(
        cls,
        settings: "RouterSettings",
        *,
        resolver: SubscriptionResolver,
        notifiers: Union[NotifierRegistry, Mapping[str, Notifier]],
        dead_letter_sink: DeadLetterSink,
        on_event: Callable[[RoutingEvent], None] | None = None,
        logger: logging.Logger | None = None,
    ) -> "EventsRouter":
        return cls(
            resolver=resolver,
            notifiers=notifiers,
            dead_letter_sink=dead_letter_sink,
            publish_failure_policy=settings.publish_failure_policy,
            max_concurrent_publishes=settings.max_concurrent_publishes,
            on_event=on_event,
            logger=logger,
        )

    @property
    def notifiers(self) -> NotifierRegistry:
        return self._notifiers

    def _emit(
        self, kind: str, payload: dict, error: BaseException | None = None
    ) -> None:
        event = RoutingEvent(kind=kind, payload=payload, error=error)
        if self._on_event:
            try:
                self._on_event(event)
            except Exception:
                # Observability hooks should not break routing.
                self._logger.debug("Routing event hook failed", exc_info=True)
        if error:
            self._logger.debug("routing.%s error=%s payload=%s", kind, error, payload)
        else:
            self._logger.debug("routing.%s payload=%s", kind, payload)

    async def execute(self, batch: Union[RawBatch, Mapping[str, Any]]) -> ExecutionReport:
        """Route one batch.

        Raises on decode errors, resolver failure, unknown subscriber kinds,
        systemic publish failure (under the ``"raise"`` policy) and
        unacknowledged dead-letter writes. Per-event delivery failures never
        raise; they are forwarded to the dead-letter sink.
        """
        events = decode_batch(batch)
        groups = group_by_type(events)
        self._emit(BATCH_DECODED, {"records": len(events), "types": list(groups)})

        subscriptions = await self._resolve_subscriptions()
        pairs, unrouted = pair_subscriptions(groups, subscriptions)
        for event_type in unrouted:
            self._emit(
                GROUP_UNROUTED,
                {"type": event_type, "events": len(groups[event_type])},
            )

        # Resolve every notifier up front so an unknown kind routes nothing.
        targets = [
            (group, subscription, self._notifiers.require(subscription.subscriber_kind))
            for group, subscription in pairs
        ]

        semaphore = (
            asyncio.Semaphore(self._max_concurrent_publishes)
            if self._max_concurrent_publishes
            else None
        )
        results = await asyncio.gather(
            *(
                self._publish(notifier, group, subscription, semaphore)
                for group, subscription, notifier in targets
            ),
            return_exceptions=True,
        )

        failures: list[DeliveryOutcomeRecord] = []
        publish_errors: list[Exception] = []
        interrupted: list[BaseException] = []
        delivered = 0
        for result in results:
            if isinstance(result, BaseException):
                if isinstance(result, Exception):
                    publish_errors.append(result)
                else:
                    interrupted.append(result)
                continue
            failed = result.failures()
            failures.extend(failed)
            delivered += len(result.records) - len(failed)

        # Failures already collected are written even when another pair was
        # interrupted or failed outright.
        try:
            await self._dead_letter(failures)
        except DeadLetterError as exc:
            if interrupted:
                raise interrupted[0] from exc
            if publish_errors:
                raise DeadLetterError(
                    f"{exc}; {len(publish_errors)} publish calls also failed: "
                    + "; ".join(str(error) for error in publish_errors)
                ) from publish_errors[0]
            raise

        if interrupted:
            raise interrupted[0]
        if publish_errors:
            if len(publish_errors) == 1:
                raise publish_errors[0]
            raise PublishError(
                f"{len(publish_errors)} publish calls failed: "
                + "; ".join(str(exc) for exc in publish_errors)
            ) from publish_errors[0]

        report = ExecutionReport(
            decoded=len(events),
            published_pairs=len(targets),
            delivered=delivered,
            dead_lettered=len(failures),
            unrouted_types=tuple(unrouted),
        )
        self._emit(
            EXECUTE_COMPLETE,
            {
                "decoded": report.decoded,
                "published_pairs": report.published_pairs,
                "delivered": report.delivered,
                "dead_lettered": report.dead_lettered,
            },
        )
        return report

    async def _resolve_subscriptions(self) -> list[Subscription]:
        try:
            raw = await self._resolver.get_all()
        except Exception as exc:
            error = SubscriptionResolutionError(f"Subscription resolver failed: {exc}")
            self._emit(SUBSCRIPTIONS_FAILED, {}, error=error)
            raise error from exc

        try:
            subscriptions = [
                item if isinstance(item, Subscription) else Subscription.model_validate(item)
                for item in raw
            ]
        except (TypeError, ValidationError) as exc:
            raise SubscriptionResolutionError(f"Invalid subscription: {exc}") from exc
        self._emit(SUBSCRIPTIONS_RESOLVED, {"count": len(subscriptions)})
        return subscriptions

    async def _publish(
        self,
        notifier: Notifier,
        events: list[Event],
        subscription: Subscription,
        semaphore: Optional[asyncio.Semaphore],
    ) -> PublishResult:
        described = _describe(subscription)
        self._emit(PUBLISH_START, {**described, "events": len(events)})
        try:
            async with _limit(semaphore):
                raw = await notifier.publish_batch(events, subscription)
            result = _coerce_publish_result(raw)
            if len(result.records) != len(events):
                raise PublishError(
                    f"Notifier returned {len(result.records)} outcomes for "
                    f"{len(events)} events (subscription {described})."
                )
        except Exception as exc:
            error = exc if isinstance(exc, PublishError) else PublishError(
                f"Publish to '{subscription.destination_resource}' failed: {exc}"
            )
            self._emit(PUBLISH_FAILED, described, error=error)
            self._logger.warning(
                "Publish of %d '%s' events to %s failed: %s",
                len(events),
                subscription.type,
                subscription.destination_resource,
                exc,
            )
            if self._publish_failure_policy == "dead_letter":
                return PublishResult(
                    records=[
                        DeliveryOutcomeRecord(
                            event=event,
                            subscription=subscription,
                            error=str(exc),
                            error_code=PUBLISH_FAILED_CODE,
                        )
                        for event in events
                    ]
                )
            if error is exc:
                raise
            raise error from exc

        self._emit(
            PUBLISH_SUCCESS,
            {**described, "events": len(events), "failed": len(result.failures())},
        )
        return result

    async def _dead_letter(self, failures: list[DeliveryOutcomeRecord]) -> None:
        if not failures:
            return
        results = await asyncio.gather(
            *(self._put(record) for record in failures),
            return_exceptions=True,
        )
        errors: list[Exception] = []
        interrupted: list[BaseException] = []
        for result in results:
            if isinstance(result, BaseException):
                if isinstance(result, Exception):
                    errors.append(result)
                else:
                    interrupted.append(result)
        if interrupted:
            raise interrupted[0]
        if errors:
            raise DeadLetterError(
                f"{len(errors)} of {len(failures)} dead-letter writes failed: {errors[0]}"
            ) from errors[0]

    async def _put(self, record: DeliveryOutcomeRecord) -> None:
        payload = {
            "type": record.event.type,
            "destination": record.subscription.destination_resource,
            "error": record.error,
            "error_code": record.error_code,
        }
        try:
            acknowledged = await self._sink.put(record)
        except Exception as exc:
            self._emit(DEAD_LETTER_FAILED, payload, error=exc)
            raise
        if acknowledged is False:
            error = DeadLetterError("Dead-letter sink did not acknowledge the record.")
            self._emit(DEAD_LETTER_FAILED, payload, error=error)
            raise error
        self._emit(DEAD_LETTER_PUT, payload)


@asynccontextmanager
async def _limit(semaphore: Optional[asyncio.Semaphore]) -> AsyncIterator[None]:
    if semaphore is None:
        yield
        return
    async with semaphore:
        yield

from __future__ import annotations

from typing import Any, Mapping, Optional, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class Event(BaseModel):
    """A decoded stream event."""

    model_config = ConfigDict(frozen=True, extra="allow")

    type: str = Field(description="Event type used for routing.")
    payload: Any = Field(default=None, description="Opaque event body.")


class Subscription(BaseModel):
    """Routing rule binding an event type to a notifier destination."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="allow")

    type: str = Field(description="Event type this subscription receives.")
    subscriber_kind: str = Field(
        validation_alias=AliasChoices("subscriber_kind", "subscriberKind", "subscriberType"),
        serialization_alias="subscriberKind",
        description="Selects the notifier implementation (e.g. 'kinesis').",
    )
    destination_resource: str = Field(
        validation_alias=AliasChoices(
            "destination_resource", "destinationResource", "subscribedResource"
        ),
        serialization_alias="destinationResource",
        description="Where the notifier delivers (stream name, URL, ...).",
    )


class DeliveryOutcomeRecord(BaseModel):
    """Outcome of one event within one publish call.

    Notifier-specific fields (e.g. a shard sequence number) are kept, so the
    record reaches the dead-letter sink intact.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="allow")

    event: Event
    subscription: Subscription
    error: Optional[str] = None
    error_code: Optional[Union[int, str]] = Field(
        default=None,
        validation_alias=AliasChoices("error_code", "errorCode"),
        serialization_alias="errorCode",
    )

    @property
    def failed(self) -> bool:
        return self.error is not None or self.error_code is not None


class PublishResult(BaseModel):
    """What a notifier returns: one outcome per input event, in input order."""

    records: list[DeliveryOutcomeRecord] = Field(default_factory=list)

    def failures(self) -> list[DeliveryOutcomeRecord]:
        return [record for record in self.records if record.failed]


class KinesisData(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    data: str = Field(description="Base64-encoded JSON event envelope.")


class EncodedRecord(BaseModel):
    """Wire envelope delivered by the stream transport."""

    model_config = ConfigDict(populate_by_name=True)

    kinesis: KinesisData
    event_id: str = Field(
        default="",
        validation_alias=AliasChoices("event_id", "eventID"),
        serialization_alias="eventID",
        description="Transport-assigned identifier, e.g. 'shardId-000:12345'.",
    )


class RawBatch(BaseModel):
    """One delivery unit from the stream transport."""

    model_config = ConfigDict(populate_by_name=True)

    records: list[EncodedRecord] = Field(
        default_factory=list,
        validation_alias=AliasChoices("records", "Records"),
        serialization_alias="Records",
    )

    @classmethod
    def from_payload(cls, payload: Union["RawBatch", Mapping[str, Any]]) -> "RawBatch":
        if isinstance(payload, RawBatch):
            return payload
        return cls.model_validate(payload)

"""Kinesis-style envelope codec: base64(JSON({type, payload}))."""

from __future__ import annotations

import base64
import binascii
import json
from typing import Any, Mapping, Union

from pydantic_core import ValidationError

from events_router.core.exceptions import DecodeError
from events_router.core.models import EncodedRecord, Event, KinesisData, RawBatch


def decode_record(record: EncodedRecord) -> Event:
    """Decode one encoded record into an Event."""
    try:
        raw = base64.b64decode(record.kinesis.data, validate=True)
        body: Any = json.loads(raw.decode("utf-8"))
    except (binascii.Error, UnicodeDecodeError, ValueError) as exc:
        raise DecodeError(f"Malformed record payload: {exc}", event_id=record.event_id) from exc

    if not isinstance(body, dict):
        raise DecodeError("Record payload must be a JSON object.", event_id=record.event_id)
    try:
        return Event(**body)
    except ValidationError as exc:
        raise DecodeError(str(exc), event_id=record.event_id) from exc


def decode_batch(batch: Union[RawBatch, Mapping[str, Any]]) -> list[Event]:
    """Decode every record of a batch, preserving batch order."""
    try:
        parsed = RawBatch.from_payload(batch)
    except ValidationError as exc:
        raise DecodeError(f"Malformed batch: {exc}") from exc
    return [decode_record(record) for record in parsed.records]


def encode_event(event: Event, event_id: str = "") -> EncodedRecord:
    body = json.dumps(event.model_dump(mode="json")).encode("utf-8")
    return EncodedRecord(
        kinesis=KinesisData(data=base64.b64encode(body).decode("ascii")),
        event_id=event_id,
    )

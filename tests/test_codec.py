import base64
import json

import pytest

from events_router.core import (
    DecodeError,
    EncodedRecord,
    Event,
    RawBatch,
    decode_batch,
    decode_record,
    encode_event,
)


def _record(body: object, event_id: str = "shardId-000:12345") -> dict:
    data = base64.b64encode(json.dumps(body).encode("utf-8")).decode("ascii")
    return {"kinesis": {"data": data}, "eventID": event_id}


def test_decode_batch_preserves_order() -> None:
    batch = {
        "Records": [
            _record({"type": "aType", "payload": {"the": "data"}}),
            _record({"type": "anotherType", "payload": {"some": "data"}}),
            _record({"type": "aType", "payload": {"more": "data"}}),
        ]
    }

    events = decode_batch(batch)

    assert events == [
        Event(type="aType", payload={"the": "data"}),
        Event(type="anotherType", payload={"some": "data"}),
        Event(type="aType", payload={"more": "data"}),
    ]


def test_decode_batch_accepts_model() -> None:
    batch = RawBatch(records=[encode_event(Event(type="x", payload=[1, 2]))])
    assert decode_batch(batch) == [Event(type="x", payload=[1, 2])]


def test_encode_event_uses_wire_aliases() -> None:
    record = encode_event(Event(type="x", payload=None), event_id="shardId-001:7")
    dumped = record.model_dump(by_alias=True)

    assert dumped["eventID"] == "shardId-001:7"
    assert json.loads(base64.b64decode(dumped["kinesis"]["data"])) == {"type": "x", "payload": None}


@pytest.mark.parametrize(
    "data",
    [
        "%%%not-base64%%%",
        base64.b64encode(b"{not json").decode("ascii"),
        base64.b64encode(b"\xff\xfe").decode("ascii"),
    ],
)
def test_decode_record_rejects_malformed_payload(data: str) -> None:
    record = EncodedRecord.model_validate({"kinesis": {"data": data}, "eventID": "shardId-000:1"})
    with pytest.raises(DecodeError) as excinfo:
        decode_record(record)
    assert excinfo.value.event_id == "shardId-000:1"
    assert "shardId-000:1" in str(excinfo.value)


def test_decode_record_requires_object_with_type() -> None:
    with pytest.raises(DecodeError):
        decode_record(EncodedRecord.model_validate(_record(["a", "list"])))
    with pytest.raises(DecodeError):
        decode_record(EncodedRecord.model_validate(_record({"payload": {}})))


def test_decode_batch_rejects_malformed_envelope() -> None:
    with pytest.raises(DecodeError):
        decode_batch({"Records": [{"eventID": "shardId-000:1"}]})

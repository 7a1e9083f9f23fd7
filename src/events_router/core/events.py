"""Observability events emitted by the router through its ``on_event`` hook."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

BATCH_DECODED = "batch_decoded"
SUBSCRIPTIONS_RESOLVED = "subscriptions_resolved"
SUBSCRIPTIONS_FAILED = "subscriptions_failed"
GROUP_UNROUTED = "group_unrouted"
PUBLISH_START = "publish_start"
PUBLISH_SUCCESS = "publish_success"
PUBLISH_FAILED = "publish_failed"
DEAD_LETTER_PUT = "dead_letter_put"
DEAD_LETTER_FAILED = "dead_letter_failed"
EXECUTE_COMPLETE = "execute_complete"


@dataclass(frozen=True)
class RoutingEvent:
    kind: str
    payload: Dict[str, Any] = field(default_factory=dict)
    error: Optional[BaseException] = None

    @property
    def is_error(self) -> bool:
        return self.error is not None

"""In-memory collaborators for tests and local runs."""

from events_router.adapters.memory.collaborators import (
    InMemoryDeadLetterQueue,
    InMemorySubscriptionRepo,
    PublishCall,
    RecordingNotifier,
)

__all__ = [
    "InMemoryDeadLetterQueue",
    "InMemorySubscriptionRepo",
    "PublishCall",
    "RecordingNotifier",
]

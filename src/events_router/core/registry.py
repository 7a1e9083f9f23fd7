from __future__ import annotations

from typing import Mapping, Optional

from events_router.core.exceptions import NotifierNotFound, RegistryError
from events_router.core.protocols import Notifier


def _normalize_kind(kind: str) -> str:
    return kind.strip().lower()


class NotifierRegistry:
    """Maps subscriber kinds to notifier implementations.

    New subscriber kinds are supported by registering a notifier; the router
    never branches on kind.
    """

    def __init__(self) -> None:
        self._notifiers: dict[str, Notifier] = {}

    @classmethod
    def from_mapping(cls, notifiers: Mapping[str, Notifier]) -> "NotifierRegistry":
        registry = cls()
        for kind, notifier in notifiers.items():
            registry.register(kind, notifier)
        return registry

    def register(self, kind: str, notifier: Notifier) -> None:
        normalized = _normalize_kind(kind)
        if not normalized:
            raise RegistryError("Subscriber kind must be a non-empty string.")
        if normalized in self._notifiers:
            raise RegistryError(f"A notifier is already registered for kind '{normalized}'.")
        if not callable(getattr(notifier, "publish_batch", None)):
            raise RegistryError(
                f"Notifier for kind '{normalized}' does not implement publish_batch()."
            )
        self._notifiers[normalized] = notifier

    def get(self, kind: str) -> Optional[Notifier]:
        return self._notifiers.get(_normalize_kind(kind))

    def require(self, kind: str) -> Notifier:
        notifier = self.get(kind)
        if notifier is None:
            raise NotifierNotFound(f"No notifier registered for subscriber kind '{kind}'.")
        return notifier

    def kinds(self) -> list[str]:
        return list(self._notifiers)

    def __contains__(self, kind: object) -> bool:
        return isinstance(kind, str) and _normalize_kind(kind) in self._notifiers

    def __len__(self) -> int:
        return len(self._notifiers)

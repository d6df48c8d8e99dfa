"""Port interface for change notifications (message bus boundary)."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class IPublisher(Protocol):
    """Delivers a byte payload to a named topic.

    Implementations raise ``PublishError`` for both invalid topic names and
    transport failures, and must serialize concurrent ``publish`` calls.
    """

    def publish(self, topic: str, payload: bytes) -> None:
        """Deliver ``payload`` to ``topic`` or raise ``PublishError``."""

    def ping(self) -> bool:
        """Return True when the bus is reachable."""

    def close(self) -> None:
        """Release the underlying transport."""

"""In-process publisher for local runs without nsqd."""

from __future__ import annotations

import threading
from typing import List, Optional, Tuple

from taskhub.adapters.publisher_nsq import validate_topic
from taskhub.app.core.errors import PublishError
from taskhub.ports.publisher import IPublisher


class InMemoryPublisher(IPublisher):
    def __init__(self, fail_with: Optional[str] = None) -> None:
        self._lock = threading.Lock()
        self.messages: List[Tuple[str, bytes]] = []
        # When set, every publish fails with this message (simulated outage)
        self.fail_with = fail_with

    def publish(self, topic: str, payload: bytes) -> None:
        validate_topic(topic)
        with self._lock:
            if self.fail_with:
                raise PublishError(self.fail_with)
            self.messages.append((topic, bytes(payload)))

    def messages_for(self, topic: str) -> List[bytes]:
        with self._lock:
            return [payload for name, payload in self.messages if name == topic]

    def ping(self) -> bool:
        return not self.fail_with

    def close(self) -> None:
        pass

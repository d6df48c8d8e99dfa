"""nsqd publisher.

Messages go through nsqd's HTTP interface (``POST /pub?topic=...``) on a
single keep-alive ``httpx.Client``. The client is shared by every request
thread, so publishes are serialized behind a lock: one message in flight
at a time, bodies never interleave.
"""

from __future__ import annotations

import logging
import re
import threading
from typing import Optional

import httpx

from taskhub.app.core.errors import PublishError
from taskhub.ports.publisher import IPublisher

logger = logging.getLogger(__name__)

# Same rule nsqd applies to topic names
_TOPIC_RE = re.compile(r"^[.a-zA-Z0-9_-]+(#ephemeral)?$")
_TOPIC_MAX_LEN = 64


def validate_topic(topic: str) -> str:
    if not topic or len(topic) > _TOPIC_MAX_LEN or not _TOPIC_RE.match(topic):
        raise PublishError(f"Invalid topic name: {topic!r}")
    return topic


class NsqPublisher(IPublisher):
    def __init__(
        self,
        nsqd_url: str,
        timeout: float = 5.0,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.nsqd_url = nsqd_url.rstrip("/")
        self._lock = threading.Lock()
        self._client = httpx.Client(base_url=self.nsqd_url, timeout=timeout, transport=transport)

    def publish(self, topic: str, payload: bytes) -> None:
        validate_topic(topic)
        if not payload:
            raise PublishError("Refusing to publish an empty message")

        with self._lock:
            try:
                resp = self._client.post("/pub", params={"topic": topic}, content=payload)
                resp.raise_for_status()
            except httpx.HTTPStatusError as exc:
                body = exc.response.text.strip()[:200]
                raise PublishError(
                    f"nsqd rejected message for {topic}: HTTP {exc.response.status_code} {body}",
                    cause=exc,
                ) from exc
            except httpx.HTTPError as exc:
                raise PublishError(f"nsqd unreachable at {self.nsqd_url}: {exc}", cause=exc) from exc

        logger.debug("published %d bytes", len(payload), extra={"topic": topic})

    def ping(self) -> bool:
        with self._lock:
            try:
                resp = self._client.get("/ping")
            except httpx.HTTPError:
                return False
        return resp.status_code == 200

    def close(self) -> None:
        with self._lock:
            self._client.close()

    def __enter__(self) -> "NsqPublisher":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

"""Best-effort user-visible notifications."""
from __future__ import annotations

import abc
import json
import logging
import time
from typing import Any, List

logger = logging.getLogger(__name__)


class Notifier(abc.ABC):
    """Delivers short user-visible notices to the host."""

    @abc.abstractmethod
    async def notify(self, message: str, *, transient: bool = False) -> None:
        raise NotImplementedError


class LogNotifier(Notifier):
    async def notify(self, message: str, *, transient: bool = False) -> None:
        logger.info("notify.message", extra={"notice": message, "transient": transient})


class MemoryNotifier(Notifier):
    """Keeps notices in memory; used by embedding hosts that poll for them."""

    def __init__(self) -> None:
        self.messages: List[str] = []

    async def notify(self, message: str, *, transient: bool = False) -> None:
        self.messages.append(message)


class RedisNotifier(Notifier):
    """Publishes notices on a Redis channel for the host UI."""

    def __init__(self, client: Any, channel: str) -> None:
        self._client = client
        self._channel = channel

    async def notify(self, message: str, *, transient: bool = False) -> None:
        payload = json.dumps({"message": message, "transient": transient, "ts": int(time.time())}, ensure_ascii=False)
        try:
            await self._client.publish(self._channel, payload)
        except Exception as exc:
            logger.warning("notify.publish.error", extra={"channel": self._channel, "error": repr(exc)})


__all__ = ["Notifier", "LogNotifier", "MemoryNotifier", "RedisNotifier"]

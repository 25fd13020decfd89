"""The two user toggles read by the interception hooks on every firing."""
from __future__ import annotations

import abc
import logging
from typing import Any, Callable, Dict, List, Optional

from .settings import ToggleSettings

logger = logging.getLogger(__name__)

SEND_AS_VOICE = "sendAsVM"
ALL_AS_VOICE = "allAsVM"
TOGGLE_KEYS = (SEND_AS_VOICE, ALL_AS_VOICE)

_BOOL_TRUTHY = {"1", "true", "yes", "on"}

ToggleListener = Callable[[str, bool], None]


class ToggleStore(abc.ABC):
    """Read accessor for the host-owned boolean settings."""

    @abc.abstractmethod
    async def get(self, key: str) -> bool:
        raise NotImplementedError

    @abc.abstractmethod
    async def set(self, key: str, value: bool) -> None:
        raise NotImplementedError


class MemoryToggleStore(ToggleStore):
    def __init__(self, values: Optional[Dict[str, bool]] = None) -> None:
        self._values: Dict[str, bool] = dict(values or {})
        self._listeners: List[ToggleListener] = []

    @classmethod
    def from_settings(cls, cfg: ToggleSettings) -> "MemoryToggleStore":
        return cls({SEND_AS_VOICE: cfg.send_as_voice, ALL_AS_VOICE: cfg.all_as_voice})

    async def get(self, key: str) -> bool:
        return bool(self._values.get(key, False))

    async def set(self, key: str, value: bool) -> None:
        self._values[key] = bool(value)
        for listener in list(self._listeners):
            try:
                listener(key, bool(value))
            except Exception:
                logger.exception("toggles.listener.failed", extra={"key": key})

    def watch(self, listener: ToggleListener) -> Callable[[], None]:
        """Register a change listener; returns an idempotent unsubscribe."""
        self._listeners.append(listener)

        def _unwatch() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unwatch


class RedisToggleStore(ToggleStore):
    """Toggles kept in a Redis hash written by the host settings UI."""

    def __init__(self, client: Any, key: str, *, defaults: Optional[Dict[str, bool]] = None) -> None:
        self._client = client
        self._key = key
        self._defaults: Dict[str, bool] = dict(defaults or {})

    @classmethod
    def from_settings(cls, client: Any, cfg: ToggleSettings) -> "RedisToggleStore":
        return cls(
            client,
            cfg.redis_key,
            defaults={SEND_AS_VOICE: cfg.send_as_voice, ALL_AS_VOICE: cfg.all_as_voice},
        )

    async def get(self, key: str) -> bool:
        default = self._defaults.get(key, False)
        try:
            raw = await self._client.hget(self._key, key)
        except Exception as exc:
            logger.warning("toggles.read.error", extra={"key": key, "error": repr(exc)})
            return default
        if raw is None:
            return default
        if isinstance(raw, bytes):
            raw = raw.decode("utf-8", errors="ignore")
        return str(raw).strip().lower() in _BOOL_TRUTHY

    async def set(self, key: str, value: bool) -> None:
        await self._client.hset(self._key, key, "1" if value else "0")


__all__ = [
    "SEND_AS_VOICE",
    "ALL_AS_VOICE",
    "TOGGLE_KEYS",
    "ToggleStore",
    "MemoryToggleStore",
    "RedisToggleStore",
]

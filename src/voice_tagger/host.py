"""Host-side interception points and capability discovery."""
from __future__ import annotations

import inspect
import logging
from typing import Any, Callable, Dict, Iterable, List, Optional, Type

from .models import HostRecord, LoadMessagesAction, MessageAction, UploadRecord

logger = logging.getLogger(__name__)

Hook = Callable[[Any], Any]

UPLOAD_LOCAL_FILES = "uploadLocalFiles"
CLOUD_UPLOAD = "CloudUpload"
UPLOAD_POINTS = (UPLOAD_LOCAL_FILES, CLOUD_UPLOAD)

LOAD_MESSAGES_SUCCESS = "LOAD_MESSAGES_SUCCESS"
MESSAGE_CREATE = "MESSAGE_CREATE"
MESSAGE_UPDATE = "MESSAGE_UPDATE"


def action_point(action_type: str, store: str = "MessageStore") -> str:
    return f"{store}:{action_type}"


LOAD_MESSAGES_POINT = action_point(LOAD_MESSAGES_SUCCESS)
MESSAGE_CREATE_POINT = action_point(MESSAGE_CREATE)
MESSAGE_UPDATE_POINT = action_point(MESSAGE_UPDATE)

PAYLOAD_MODELS: Dict[str, Type[HostRecord]] = {
    UPLOAD_LOCAL_FILES: UploadRecord,
    CLOUD_UPLOAD: UploadRecord,
    LOAD_MESSAGES_POINT: LoadMessagesAction,
    MESSAGE_CREATE_POINT: MessageAction,
    MESSAGE_UPDATE_POINT: MessageAction,
}


class InterceptionPoint:
    """A named place in the host's dispatch where "before" hooks may run.

    When ``awaits_hooks`` is true the host awaits every hook before it carries
    on. Otherwise hooks are called synchronously and their results ignored.
    """

    def __init__(self, name: str, *, awaits_hooks: bool = True) -> None:
        self.name = name
        self.awaits_hooks = awaits_hooks
        self._hooks: List[Hook] = []

    @property
    def hook_count(self) -> int:
        return len(self._hooks)

    def add_hook(self, hook: Hook) -> Callable[[], None]:
        self._hooks.append(hook)
        removed = False

        def _remove() -> None:
            nonlocal removed
            if removed:
                return
            removed = True
            for index, candidate in enumerate(self._hooks):
                if candidate is hook:
                    del self._hooks[index]
                    break

        return _remove

    async def run(self, payload: Any) -> Any:
        for hook in list(self._hooks):
            result = hook(payload)
            if not inspect.isawaitable(result):
                continue
            if self.awaits_hooks:
                await result
            elif inspect.iscoroutine(result):
                logger.warning("host.hook.not_awaited", extra={"point": self.name})
                result.close()
        return payload


class CapabilityRegistry:
    """Capability discovery: resolves interception points by name."""

    def __init__(self, points: Optional[Iterable[InterceptionPoint]] = None) -> None:
        self._points: Dict[str, InterceptionPoint] = {}
        for point in points or []:
            self.provide(point)

    def provide(self, point: InterceptionPoint) -> InterceptionPoint:
        self._points[point.name] = point
        return point

    def resolve(self, name: str) -> Optional[InterceptionPoint]:
        return self._points.get(name)

    def names(self) -> List[str]:
        return list(self._points)


def default_surface(*, awaits_hooks: bool = True) -> CapabilityRegistry:
    """Registry with the two upload points and the three message-store actions."""
    return CapabilityRegistry(
        InterceptionPoint(name, awaits_hooks=awaits_hooks)
        for name in (*UPLOAD_POINTS, LOAD_MESSAGES_POINT, MESSAGE_CREATE_POINT, MESSAGE_UPDATE_POINT)
    )


def parse_payload(point_name: str, raw: Dict[str, Any]) -> HostRecord:
    model = PAYLOAD_MODELS.get(point_name)
    if model is None:
        raise KeyError(point_name)
    return model.model_validate(raw)


__all__ = [
    "Hook",
    "UPLOAD_LOCAL_FILES",
    "CLOUD_UPLOAD",
    "UPLOAD_POINTS",
    "LOAD_MESSAGES_SUCCESS",
    "MESSAGE_CREATE",
    "MESSAGE_UPDATE",
    "LOAD_MESSAGES_POINT",
    "MESSAGE_CREATE_POINT",
    "MESSAGE_UPDATE_POINT",
    "PAYLOAD_MODELS",
    "action_point",
    "InterceptionPoint",
    "CapabilityRegistry",
    "default_surface",
    "parse_payload",
]

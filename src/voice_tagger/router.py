"""Registers the voice-message hooks on the host's interception points."""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Awaitable, Callable, List, Optional, Sequence, Set

from .classifier import first_audio_attachment, is_eligible_attachment, is_eligible_item
from .errors import HostModuleMissing
from .host import (
    LOAD_MESSAGES_POINT,
    MESSAGE_CREATE_POINT,
    MESSAGE_UPDATE_POINT,
    UPLOAD_POINTS,
    CapabilityRegistry,
    Hook,
    InterceptionPoint,
)
from .models import LoadMessagesAction, MessageAction, MessageRecord, UploadRecord
from .notify import Notifier
from .pipeline import VoiceMessagePipeline
from .tagger import has_marker, tag_message, tag_upload
from .toggles import ALL_AS_VOICE, SEND_AS_VOICE, ToggleStore

logger = logging.getLogger(__name__)


def _noop() -> None:
    return None


@dataclass
class _Registration:
    name: str
    active: bool = True
    unregister: Callable[[], None] = field(default=_noop)


Handler = Callable[[_Registration, object], Awaitable[None]]


class InterceptionRouter:
    """Wires the tagging pipeline into the host.

    Awaiting interception points gate the host until the carrier is tagged.
    On points that do not await their hooks the work runs as a tracked task,
    so the carrier may reach the host first and gets its voice-message fields
    once the task settles (see :meth:`drain`).
    """

    def __init__(
        self,
        *,
        registry: CapabilityRegistry,
        toggles: ToggleStore,
        pipeline: VoiceMessagePipeline,
        notifier: Optional[Notifier] = None,
        upload_points: Sequence[str] = UPLOAD_POINTS,
    ) -> None:
        self._registry = registry
        self._toggles = toggles
        self._pipeline = pipeline
        self._notifier = notifier
        self._upload_points = tuple(upload_points)
        self._registrations: List[_Registration] = []
        self._inflight: Set[asyncio.Task] = set()
        self._started = False

    @property
    def registered_points(self) -> List[str]:
        return [registration.name for registration in self._registrations]

    @property
    def inflight(self) -> int:
        return len(self._inflight)

    async def start(self) -> List[str]:
        """Register every hook; returns the names of points the host lacks."""
        if self._started:
            return []
        self._started = True

        missing: List[str] = []
        for name in self._upload_points:
            self._register(name, self._on_upload, missing)
        self._register(LOAD_MESSAGES_POINT, self._on_load_messages, missing)
        self._register(MESSAGE_CREATE_POINT, self._on_message, missing)
        self._register(MESSAGE_UPDATE_POINT, self._on_message, missing)

        logger.info("router.started", extra={"points": self.registered_points, "missing": missing})
        if missing and self._notifier is not None:
            await self._notifier.notify(f"Voice messages unavailable for: {', '.join(missing)}")
        return missing

    async def stop(self) -> None:
        registrations, self._registrations = self._registrations, []
        for registration in registrations:
            registration.active = False
            registration.unregister()
            registration.unregister = _noop

        tasks = list(self._inflight)
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        self._inflight.clear()

        if self._started:
            logger.info("router.stopped", extra={"points": [r.name for r in registrations]})
        self._started = False

    async def drain(self) -> None:
        """Wait for deferred hook work started on non-awaiting points."""
        while self._inflight:
            await asyncio.gather(*list(self._inflight), return_exceptions=True)

    def _resolve(self, name: str) -> InterceptionPoint:
        point = self._registry.resolve(name)
        if point is None:
            raise HostModuleMissing(name)
        return point

    def _register(self, name: str, handler: Handler, missing: List[str]) -> None:
        try:
            point = self._resolve(name)
        except HostModuleMissing as exc:
            logger.warning("router.point.missing", extra={"point": exc.name})
            missing.append(exc.name)
            return

        registration = _Registration(name=name)
        registration.unregister = point.add_hook(self._make_hook(point, registration, handler))
        self._registrations.append(registration)

    def _make_hook(self, point: InterceptionPoint, registration: _Registration, handler: Handler) -> Hook:
        if point.awaits_hooks:

            async def _gated(payload: object) -> None:
                await self._guarded(registration, handler, payload)

            return _gated

        def _deferred(payload: object) -> None:
            try:
                loop = asyncio.get_running_loop()
            except RuntimeError:
                logger.error("router.hook.no_loop", extra={"point": registration.name})
                return
            task = loop.create_task(self._guarded(registration, handler, payload))
            self._inflight.add(task)
            task.add_done_callback(self._inflight.discard)

        return _deferred

    async def _guarded(self, registration: _Registration, handler: Handler, payload: object) -> None:
        if not registration.active:
            return
        try:
            await handler(registration, payload)
        except asyncio.CancelledError:
            raise
        except Exception:
            logger.exception("router.hook.failed", extra={"point": registration.name})

    async def _on_upload(self, registration: _Registration, upload: UploadRecord) -> None:
        if not await self._toggles.get(SEND_AS_VOICE):
            return
        if has_marker(upload.flags):
            return

        item = upload.primary_item()
        if not is_eligible_item(item):
            return

        envelope = await self._pipeline.envelope_for(item.to_asset())
        if not registration.active:
            logger.debug("router.upload.discarded", extra={"point": registration.name})
            return
        tag_upload(upload, item, envelope)

    async def _on_load_messages(self, registration: _Registration, action: LoadMessagesAction) -> None:
        if not await self._toggles.get(ALL_AS_VOICE):
            return

        results = await asyncio.gather(
            *(self._process_message(registration, message, first_only=False) for message in action.messages),
            return_exceptions=True,
        )
        for message, result in zip(action.messages, results):
            if isinstance(result, asyncio.CancelledError):
                raise result
            if isinstance(result, Exception):
                logger.error(
                    "router.message.failed",
                    extra={"point": registration.name, "messageId": message.id},
                    exc_info=result,
                )

    async def _on_message(self, registration: _Registration, action: MessageAction) -> None:
        if not await self._toggles.get(ALL_AS_VOICE):
            return
        await self._process_message(registration, action.message, first_only=True)

    async def _process_message(self, registration: _Registration, message: MessageRecord, *, first_only: bool) -> None:
        if has_marker(message.flags):
            return

        if first_only:
            first = first_audio_attachment(message)
            targets = [first] if first is not None else []
        else:
            targets = [attachment for attachment in message.attachments if is_eligible_attachment(attachment)]
        if not targets:
            return

        envelopes = await asyncio.gather(*(self._pipeline.envelope_for(attachment.to_asset()) for attachment in targets))
        if not registration.active:
            logger.debug("router.message.discarded", extra={"point": registration.name, "messageId": message.id})
            return
        tag_message(message, zip(targets, envelopes))


__all__ = ["InterceptionRouter"]

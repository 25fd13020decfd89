"""Redis bridge: runs host records queued by the host through the interception points."""
from __future__ import annotations

import asyncio
import json
import logging
import signal
from typing import Any, Dict, List, Optional

from pydantic import ValidationError
from redis.asyncio import Redis

from .host import CapabilityRegistry, default_surface, parse_payload
from .notify import RedisNotifier
from .pipeline import VoiceMessagePipeline
from .router import InterceptionRouter
from .settings import RedisSettings, Settings
from .toggles import MemoryToggleStore, RedisToggleStore, ToggleStore

logger = logging.getLogger(__name__)


def build_toggles(cfg: Settings, client: Any) -> ToggleStore:
    backend = cfg.toggles.backend
    if backend == "redis":
        return RedisToggleStore.from_settings(client, cfg.toggles)
    if backend == "memory":
        return MemoryToggleStore.from_settings(cfg.toggles)
    raise RuntimeError(f"unsupported toggle backend: {backend}")


async def handle_envelope(registry: CapabilityRegistry, raw: str) -> Optional[Dict[str, Any]]:
    """Run one queued host record through its interception point.

    Returns the envelope to hand back to the host, or ``None`` when the
    message cannot be understood at all. Records that fail validation or name
    an unknown point are returned unchanged so the host operation proceeds.
    """
    try:
        data = json.loads(raw)
        point_name = str(data["point"])
        payload = data["payload"]
    except (json.JSONDecodeError, KeyError, TypeError) as exc:
        logger.error("service.envelope.invalid", extra={"raw": raw, "error": repr(exc)})
        return None

    point = registry.resolve(point_name)
    if point is None:
        logger.warning("service.point.unknown", extra={"point": point_name})
        return {"point": point_name, "payload": payload}

    try:
        record = parse_payload(point_name, payload)
    except (ValidationError, KeyError) as exc:
        logger.warning("service.payload.invalid", extra={"point": point_name, "error": repr(exc)})
        return {"point": point_name, "payload": payload}

    await point.run(record)
    return {"point": point_name, "payload": record.to_host()}


async def worker_loop(
    name: str,
    client: Any,
    registry: CapabilityRegistry,
    in_queue: str,
    out_queue: str,
    poll_timeout: int,
) -> None:
    logger.info("service.worker.started", extra={"worker": name, "queue": in_queue})
    while True:
        item = await client.blpop(in_queue, timeout=poll_timeout)
        if not item:
            continue
        _, raw = item
        try:
            result = await handle_envelope(registry, raw)
        except Exception:
            logger.exception("service.envelope.failed", extra={"worker": name})
            continue
        if result is None:
            continue
        await client.rpush(out_queue, json.dumps(result, ensure_ascii=False))


def start_workers(
    concurrency: int,
    client: Any,
    registry: CapabilityRegistry,
    redis_cfg: RedisSettings,
) -> List[asyncio.Task]:
    return [
        asyncio.create_task(
            worker_loop(f"W{i+1}", client, registry, redis_cfg.in_queue, redis_cfg.out_queue, redis_cfg.poll_timeout)
        )
        for i in range(concurrency)
    ]


async def run_service(cfg: Settings) -> None:
    redis_cfg = cfg.redis
    client = Redis(host=redis_cfg.host, port=redis_cfg.port, db=redis_cfg.db, decode_responses=True)

    notifier = RedisNotifier(client, redis_cfg.notify_channel)
    registry = default_surface(awaits_hooks=True)
    router = InterceptionRouter(
        registry=registry,
        toggles=build_toggles(cfg, client),
        pipeline=VoiceMessagePipeline.from_settings(cfg, notifier=notifier),
        notifier=notifier,
    )

    stop_event = asyncio.Event()

    def _graceful_stop(*_: Any) -> None:
        logger.info("service.shutdown.requested")
        stop_event.set()

    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, _graceful_stop)
        except NotImplementedError:
            pass

    await router.start()
    logger.info(
        "service.starting",
        extra={
            "in_queue": redis_cfg.in_queue,
            "out_queue": redis_cfg.out_queue,
            "points": router.registered_points,
            "concurrency": cfg.service.concurrency,
        },
    )

    workers = start_workers(cfg.service.concurrency, client, registry, redis_cfg)
    try:
        await stop_event.wait()
    finally:
        await router.stop()
        for w in workers:
            w.cancel()
        await asyncio.gather(*workers, return_exceptions=True)
        try:
            await client.aclose()
        except Exception:
            logger.debug("service.redis.close_failed", exc_info=True)
        logger.info("service.stopped")


__all__ = ["build_toggles", "handle_envelope", "worker_loop", "start_workers", "run_service"]

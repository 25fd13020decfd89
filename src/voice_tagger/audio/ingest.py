from __future__ import annotations

import asyncio
import inspect
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, List, Optional

import httpx

from ..errors import ByteSourceError

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class IngestLimits:
    max_bytes: int
    fetch_timeout: float = 10.0


class AudioFetcher:
    """Resolves an attachment byte source into raw bytes.

    Accepts raw bytes, an ``http(s)`` URL, a filesystem path, or a host
    supplied reader (a zero-argument callable returning bytes, optionally
    awaitable). URL bodies are streamed and abandoned as soon as they pass
    ``max_bytes``.
    """

    def __init__(self, *, limits: IngestLimits, transport: Optional[httpx.AsyncBaseTransport] = None) -> None:
        self._limits = limits
        self._transport = transport

    async def read(self, source: Any, *, declared_size: Optional[int] = None) -> bytes:
        if source is None:
            raise ByteSourceError("attachment has no byte source")
        if declared_size is not None:
            self._enforce_size(declared_size)

        if isinstance(source, (bytes, bytearray, memoryview)):
            data = bytes(source)
        elif isinstance(source, str) and source.startswith(("http://", "https://")):
            data = await self._fetch_url(source)
        elif isinstance(source, (str, Path)):
            data = await self._read_path(Path(source))
        elif callable(source):
            data = await self._call_reader(source)
        else:
            raise ByteSourceError(f"unsupported byte source: {type(source).__name__}")

        self._enforce_size(len(data))
        return data

    async def _fetch_url(self, url: str) -> bytes:
        chunks: List[bytes] = []
        received = 0
        try:
            async with httpx.AsyncClient(
                timeout=self._limits.fetch_timeout,
                follow_redirects=True,
                transport=self._transport,
            ) as client:
                async with client.stream("GET", url) as response:
                    response.raise_for_status()
                    length = response.headers.get("Content-Length")
                    if length is not None and length.isdigit():
                        self._enforce_size(int(length))
                    async for chunk in response.aiter_bytes():
                        received += len(chunk)
                        self._enforce_size(received)
                        chunks.append(chunk)
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            logger.warning("ingest.fetch.error", extra={"url": url, "error": repr(exc)})
            raise ByteSourceError(f"failed to fetch {url}") from exc
        return b"".join(chunks)

    async def _read_path(self, path: Path) -> bytes:
        try:
            return await asyncio.to_thread(path.read_bytes)
        except (OSError, ValueError) as exc:
            raise ByteSourceError(f"failed to read {path}") from exc

    async def _call_reader(self, reader: Any) -> bytes:
        try:
            result = reader()
            if inspect.isawaitable(result):
                result = await result
        except Exception as exc:
            raise ByteSourceError("host file reader failed") from exc
        if not isinstance(result, (bytes, bytearray, memoryview)):
            raise ByteSourceError("host file reader returned no bytes")
        return bytes(result)

    def _enforce_size(self, size: int) -> None:
        if size > self._limits.max_bytes:
            raise ByteSourceError("audio payload exceeds configured size limit")

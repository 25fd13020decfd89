from __future__ import annotations

import asyncio
import io
import logging
from typing import Optional

import numpy as np

try:  # pragma: no cover - optional dependency guard
    import soundfile as sf
except Exception:  # pragma: no cover
    sf = None  # type: ignore[assignment]

from ..errors import DecodeError
from .ingest import AudioFetcher
from .types import AudioAsset, PcmBuffer

logger = logging.getLogger(__name__)


class AudioDecoder:
    """Decodes compressed audio into a float PCM buffer for analysis only."""

    def __init__(self, *, fetcher: Optional[AudioFetcher] = None) -> None:
        self._fetcher = fetcher

    async def decode_asset(self, asset: AudioAsset) -> PcmBuffer:
        if self._fetcher is None:
            raise DecodeError("no byte source fetcher configured")
        data = await self._fetcher.read(asset.byte_source, declared_size=asset.size_bytes)
        return await self.decode(data)

    async def decode(self, data: bytes) -> PcmBuffer:
        if sf is None:
            raise DecodeError("soundfile is not available")
        if not data:
            raise DecodeError("audio payload is empty")
        return await asyncio.to_thread(self._decode_sync, data)

    def _decode_sync(self, data: bytes) -> PcmBuffer:
        try:
            with sf.SoundFile(io.BytesIO(data)) as handle:
                sample_rate = int(handle.samplerate)
                channels = int(handle.channels)
                samples = handle.read(dtype="float32", always_2d=True)
        except Exception as exc:
            logger.debug("decoder.decode.error", exc_info=True)
            raise DecodeError("unsupported audio encoding") from exc

        if sample_rate <= 0:
            raise DecodeError("decoded audio reports no sample rate")

        frames = int(samples.shape[0])
        return PcmBuffer(
            samples=np.ascontiguousarray(samples, dtype=np.float32),
            sample_rate=sample_rate,
            channel_count=channels,
            duration_seconds=float(frames) / float(sample_rate),
        )

from __future__ import annotations

import logging
from typing import Optional

from .audio import AudioAsset, AudioDecoder, AudioFetcher, IngestLimits
from .errors import DecodeError
from .notify import Notifier
from .settings import Settings
from .waveform import FallbackPolicy, WaveformEnvelope, quantize, reduce
from .waveform.reducer import AMPLITUDE_MODES, MEAN_ABS

logger = logging.getLogger(__name__)


class VoiceMessagePipeline:
    """Turns an attachment byte source into a waveform envelope.

    Decode failures never leave this class: they are logged and answered with
    the fallback envelope.
    """

    def __init__(
        self,
        *,
        decoder: AudioDecoder,
        fallback: FallbackPolicy,
        bucket_count: int = 100,
        bit_depth: int = 8,
        amplitude: str = MEAN_ABS,
        notifier: Optional[Notifier] = None,
    ) -> None:
        if bucket_count <= 0:
            raise ValueError(f"bucket_count must be positive, got {bucket_count}")
        if amplitude not in AMPLITUDE_MODES:
            raise ValueError(f"unknown amplitude mode: {amplitude}")
        self._decoder = decoder
        self._fallback = fallback
        self._bucket_count = bucket_count
        self._bit_depth = bit_depth
        self._amplitude = amplitude
        self._notifier = notifier

    @classmethod
    def from_settings(cls, cfg: Settings, *, notifier: Optional[Notifier] = None) -> "VoiceMessagePipeline":
        fetcher = AudioFetcher(
            limits=IngestLimits(max_bytes=cfg.ingest.max_bytes, fetch_timeout=cfg.ingest.fetch_timeout)
        )
        return cls(
            decoder=AudioDecoder(fetcher=fetcher),
            fallback=FallbackPolicy.from_settings(cfg.waveform),
            bucket_count=cfg.waveform.bucket_count,
            bit_depth=cfg.waveform.bit_depth,
            amplitude=cfg.waveform.amplitude,
            notifier=notifier,
        )

    @property
    def fallback(self) -> FallbackPolicy:
        return self._fallback

    async def envelope_for(self, asset: AudioAsset) -> WaveformEnvelope:
        try:
            pcm = await self._decoder.decode_asset(asset)
        except DecodeError as exc:
            logger.warning("pipeline.decode.fallback", extra={"mime_type": asset.mime_type, "error": repr(exc)})
            await self._notify_fallback()
            return self._fallback.envelope()

        reduced = reduce(pcm, self._bucket_count, self._amplitude)
        return WaveformEnvelope(
            buckets=tuple(quantize(reduced.levels, self._bit_depth)),
            duration_seconds=reduced.duration_seconds,
            bit_depth=self._bit_depth,
        )

    async def _notify_fallback(self) -> None:
        if self._notifier is None:
            return
        await self._notifier.notify("Could not read audio, sending with a placeholder waveform", transient=True)


__all__ = ["VoiceMessagePipeline"]

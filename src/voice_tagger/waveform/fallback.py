from __future__ import annotations

import binascii
from typing import Optional

from ..settings import WaveformSettings
from .encoder import max_level, unpack
from .types import WaveformEnvelope

DEFAULT_DURATION_SECONDS = 60.0


class FallbackPolicy:
    """Constant stand-in envelope used when an attachment cannot be decoded.

    A configured ``waveform`` must hold exactly ``bucket_count`` buckets,
    each within the range of ``bit_depth``.
    """

    def __init__(
        self,
        *,
        bucket_count: int,
        bit_depth: int,
        duration_seconds: float = DEFAULT_DURATION_SECONDS,
        level: int = 1,
        waveform: Optional[str] = None,
    ) -> None:
        if bucket_count <= 0:
            raise ValueError(f"bucket_count must be positive, got {bucket_count}")
        top = max_level(bit_depth)
        if waveform:
            try:
                buckets = tuple(unpack(waveform))
            except (binascii.Error, ValueError) as exc:
                raise ValueError("fallback waveform is not valid base64") from exc
            if len(buckets) != bucket_count:
                raise ValueError(f"fallback waveform has {len(buckets)} buckets, expected {bucket_count}")
            if max(buckets) > top:
                raise ValueError(f"fallback waveform exceeds {top}, the maximum level at {bit_depth} bits")
        else:
            flat = min(max(level, 0), top)
            buckets = tuple([flat] * bucket_count)
        self._envelope = WaveformEnvelope(
            buckets=buckets,
            duration_seconds=float(duration_seconds),
            bit_depth=bit_depth,
        )

    @classmethod
    def from_settings(cls, cfg: WaveformSettings) -> "FallbackPolicy":
        return cls(
            bucket_count=cfg.bucket_count,
            bit_depth=cfg.bit_depth,
            duration_seconds=cfg.fallback_duration_seconds,
            level=cfg.fallback_level,
            waveform=cfg.fallback_waveform,
        )

    def envelope(self) -> WaveformEnvelope:
        return self._envelope

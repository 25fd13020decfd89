from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

import numpy as np

from .encoder import pack


@dataclass(slots=True)
class ReducedWaveform:
    """Normalized per-bucket amplitude levels in [0, 1]."""

    levels: np.ndarray
    duration_seconds: float


@dataclass(slots=True, frozen=True)
class WaveformEnvelope:
    """Quantized buckets plus duration, the data stamped onto a carrier."""

    buckets: Tuple[int, ...]
    duration_seconds: float
    bit_depth: int

    @property
    def waveform(self) -> str:
        return pack(self.buckets)

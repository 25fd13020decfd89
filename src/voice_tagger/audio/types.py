from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

import numpy as np


@dataclass(slots=True)
class AudioAsset:
    """Audio attachment handed over by the host for one transform call."""

    byte_source: Any
    mime_type: Optional[str]
    size_bytes: Optional[int] = None


@dataclass(slots=True)
class PcmBuffer:
    """Decoded PCM, shaped (frames, channels), float32 in [-1, 1]."""

    samples: np.ndarray
    sample_rate: int
    channel_count: int
    duration_seconds: Optional[float] = None

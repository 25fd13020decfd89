"""Quantization and text-safe packing of waveform buckets.

Each bucket is stored as one unsigned byte, whatever the bit depth, and the
byte string is base64 encoded. The host renderer reads this string back into
one amplitude per byte.
"""

from __future__ import annotations

import base64
from typing import Iterable, List, Sequence

import numpy as np

MIN_BIT_DEPTH = 1
MAX_BIT_DEPTH = 8


def max_level(bit_depth: int) -> int:
    if not MIN_BIT_DEPTH <= bit_depth <= MAX_BIT_DEPTH:
        raise ValueError(f"bit depth must be within {MIN_BIT_DEPTH}..{MAX_BIT_DEPTH}, got {bit_depth}")
    return (1 << bit_depth) - 1


def quantize(levels: Sequence[float] | np.ndarray, bit_depth: int) -> List[int]:
    """Scale normalized levels to ``[0, 2**bit_depth - 1]`` with floor and clamp."""
    top = max_level(bit_depth)
    values = np.nan_to_num(np.asarray(levels, dtype=np.float64), nan=0.0, posinf=1.0, neginf=0.0)
    scaled = np.floor(values * top)
    return [int(v) for v in np.clip(scaled, 0, top)]


def pack(values: Iterable[int]) -> str:
    raw = bytes(values)  # raises ValueError outside 0..255
    return base64.b64encode(raw).decode("ascii")


def unpack(text: str) -> List[int]:
    raw = base64.b64decode(text, validate=True)
    return list(raw)


def encode(levels: Sequence[float] | np.ndarray, bit_depth: int) -> str:
    return pack(quantize(levels, bit_depth))


__all__ = ["max_level", "quantize", "pack", "unpack", "encode"]

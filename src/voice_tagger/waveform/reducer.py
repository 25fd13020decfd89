from __future__ import annotations

import numpy as np

from ..audio.types import PcmBuffer
from .types import ReducedWaveform

MEAN_ABS = "mean_abs"
RMS = "rms"
AMPLITUDE_MODES = {MEAN_ABS, RMS}


def _first_channel(pcm: PcmBuffer) -> np.ndarray:
    samples = np.asarray(pcm.samples, dtype=np.float64)
    if samples.ndim == 2:
        if samples.shape[1] == 0:
            return np.zeros(0, dtype=np.float64)
        return samples[:, 0]
    return samples.reshape(-1)


def _duration(pcm: PcmBuffer, frames: int) -> float:
    if pcm.duration_seconds is not None:
        return float(pcm.duration_seconds)
    if pcm.sample_rate <= 0:
        return 0.0
    return float(frames) / float(pcm.sample_rate)


def reduce(pcm: PcmBuffer, bucket_count: int, amplitude: str = MEAN_ABS) -> ReducedWaveform:
    """Reduce channel 0 of ``pcm`` to ``bucket_count`` levels normalized to the loudest block.

    Blocks are ``len // bucket_count`` samples wide and the trailing remainder
    is dropped. With fewer samples than buckets every sample is its own block
    and the remaining buckets stay silent.
    """
    if bucket_count <= 0:
        raise ValueError("bucket_count must be positive")
    if amplitude not in AMPLITUDE_MODES:
        raise ValueError(f"unknown amplitude mode: {amplitude}")

    channel = _first_channel(pcm)
    duration = _duration(pcm, channel.size)
    values = np.zeros(bucket_count, dtype=np.float64)
    if channel.size == 0:
        return ReducedWaveform(levels=values, duration_seconds=duration)

    block_size = max(1, channel.size // bucket_count)
    filled = min(bucket_count, channel.size // block_size)
    blocks = channel[: filled * block_size].reshape(filled, block_size)
    if amplitude == RMS:
        values[:filled] = np.sqrt(np.mean(np.square(blocks), axis=1))
    else:
        values[:filled] = np.mean(np.abs(blocks), axis=1)

    peak = float(values.max())
    if peak <= 0.0:
        # silence
        return ReducedWaveform(levels=np.zeros(bucket_count, dtype=np.float64), duration_seconds=duration)

    levels = np.clip(values / peak, 0.0, 1.0)
    return ReducedWaveform(levels=levels, duration_seconds=duration)


__all__ = ["reduce", "MEAN_ABS", "RMS", "AMPLITUDE_MODES"]

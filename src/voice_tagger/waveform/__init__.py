"""Waveform reduction, encoding and fallback."""

from .encoder import encode, max_level, pack, quantize, unpack
from .fallback import FallbackPolicy
from .reducer import AMPLITUDE_MODES, MEAN_ABS, RMS, reduce
from .types import ReducedWaveform, WaveformEnvelope

__all__ = [
    "encode",
    "max_level",
    "pack",
    "quantize",
    "unpack",
    "FallbackPolicy",
    "AMPLITUDE_MODES",
    "MEAN_ABS",
    "RMS",
    "reduce",
    "ReducedWaveform",
    "WaveformEnvelope",
]

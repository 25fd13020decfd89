"""Audio ingestion and decoding."""

from .decoder import AudioDecoder
from .ingest import AudioFetcher, IngestLimits
from .types import AudioAsset, PcmBuffer

__all__ = [
    "AudioDecoder",
    "AudioFetcher",
    "IngestLimits",
    "AudioAsset",
    "PcmBuffer",
]

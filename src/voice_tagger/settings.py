"""Runtime configuration helpers for voice-tagger."""
from __future__ import annotations

import os
from dataclasses import dataclass

_BOOL_TRUTHY = {"1", "true", "yes", "on"}


def _env_bool(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in _BOOL_TRUTHY


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _env_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


@dataclass(frozen=True)
class WaveformSettings:
    bucket_count: int
    bit_depth: int
    amplitude: str
    fallback_duration_seconds: float
    fallback_level: int
    fallback_waveform: str | None

    def __post_init__(self) -> None:
        if self.bucket_count <= 0:
            raise ValueError(f"VT_BUCKET_COUNT must be positive, got {self.bucket_count}")
        if not 1 <= self.bit_depth <= 8:
            raise ValueError(f"VT_BIT_DEPTH must be within 1..8, got {self.bit_depth}")


@dataclass(frozen=True)
class IngestSettings:
    max_bytes: int
    fetch_timeout: float


@dataclass(frozen=True)
class ToggleSettings:
    send_as_voice: bool
    all_as_voice: bool
    backend: str
    redis_key: str


@dataclass(frozen=True)
class RedisSettings:
    host: str
    port: int
    db: int
    in_queue: str
    out_queue: str
    notify_channel: str
    poll_timeout: int


@dataclass(frozen=True)
class ServiceSettings:
    concurrency: int


@dataclass(frozen=True)
class LoggingSettings:
    level: str
    format: str
    file: str | None


@dataclass(frozen=True)
class Settings:
    waveform: WaveformSettings
    ingest: IngestSettings
    toggles: ToggleSettings
    redis: RedisSettings
    service: ServiceSettings
    logging: LoggingSettings


def load_settings() -> Settings:
    """Load settings from environment variables with sensible defaults."""

    waveform_settings = WaveformSettings(
        bucket_count=_env_int("VT_BUCKET_COUNT", 100),
        bit_depth=_env_int("VT_BIT_DEPTH", 8),
        amplitude=os.getenv("VT_AMPLITUDE", "mean_abs").strip().lower(),
        fallback_duration_seconds=_env_float("VT_FALLBACK_DURATION_SECONDS", 60.0),
        fallback_level=_env_int("VT_FALLBACK_LEVEL", 1),
        fallback_waveform=os.getenv("VT_FALLBACK_WAVEFORM") or None,
    )

    ingest_settings = IngestSettings(
        max_bytes=_env_int("VT_MAX_BYTES", 25 * 1024 * 1024),
        fetch_timeout=_env_float("VT_FETCH_TIMEOUT", 10.0),
    )

    toggle_settings = ToggleSettings(
        send_as_voice=_env_bool("VT_SEND_AS_VOICE", True),
        all_as_voice=_env_bool("VT_ALL_AS_VOICE", False),
        backend=os.getenv("VT_TOGGLE_BACKEND", "memory").strip().lower(),
        redis_key=os.getenv("VT_TOGGLE_KEY", "voice_tagger:toggles"),
    )

    redis_settings = RedisSettings(
        host=os.getenv("VT_REDIS_HOST", "localhost"),
        port=_env_int("VT_REDIS_PORT", 6379),
        db=_env_int("VT_REDIS_DB", 0),
        in_queue=os.getenv("VT_REDIS_IN_QUEUE", "voice_tagger.in"),
        out_queue=os.getenv("VT_REDIS_OUT_QUEUE", "voice_tagger.out"),
        notify_channel=os.getenv("VT_REDIS_NOTIFY_CHANNEL", "voice_tagger.notifications"),
        poll_timeout=_env_int("VT_REDIS_POLL_TIMEOUT", 1),
    )

    service_settings = ServiceSettings(
        concurrency=max(1, _env_int("VT_CONCURRENCY", 2)),
    )

    logging_settings = LoggingSettings(
        level=os.getenv("VT_LOG_LEVEL", "INFO"),
        format=os.getenv("VT_LOG_FORMAT", "%(asctime)s - %(name)s - %(levelname)s - %(message)s"),
        file=os.getenv("VT_LOG_FILE") or None,
    )

    return Settings(
        waveform=waveform_settings,
        ingest=ingest_settings,
        toggles=toggle_settings,
        redis=redis_settings,
        service=service_settings,
        logging=logging_settings,
    )


settings = load_settings()

__all__ = [
    "Settings",
    "WaveformSettings",
    "IngestSettings",
    "ToggleSettings",
    "RedisSettings",
    "ServiceSettings",
    "LoggingSettings",
    "settings",
    "load_settings",
]

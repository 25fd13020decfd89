"""
pytest configuration
Shared fixtures: synthetic audio payloads and host records.
"""

import io
from typing import Callable

import numpy as np
import pytest
import soundfile as sf

from voice_tagger.models import Attachment, MessageRecord, UploadItem, UploadRecord

SAMPLE_RATE = 8000


def wav_bytes(samples: np.ndarray, sample_rate: int = SAMPLE_RATE) -> bytes:
    buf = io.BytesIO()
    sf.write(buf, samples, sample_rate, format="WAV", subtype="FLOAT")
    return buf.getvalue()


@pytest.fixture
def make_wav() -> Callable[..., bytes]:
    return wav_bytes


@pytest.fixture
def tone_wav() -> bytes:
    """One second of a 440 Hz tone fading in linearly."""
    t = np.arange(SAMPLE_RATE, dtype=np.float32) / SAMPLE_RATE
    envelope = np.linspace(0.0, 0.8, SAMPLE_RATE, dtype=np.float32)
    return wav_bytes(np.sin(2 * np.pi * 440 * t) * envelope)


@pytest.fixture
def corrupt_bytes() -> bytes:
    return b"this is not an audio stream at all " * 8


@pytest.fixture
def make_upload() -> Callable[..., UploadRecord]:
    def _make(mime_type: str = "audio/mpeg", source=b"", flags: int = 0) -> UploadRecord:
        return UploadRecord(items=[UploadItem(mimeType=mime_type, file=source)], flags=flags)

    return _make


@pytest.fixture
def make_message() -> Callable[..., MessageRecord]:
    def _make(message_id: str, *content_types: str, flags: int = 0, url: str = "https://cdn.example/a.mp3") -> MessageRecord:
        attachments = [
            Attachment(id=f"{message_id}-{index}", content_type=content_type, url=url)
            for index, content_type in enumerate(content_types)
        ]
        return MessageRecord(id=message_id, flags=flags, attachments=attachments)

    return _make


def pytest_configure(config):
    config.addinivalue_line("markers", "unit: unit tests")

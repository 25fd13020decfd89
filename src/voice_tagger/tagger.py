"""In-place voice-message tagging of host records."""
from __future__ import annotations

import logging
from typing import Iterable, Optional, Tuple

from .models import Attachment, MessageRecord, UploadItem, UploadRecord
from .waveform.types import WaveformEnvelope

logger = logging.getLogger(__name__)

# Host-reserved flag: render the attachment as a voice message.
VOICE_MESSAGE_FLAG = 1 << 13
VOICE_MIME_TYPE = "audio/ogg"


def has_marker(flags: Optional[int]) -> bool:
    return bool((flags or 0) & VOICE_MESSAGE_FLAG)


def tag_upload(upload: UploadRecord, item: UploadItem, envelope: WaveformEnvelope) -> bool:
    """Stamp ``envelope`` onto ``item`` and mark ``upload``; no-op once marked."""
    if has_marker(upload.flags):
        return False

    waveform = envelope.waveform
    flags = (upload.flags or 0) | VOICE_MESSAGE_FLAG

    item.mime_type = VOICE_MIME_TYPE
    item.waveform = waveform
    item.duration_secs = envelope.duration_seconds
    upload.flags = flags
    return True


def tag_message(message: MessageRecord, stamps: Iterable[Tuple[Attachment, WaveformEnvelope]]) -> bool:
    """Stamp each attachment with its envelope and mark ``message``; no-op once marked."""
    if has_marker(message.flags):
        return False

    prepared = [(attachment, envelope.waveform, envelope.duration_seconds) for attachment, envelope in stamps]
    if not prepared:
        return False
    flags = (message.flags or 0) | VOICE_MESSAGE_FLAG

    for attachment, waveform, duration in prepared:
        attachment.content_type = VOICE_MIME_TYPE
        attachment.waveform = waveform
        attachment.duration_secs = duration
    message.flags = flags
    logger.debug("tagger.message.tagged", extra={"messageId": message.id, "attachments": len(prepared)})
    return True


def voice_message_url(message: MessageRecord) -> Optional[str]:
    """URL of the voice message carried by a tagged message, if any."""
    if not has_marker(message.flags) or not message.attachments:
        return None
    return message.attachments[0].url


__all__ = [
    "VOICE_MESSAGE_FLAG",
    "VOICE_MIME_TYPE",
    "has_marker",
    "tag_upload",
    "tag_message",
    "voice_message_url",
]

from __future__ import annotations

from typing import Any, Optional

from .models import Attachment, MessageRecord, UploadItem

AUDIO_PREFIX = "audio"


def is_eligible(mime_type: Any) -> bool:
    """True when the declared MIME type denotes audio; missing types are not eligible."""
    return isinstance(mime_type, str) and mime_type.startswith(AUDIO_PREFIX)


def is_eligible_item(item: UploadItem) -> bool:
    return is_eligible(item.mime_type)


def is_eligible_attachment(attachment: Attachment) -> bool:
    return is_eligible(attachment.content_type)


def first_audio_attachment(message: MessageRecord) -> Optional[Attachment]:
    for attachment in message.attachments:
        if is_eligible_attachment(attachment):
            return attachment
    return None


__all__ = [
    "AUDIO_PREFIX",
    "is_eligible",
    "is_eligible_item",
    "is_eligible_attachment",
    "first_audio_attachment",
]

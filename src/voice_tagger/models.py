"""
Host record formats intercepted by voice-tagger.

Field names follow the host's wire format (camelCase on uploads, snake_case on
message-store records). Unknown host fields are kept untouched so a record can
be handed back to the host after mutation.
"""
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .audio.types import AudioAsset


class HostRecord(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    def to_host(self) -> dict[str, Any]:
        """Serialize with the host's field names, keeping only fields the host sent or we set."""
        return self.model_dump(by_alias=True, exclude_unset=True)


class UploadItem(HostRecord):
    """A single file queued for upload"""
    mime_type: Optional[str] = Field(default=None, alias="mimeType", description="declared MIME type")
    file: Any = Field(default=None, description="host file handle, path or URL")
    byte_source: Any = Field(default=None, alias="byteSource", description="explicit byte source")
    waveform: Optional[str] = Field(default=None, description="base64 waveform")
    duration_secs: Optional[float] = Field(default=None, alias="durationSecs", description="duration in seconds")
    size: Optional[int] = Field(default=None, description="file size in bytes, when known")

    @property
    def source(self) -> Any:
        return self.byte_source if self.byte_source is not None else self.file

    def to_asset(self) -> AudioAsset:
        return AudioAsset(byte_source=self.source, mime_type=self.mime_type, size_bytes=self.size)


class UploadRecord(UploadItem):
    """Pending upload; single-file uploads may carry the item fields directly"""
    items: List[UploadItem] = Field(default_factory=list)
    flags: Optional[int] = Field(default=0)

    def primary_item(self) -> UploadItem:
        return self.items[0] if self.items else self


class Attachment(HostRecord):
    """Message attachment as stored by the host's message store"""
    id: Optional[str] = None
    filename: Optional[str] = None
    content_type: Optional[str] = None
    url: Optional[str] = None
    proxy_url: Optional[str] = None
    size: Optional[int] = None
    waveform: Optional[str] = None
    duration_secs: Optional[float] = None

    @property
    def source(self) -> Any:
        return self.url or self.proxy_url

    def to_asset(self) -> AudioAsset:
        return AudioAsset(byte_source=self.source, mime_type=self.content_type, size_bytes=self.size)


class MessageRecord(HostRecord):
    id: Optional[str] = None
    channel_id: Optional[str] = None
    flags: Optional[int] = Field(default=0)
    attachments: List[Attachment] = Field(default_factory=list)


class LoadMessagesAction(HostRecord):
    """LOAD_MESSAGES_SUCCESS payload"""
    type: str = "LOAD_MESSAGES_SUCCESS"
    channel_id: Optional[str] = None
    messages: List[MessageRecord] = Field(default_factory=list)


class MessageAction(HostRecord):
    """MESSAGE_CREATE / MESSAGE_UPDATE payload"""
    type: str = "MESSAGE_CREATE"
    channel_id: Optional[str] = None
    message: MessageRecord


__all__ = [
    "HostRecord",
    "UploadItem",
    "UploadRecord",
    "Attachment",
    "MessageRecord",
    "LoadMessagesAction",
    "MessageAction",
]

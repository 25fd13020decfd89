"""Re-labels audio attachments as voice messages with a computed waveform."""

from .classifier import is_eligible
from .errors import ByteSourceError, DecodeError, HostModuleMissing, VoiceTaggerError
from .host import CapabilityRegistry, InterceptionPoint, default_surface
from .pipeline import VoiceMessagePipeline
from .router import InterceptionRouter
from .tagger import VOICE_MESSAGE_FLAG, has_marker, tag_message, tag_upload

__all__ = [
    "is_eligible",
    "ByteSourceError",
    "DecodeError",
    "HostModuleMissing",
    "VoiceTaggerError",
    "CapabilityRegistry",
    "InterceptionPoint",
    "default_surface",
    "VoiceMessagePipeline",
    "InterceptionRouter",
    "VOICE_MESSAGE_FLAG",
    "has_marker",
    "tag_message",
    "tag_upload",
]

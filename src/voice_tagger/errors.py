"""Exception types raised inside voice-tagger."""


class VoiceTaggerError(Exception):
    """Base class for voice-tagger failures."""


class DecodeError(VoiceTaggerError):
    """Raised when audio bytes cannot be read or decoded."""


class ByteSourceError(DecodeError):
    """Raised when the byte source of an attachment cannot be read."""


class HostModuleMissing(VoiceTaggerError):
    """Raised when an expected interception point is absent from the host."""

    def __init__(self, name: str) -> None:
        super().__init__(f"host interception point not found: {name}")
        self.name = name


__all__ = ["VoiceTaggerError", "DecodeError", "ByteSourceError", "HostModuleMissing"]

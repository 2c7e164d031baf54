"""Shared kernel: exceptions, constrained types, and message catalogues."""

from discord_jukebox.domain.shared.exceptions import (
    ConnectionTimeoutError,
    DomainError,
    InvalidStreamReferenceError,
    PlaybackEngineError,
    ResolutionFailure,
    StreamStartError,
    ValidationError,
    VoiceConnectionError,
)
from discord_jukebox.domain.shared.messages import DiscordUIMessages, ErrorMessages, LogTemplates

__all__ = [
    "ConnectionTimeoutError",
    "DiscordUIMessages",
    "DomainError",
    "ErrorMessages",
    "InvalidStreamReferenceError",
    "LogTemplates",
    "PlaybackEngineError",
    "ResolutionFailure",
    "StreamStartError",
    "ValidationError",
    "VoiceConnectionError",
]

"""Base exception classes for domain-level errors."""

from __future__ import annotations


class DomainError(Exception):
    """Base exception for all domain-level errors."""

    def __init__(self, message: str, code: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__


class ValidationError(DomainError):
    """Raised when domain validation fails."""

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message, code="VALIDATION_ERROR")
        self.field = field


class InvalidStreamReferenceError(ValidationError):
    """Raised when an entry's stream locator does not use an HTTP-family scheme."""

    def __init__(self, stream_ref: str, message: str | None = None) -> None:
        msg = message or f"Invalid stream reference: {stream_ref!r}"
        super().__init__(msg, field="stream_ref")
        self.code = "INVALID_STREAM_REFERENCE"
        self.stream_ref = stream_ref


class ResolutionFailure(DomainError):
    """Raised at the end of a resolution that produced no valid entries."""

    def __init__(self, target: str, message: str | None = None) -> None:
        msg = message or f"No playable entries for {target!r}"
        super().__init__(msg, code="RESOLUTION_FAILURE")
        self.target = target


class VoiceConnectionError(DomainError):
    """Raised when joining a voice channel fails."""

    def __init__(self, guild_id: int, message: str | None = None, code: str | None = None) -> None:
        msg = message or f"Could not join voice in guild {guild_id}"
        super().__init__(msg, code=code or "VOICE_CONNECTION_FAILED")
        self.guild_id = guild_id


class ConnectionTimeoutError(VoiceConnectionError):
    """Raised when the voice connection does not become ready in time."""

    def __init__(self, guild_id: int, timeout: float, message: str | None = None) -> None:
        msg = message or f"Voice connection for guild {guild_id} not ready after {timeout}s"
        super().__init__(guild_id, msg, code="CONNECTION_TIMEOUT")
        self.timeout = timeout


class StreamStartError(DomainError):
    """Raised when the streaming process cannot be spawned."""

    def __init__(self, guild_id: int, message: str | None = None) -> None:
        msg = message or f"Could not start stream process for guild {guild_id}"
        super().__init__(msg, code="STREAM_START_FAILED")
        self.guild_id = guild_id


class PlaybackEngineError(DomainError):
    """Raised when the audio player refuses a source."""

    def __init__(self, guild_id: int, message: str | None = None) -> None:
        msg = message or f"Audio player failed in guild {guild_id}"
        super().__init__(msg, code="PLAYBACK_ENGINE_ERROR")
        self.guild_id = guild_id

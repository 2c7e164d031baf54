"""Port interfaces for the voice connection and its audio player."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable
from typing import IO

from discord_jukebox.domain.shared.types import DiscordSnowflake, PositiveFloat

IdleHandler = Callable[[], Awaitable[None]]
ErrorHandler = Callable[[str], Awaitable[None]]


class AudioPlayer(ABC):
    """Opaque playback engine bound to one voice connection."""

    @abstractmethod
    def play(self, stream: IO[bytes], *, on_idle: IdleHandler, on_error: ErrorHandler) -> None:
        """Start playing *stream*.

        Exactly one of the handlers is awaited on the event loop when the
        source ends, unless ``stop`` or another ``play`` replaced it first.

        Raises:
            PlaybackEngineError: If the engine refuses the source.
        """
        ...

    @abstractmethod
    def stop(self) -> None:
        """Stop the current source without emitting idle or error events."""
        ...

    @property
    @abstractmethod
    def is_playing(self) -> bool:
        ...


class VoiceConnection(ABC):
    """A joined voice channel."""

    @abstractmethod
    def create_player(self) -> AudioPlayer:
        ...

    @abstractmethod
    async def destroy(self) -> None:
        """Leave the channel and release the connection."""
        ...


class VoiceGateway(ABC):
    """Entry point for joining voice channels."""

    @abstractmethod
    async def connect(
        self,
        guild_id: DiscordSnowflake,
        channel_id: DiscordSnowflake,
        *,
        ready_timeout: PositiveFloat,
    ) -> VoiceConnection:
        """Join *channel_id* and wait until the connection is ready.

        Raises:
            ConnectionTimeoutError: If the connection is not ready in time.
        """
        ...

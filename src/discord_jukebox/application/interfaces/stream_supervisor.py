"""Port interface for the per-guild streaming process."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import IO, TYPE_CHECKING

from discord_jukebox.domain.shared.types import DiscordSnowflake

if TYPE_CHECKING:
    from ...domain.playback.entities import Entry


class StreamSupervisor(ABC):
    """Owns at most one live streaming process per guild."""

    @abstractmethod
    def start_stream(self, guild_id: DiscordSnowflake, entry: Entry) -> IO[bytes]:
        """Kill any live process for the guild, then stream *entry*.

        Raises:
            StreamStartError: If the process could not be spawned.
        """
        ...

    @abstractmethod
    def kill(self, guild_id: DiscordSnowflake) -> bool:
        """Terminate the guild's live process. Returns whether one existed."""
        ...

    @abstractmethod
    def is_live(self, guild_id: DiscordSnowflake) -> bool:
        ...

    @abstractmethod
    def live_count(self) -> int:
        ...

    @abstractmethod
    def shutdown(self) -> int:
        """Kill every live process and return how many were killed."""
        ...

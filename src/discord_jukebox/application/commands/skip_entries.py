"""
Skip Entries Command

Command and handler for skipping the current entry and optionally more
entries from the head of the queue.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field, field_validator

from discord_jukebox.domain.shared.messages import DiscordUIMessages
from discord_jukebox.domain.shared.types import DiscordSnowflake
from discord_jukebox.domain.shared.validators import validate_skip_count
from discord_jukebox.utils.reply import format_titles, truncate

if TYPE_CHECKING:
    from ..services.playback_orchestrator import PlaybackOrchestrator


class SkipStatus(Enum):
    """Status codes for skip results."""

    SUCCESS = "success"
    NOTHING_PLAYING = "nothing_playing"


class SkipEntriesCommand(BaseModel):
    """Command to skip *count* entries, the current one included."""

    model_config = ConfigDict(frozen=True)

    guild_id: DiscordSnowflake
    count: int = 1

    @field_validator("count")
    @classmethod
    def _validate_count(cls, v: int) -> int:
        return validate_skip_count(v)


class SkipResult(BaseModel):
    """Result of a skip command."""

    status: SkipStatus
    message: str
    skipped_titles: list[str] = Field(default_factory=list)

    @property
    def is_success(self) -> bool:
        return self.status == SkipStatus.SUCCESS

    @classmethod
    def success(cls, skipped_titles: list[str]) -> SkipResult:
        if len(skipped_titles) == 1:
            message = DiscordUIMessages.SKIPPED_ONE.format(title=truncate(skipped_titles[0]))
        else:
            message = DiscordUIMessages.SKIPPED_MANY.format(
                count=len(skipped_titles),
                titles=format_titles(skipped_titles),
            )
        return cls(status=SkipStatus.SUCCESS, message=message, skipped_titles=skipped_titles)

    @classmethod
    def nothing_playing(cls) -> SkipResult:
        return cls(
            status=SkipStatus.NOTHING_PLAYING,
            message=DiscordUIMessages.STATE_NOTHING_PLAYING,
        )


class SkipEntriesHandler:
    """Handler for SkipEntriesCommand."""

    def __init__(self, *, orchestrator: PlaybackOrchestrator) -> None:
        self._orchestrator = orchestrator

    async def handle(self, command: SkipEntriesCommand) -> SkipResult:
        """Execute the skip command.

        Args:
            command: The skip command.

        Returns:
            The titles that were skipped, or a nothing-playing result.
        """
        skipped = await self._orchestrator.skip(command.guild_id, command.count)
        if skipped is None:
            return SkipResult.nothing_playing()
        return SkipResult.success([entry.title for entry in skipped])

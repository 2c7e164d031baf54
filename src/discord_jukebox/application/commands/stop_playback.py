"""Command and handler for stopping playback and leaving voice."""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict

from discord_jukebox.domain.shared.messages import DiscordUIMessages
from discord_jukebox.domain.shared.types import DiscordSnowflake

if TYPE_CHECKING:
    from ..services.playback_orchestrator import PlaybackOrchestrator


class StopStatus(Enum):
    """Status codes for stop results."""

    SUCCESS = "success"
    NOTHING_PLAYING = "nothing_playing"


class StopPlaybackCommand(BaseModel):
    model_config = ConfigDict(frozen=True)

    guild_id: DiscordSnowflake


class StopResult(BaseModel):

    status: StopStatus
    message: str

    @property
    def is_success(self) -> bool:
        return self.status == StopStatus.SUCCESS

    @classmethod
    def success(cls) -> StopResult:
        return cls(status=StopStatus.SUCCESS, message=DiscordUIMessages.STOPPED_AND_DISCONNECTED)

    @classmethod
    def nothing_playing(cls) -> StopResult:
        return cls(
            status=StopStatus.NOTHING_PLAYING,
            message=DiscordUIMessages.STATE_NOTHING_PLAYING,
        )


class StopPlaybackHandler:

    def __init__(self, *, orchestrator: PlaybackOrchestrator) -> None:
        self._orchestrator = orchestrator

    async def handle(self, command: StopPlaybackCommand) -> StopResult:
        if await self._orchestrator.stop(command.guild_id):
            return StopResult.success()
        return StopResult.nothing_playing()

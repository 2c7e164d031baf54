"""Command and handler for resolving a query and playing or queueing it."""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, field_validator

from discord_jukebox.domain.shared.messages import DiscordUIMessages
from discord_jukebox.domain.shared.types import DiscordSnowflake, NonEmptyStr, NonNegativeInt

if TYPE_CHECKING:
    from ..interfaces.feedback import ReplyTarget
    from ..services.playback_orchestrator import EnqueueOutcome, PlaybackOrchestrator


class PlayStatus(Enum):
    """Status codes for play results."""

    STARTED = "started"
    NOT_STARTED = "not_started"
    NOT_FOUND = "not_found"
    CONNECTION_FAILED = "connection_failed"
    CANCELLED = "cancelled"
    NOT_IN_VOICE = "not_in_voice"


class PlayQueryCommand(BaseModel):
    """Request to resolve a query or URL for a guild."""

    model_config = ConfigDict(frozen=True, strict=True)

    guild_id: DiscordSnowflake
    channel_id: DiscordSnowflake | None
    user_name: NonEmptyStr
    query: NonEmptyStr

    @field_validator("query", mode="before")
    @classmethod
    def _strip_query(cls, v: str) -> str:
        if isinstance(v, str):
            return v.strip()
        return v


class PlayResult(BaseModel):
    """Result of a play command."""

    model_config = ConfigDict(frozen=True, strict=True)

    status: PlayStatus
    accepted: NonNegativeInt = 0
    first_title: str | None = None
    playlist_title: str | None = None

    @property
    def is_success(self) -> bool:
        return self.status is PlayStatus.STARTED

    @classmethod
    def from_outcome(cls, outcome: EnqueueOutcome) -> PlayResult:
        return cls(
            status=PlayStatus(outcome.status.value),
            accepted=outcome.accepted,
            first_title=outcome.first_title,
            playlist_title=outcome.playlist_title,
        )


class PlayQueryHandler:
    """Checks the requester is in voice, then hands the query to the orchestrator.

    All replies for an accepted request are sent by the orchestrator as
    entries start or fail to resolve.
    """

    def __init__(self, *, orchestrator: PlaybackOrchestrator) -> None:
        self._orchestrator = orchestrator

    async def handle(self, command: PlayQueryCommand, reply: ReplyTarget) -> PlayResult:
        if command.channel_id is None:
            await reply.edit(DiscordUIMessages.STATE_NEED_TO_BE_IN_VOICE)
            return PlayResult(status=PlayStatus.NOT_IN_VOICE)

        outcome = await self._orchestrator.enqueue(
            command.guild_id,
            command.channel_id,
            command.query,
            reply,
        )
        return PlayResult.from_outcome(outcome)

"""Query for inspecting a guild's now-playing entry and queue."""

from __future__ import annotations

from typing import TYPE_CHECKING, Final

from pydantic import BaseModel, ConfigDict, Field

from discord_jukebox.domain.playback.entities import Entry
from discord_jukebox.domain.shared.messages import DiscordUIMessages
from discord_jukebox.domain.shared.types import DiscordSnowflake
from discord_jukebox.utils.reply import truncate

if TYPE_CHECKING:
    from ..services.playback_orchestrator import PlaybackOrchestrator

MAX_LISTED_ENTRIES: Final[int] = 10


class GetQueueQuery(BaseModel):
    model_config = ConfigDict(frozen=True)

    guild_id: DiscordSnowflake


class QueueInfo(BaseModel):

    guild_id: DiscordSnowflake
    entries: list[Entry] = Field(default_factory=list)
    current_entry: Entry | None = None

    @property
    def length(self) -> int:
        return len(self.entries)

    @property
    def is_empty(self) -> bool:
        return len(self.entries) == 0

    def render(self) -> str:
        """Format the now-playing line and the first upcoming entries."""
        if self.current_entry is not None:
            title = truncate(self.current_entry.title)
            lines = [DiscordUIMessages.QUEUE_NOW_PLAYING.format(title=title)]
        else:
            lines = [DiscordUIMessages.QUEUE_NOT_PLAYING]

        if self.is_empty:
            lines.append(DiscordUIMessages.QUEUE_EMPTY)
            return "\n".join(lines)

        lines.append(DiscordUIMessages.QUEUE_UP_NEXT)
        for position, entry in enumerate(self.entries[:MAX_LISTED_ENTRIES], start=1):
            lines.append(
                DiscordUIMessages.QUEUE_LINE.format(position=position, title=truncate(entry.title))
            )
        if self.length > MAX_LISTED_ENTRIES:
            lines.append(DiscordUIMessages.QUEUE_MORE.format(count=self.length - MAX_LISTED_ENTRIES))
        return "\n".join(lines)


class GetQueueHandler:

    def __init__(self, *, orchestrator: PlaybackOrchestrator) -> None:
        self._orchestrator = orchestrator

    async def handle(self, query: GetQueueQuery) -> QueueInfo:
        snapshot = self._orchestrator.snapshot(query.guild_id)
        return QueueInfo(
            guild_id=query.guild_id,
            entries=list(snapshot.upcoming),
            current_entry=snapshot.now_playing,
        )

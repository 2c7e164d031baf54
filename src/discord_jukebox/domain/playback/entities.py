"""Core domain entities for the playback bounded context."""

from __future__ import annotations

from typing import Any, Final

from pydantic import BaseModel, ConfigDict, Field

from discord_jukebox.domain.playback.value_objects import SessionState
from discord_jukebox.domain.shared.exceptions import InvalidStreamReferenceError, ValidationError
from discord_jukebox.domain.shared.messages import ErrorMessages
from discord_jukebox.domain.shared.types import (
    DiscordSnowflake,
    EntryTitleStr,
    HttpUrlStr,
    NonNegativeInt,
    is_http_url,
)

DEFAULT_CONTAINER_HINT: Final[str] = "webm"
DEFAULT_CODEC_HINT: Final[str] = "opus"


class Entry(BaseModel):
    """Immutable, resolved and playable unit."""

    model_config = ConfigDict(frozen=True, strict=True)

    title: EntryTitleStr
    source_ref: str = ""
    stream_ref: HttpUrlStr
    container_hint: str = DEFAULT_CONTAINER_HINT
    codec_hint: str = DEFAULT_CODEC_HINT

    @classmethod
    def create(
        cls,
        *,
        title: str | None,
        stream_ref: str | None,
        source_ref: str | None = None,
        container_hint: str | None = None,
        codec_hint: str | None = None,
    ) -> Entry:
        """Build an entry, raising domain errors instead of pydantic ones.

        Raises:
            ValidationError: If the title is empty.
            InvalidStreamReferenceError: If the stream locator is not http(s).
        """
        if not title or not title.strip():
            raise ValidationError(ErrorMessages.EMPTY_ENTRY_TITLE, field="title")
        if not is_http_url(stream_ref):
            raise InvalidStreamReferenceError(str(stream_ref))
        return cls(
            title=title.strip()[:500],
            source_ref=source_ref or "",
            stream_ref=stream_ref,  # type: ignore[arg-type]
            container_hint=container_hint or DEFAULT_CONTAINER_HINT,
            codec_hint=codec_hint or DEFAULT_CODEC_HINT,
        )


class TenantSession(BaseModel):
    """Aggregate holding one guild's connection, player, queue and current entry.

    Mutated only by the playback orchestrator while it holds the guild lock.
    """

    model_config = ConfigDict(strict=True, arbitrary_types_allowed=True)

    guild_id: DiscordSnowflake
    channel_id: DiscordSnowflake
    connection: Any = None
    player: Any = None
    queue: list[Entry] = Field(default_factory=list)
    current_entry: Entry | None = None
    retry_count: NonNegativeInt = 0
    is_playing: bool = False
    state: SessionState = SessionState.ACTIVE

    # Bumped every time an entry starts; the idle timer compares against it.
    activity: NonNegativeInt = 0

    @property
    def queue_length(self) -> int:
        return len(self.queue)

    @property
    def is_destroyed(self) -> bool:
        return self.state == SessionState.DESTROYED

    def enqueue(self, entry: Entry) -> int:
        """Append to the tail and return the 1-based queue position."""
        self.queue.append(entry)
        return len(self.queue)

    def dequeue(self) -> Entry | None:
        if not self.queue:
            return None
        return self.queue.pop(0)

    def drop_head(self, count: int) -> list[Entry]:
        """Remove up to *count* entries from the head of the queue."""
        dropped = self.queue[:count]
        del self.queue[:count]
        return dropped

    def clear_queue(self) -> int:
        cleared = len(self.queue)
        self.queue.clear()
        return cleared

    def begin_entry(self, entry: Entry) -> None:
        self.current_entry = entry
        self.is_playing = True
        self.retry_count = 0
        self.activity += 1
        self.state = SessionState.ACTIVE

    def mark_idle(self) -> None:
        self.is_playing = False

    def begin_draining(self) -> int:
        """Enter the draining state and return the activity marker to re-check."""
        self.is_playing = False
        self.state = SessionState.DRAINING
        return self.activity

    def is_still_draining(self, activity: int) -> bool:
        return (
            self.state == SessionState.DRAINING
            and self.activity == activity
            and not self.queue
            and not self.is_playing
        )

    def destroy(self) -> None:
        self.queue.clear()
        self.current_entry = None
        self.is_playing = False
        self.connection = None
        self.player = None
        self.state = SessionState.DESTROYED

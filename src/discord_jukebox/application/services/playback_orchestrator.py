"""Playback Orchestrator - the per-guild playback state machine.

Every mutation of a guild's session happens while holding that guild's lock
from the :class:`SessionRegistry`. Player events, idle timers and commands
all queue up on the same lock, so whichever acquires it first commits
completely before the next one looks at the session. Events and timers
re-validate their precondition after acquiring the lock instead of being
cancelled.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from contextlib import aclosing
from dataclasses import dataclass
from enum import Enum
from functools import partial
from typing import TYPE_CHECKING

from ...domain.playback.entities import Entry, TenantSession
from ...domain.playback.value_objects import AnnounceKind
from ...domain.shared.exceptions import (
    PlaybackEngineError,
    ResolutionFailure,
    StreamStartError,
    VoiceConnectionError,
)
from ...domain.shared.messages import DiscordUIMessages, LogTemplates
from ...domain.shared.types import DiscordSnowflake

if TYPE_CHECKING:
    from ...config.settings import PlaybackSettings
    from ...domain.playback.registry import SessionRegistry
    from ..interfaces.feedback import PresencePublisher, ReplyTarget
    from ..interfaces.media_resolver import MediaResolver
    from ..interfaces.stream_supervisor import StreamSupervisor
    from ..interfaces.voice_adapter import VoiceGateway

logger = logging.getLogger(__name__)


class EnqueueStatus(Enum):
    STARTED = "started"
    NOT_STARTED = "not_started"
    NOT_FOUND = "not_found"
    CONNECTION_FAILED = "connection_failed"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class EnqueueOutcome:
    status: EnqueueStatus
    accepted: int = 0
    first_title: str | None = None
    playlist_title: str | None = None


@dataclass(frozen=True)
class QueueSnapshot:
    now_playing: Entry | None
    upcoming: tuple[Entry, ...]


class PlaybackOrchestrator:
    """Drives resolver, stream supervisor and player for every guild."""

    def __init__(
        self,
        *,
        registry: SessionRegistry,
        resolver: MediaResolver,
        streams: StreamSupervisor,
        voice: VoiceGateway,
        presence: PresencePublisher,
        settings: PlaybackSettings,
    ) -> None:
        self._registry = registry
        self._resolver = resolver
        self._streams = streams
        self._voice = voice
        self._presence = presence
        self._settings = settings
        self._idle_tasks: set[asyncio.Task[None]] = set()

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    async def enqueue(
        self,
        guild_id: DiscordSnowflake,
        channel_id: DiscordSnowflake,
        query: str,
        reply: ReplyTarget,
    ) -> EnqueueOutcome:
        """Resolve *query* and play or queue each entry as it arrives."""
        is_playlist = self._resolver.is_playlist(query)
        epoch = self._registry.epoch(guild_id)
        logger.info(LogTemplates.PLAY_REQUESTED, guild_id, query, is_playlist)

        first: EnqueueOutcome | None = None
        accepted = 0
        try:
            async with aclosing(self._resolver.resolve(query)) as entries:
                async for item in entries:
                    async with self._registry.lock(guild_id):
                        if self._registry.epoch(guild_id) != epoch:
                            logger.info(LogTemplates.PLAY_CANCELLED, guild_id)
                            if first is None:
                                await reply.edit(DiscordUIMessages.PLAY_CANCELLED)
                            return EnqueueOutcome(EnqueueStatus.CANCELLED, accepted=accepted)
                        try:
                            session = await self._session_for(guild_id, channel_id)
                        except VoiceConnectionError as exc:
                            logger.error(LogTemplates.PLAY_CONNECT_FAILED, guild_id, exc.message)
                            await reply.edit(DiscordUIMessages.ERROR_OCCURRED)
                            return EnqueueOutcome(EnqueueStatus.CONNECTION_FAILED, accepted=accepted)
                        if not item.is_first:
                            await self._append(session, item.entry)
                            accepted += 1
                            continue
                        status = await self._play_first(session, item.entry)
                    accepted += 1

                    first = EnqueueOutcome(
                        status,
                        first_title=item.entry.title,
                        playlist_title=item.playlist_title,
                    )
                    await self._announce_first(
                        guild_id, epoch, first, is_playlist=is_playlist, reply=reply
                    )
        except ResolutionFailure:
            logger.info(LogTemplates.PLAY_NO_ENTRIES, query, guild_id)
            if first is None and not is_playlist:
                await reply.edit(DiscordUIMessages.ERROR_NO_AUDIO_INFO)
            return EnqueueOutcome(EnqueueStatus.NOT_FOUND)

        if first is None:
            return EnqueueOutcome(EnqueueStatus.NOT_FOUND)
        return EnqueueOutcome(
            first.status,
            accepted=accepted,
            first_title=first.first_title,
            playlist_title=first.playlist_title,
        )

    async def stop(self, guild_id: DiscordSnowflake) -> bool:
        """Tear the guild's session down immediately.

        Also supersedes any resolution still running for an earlier play
        request, even when no session exists yet. Returns whether a session
        was destroyed.
        """
        async with self._registry.lock(guild_id):
            self._registry.bump_epoch(guild_id)
            session = self._registry.get(guild_id)
            if session is None:
                return False
            await self._destroy(session, reason="stop")
            return True

    async def skip(self, guild_id: DiscordSnowflake, count: int = 1) -> list[Entry] | None:
        """Skip the current entry plus ``count - 1`` queued ones.

        Returns the skipped entries, current first, or ``None`` when nothing
        is playing (the queue is left untouched in that case).
        """
        async with self._registry.lock(guild_id):
            session = self._registry.get(guild_id)
            if session is None or not session.is_playing or session.current_entry is None:
                return None

            skipped = [session.current_entry, *session.drop_head(count - 1)]
            session.player.stop()
            session.mark_idle()
            self._streams.kill(guild_id)
            logger.info(
                LogTemplates.ENTRIES_SKIPPED,
                len(skipped),
                guild_id,
                [entry.title for entry in skipped],
            )
            await self._advance(session)
            return skipped

    def snapshot(self, guild_id: DiscordSnowflake) -> QueueSnapshot:
        session = self._registry.get(guild_id)
        if session is None:
            return QueueSnapshot(now_playing=None, upcoming=())
        now_playing = session.current_entry if session.is_playing else None
        return QueueSnapshot(now_playing=now_playing, upcoming=tuple(session.queue))

    async def shutdown(self) -> None:
        """Cancel idle timers and destroy every session."""
        for task in list(self._idle_tasks):
            task.cancel()
        for session in self._registry:
            async with self._registry.lock(session.guild_id):
                if self._registry.get(session.guild_id) is session:
                    await self._destroy(session, reason="shutdown")

    # ------------------------------------------------------------------
    # State transitions (caller holds the guild lock)
    # ------------------------------------------------------------------

    async def _session_for(
        self, guild_id: DiscordSnowflake, channel_id: DiscordSnowflake
    ) -> TenantSession:
        session = self._registry.get(guild_id)
        if session is None:
            session = await self._create_session(guild_id, channel_id)
        return session

    async def _play_first(self, session: TenantSession, entry: Entry) -> EnqueueStatus:
        """Start the first entry of a request now, replacing the current one.

        Entries already waiting in the queue are left where they are.
        """
        if session.is_playing and session.current_entry is not None:
            logger.info(LogTemplates.ENTRY_REPLACED, session.current_entry.title, session.guild_id)
            session.player.stop()
            session.mark_idle()
            self._streams.kill(session.guild_id)

        if await self._start_entry(session, entry):
            await self._presence.show_listening(entry.title)
            return EnqueueStatus.STARTED
        await self._advance(session)
        return EnqueueStatus.NOT_STARTED

    async def _append(self, session: TenantSession, entry: Entry) -> None:
        position = session.enqueue(entry)
        logger.info(LogTemplates.ENTRY_QUEUED, entry.title, position, session.guild_id)
        if not session.is_playing:
            await self._advance(session)

    async def _create_session(
        self, guild_id: DiscordSnowflake, channel_id: DiscordSnowflake
    ) -> TenantSession:
        connection = await self._voice.connect(
            guild_id,
            channel_id,
            ready_timeout=self._settings.connect_timeout_seconds,
        )
        session = TenantSession(
            guild_id=guild_id,
            channel_id=channel_id,
            connection=connection,
            player=connection.create_player(),
        )
        self._registry.add(session)
        logger.info(LogTemplates.SESSION_CREATED, guild_id, channel_id)
        return session

    async def _advance(self, session: TenantSession) -> Entry | None:
        """Pop entries until one starts; drain when the queue runs out."""
        while (entry := session.dequeue()) is not None:
            logger.info(LogTemplates.ENTRY_ADVANCE, entry.title, session.guild_id)
            if await self._start_entry(session, entry):
                await self._presence.show_listening(entry.title)
                return entry

        await self._begin_draining(session)
        return None

    async def _start_entry(self, session: TenantSession, entry: Entry) -> bool:
        """Spawn the stream for *entry* and hand it to the player.

        A failed stream spawn is retried up to ``max_retries`` times with a
        linear backoff. A player refusing the source is not retried.
        """
        guild_id = session.guild_id
        session.begin_entry(entry)
        activity = session.activity
        max_retries = self._settings.max_retries

        while True:
            try:
                stream = self._streams.start_stream(guild_id, entry)
                break
            except StreamStartError:
                if session.retry_count >= max_retries:
                    logger.error(
                        LogTemplates.ENTRY_START_GAVE_UP, entry.title, guild_id, max_retries
                    )
                    session.mark_idle()
                    return False
                session.retry_count += 1
                logger.warning(
                    LogTemplates.ENTRY_START_RETRY,
                    entry.title,
                    guild_id,
                    session.retry_count,
                    max_retries,
                )
                await asyncio.sleep(self._settings.retry_backoff_seconds * session.retry_count)

        try:
            session.player.play(
                stream,
                on_idle=partial(self._on_player_idle, guild_id, activity),
                on_error=partial(self._on_player_error, guild_id, activity),
            )
        except PlaybackEngineError as exc:
            logger.error(LogTemplates.PLAYBACK_FAILED_START, guild_id, exc)
            self._streams.kill(guild_id)
            session.mark_idle()
            return False

        logger.info(LogTemplates.PLAYBACK_STARTED, entry.title, guild_id)
        return True

    async def _begin_draining(self, session: TenantSession) -> None:
        activity = session.begin_draining()
        self._streams.kill(session.guild_id)
        await self._presence.clear()
        timeout = self._settings.idle_timeout_seconds
        logger.info(LogTemplates.QUEUE_DRAINED, session.guild_id, timeout)

        task = asyncio.create_task(self._idle_teardown(session, activity, timeout))
        self._idle_tasks.add(task)
        task.add_done_callback(self._idle_tasks.discard)

    async def _idle_teardown(self, session: TenantSession, activity: int, timeout: float) -> None:
        await asyncio.sleep(timeout)
        guild_id = session.guild_id
        async with self._registry.lock(guild_id):
            if self._registry.get(guild_id) is not session or not session.is_still_draining(activity):
                logger.debug(LogTemplates.IDLE_TEARDOWN_SKIPPED, guild_id)
                return
            logger.info(LogTemplates.IDLE_TEARDOWN, guild_id)
            await self._destroy(session, reason="idle")

    async def _destroy(self, session: TenantSession, *, reason: str) -> None:
        guild_id = session.guild_id
        if session.player is not None:
            session.player.stop()
        self._streams.kill(guild_id)

        connection = session.connection
        session.destroy()
        self._registry.remove(guild_id)

        if connection is not None:
            try:
                await connection.destroy()
            except Exception as exc:
                logger.warning(LogTemplates.VOICE_CLEANUP_ERROR, guild_id, exc)

        await self._presence.clear()
        logger.info(LogTemplates.SESSION_DESTROYED, guild_id, reason)

    # ------------------------------------------------------------------
    # Player events
    # ------------------------------------------------------------------

    def _live_session(self, guild_id: DiscordSnowflake, activity: int) -> TenantSession | None:
        session = self._registry.get(guild_id)
        if session is None:
            logger.debug(LogTemplates.PLAYER_EVENT_NO_SESSION, guild_id)
            return None
        if session.activity != activity or not session.is_playing:
            logger.debug(LogTemplates.PLAYBACK_STALE_EVENT, guild_id)
            return None
        return session

    async def _on_player_idle(self, guild_id: DiscordSnowflake, activity: int) -> None:
        async with self._registry.lock(guild_id):
            session = self._live_session(guild_id, activity)
            if session is None:
                return
            session.mark_idle()
            self._streams.kill(guild_id)
            await self._advance(session)

    async def _on_player_error(
        self, guild_id: DiscordSnowflake, activity: int, message: str
    ) -> None:
        async with self._registry.lock(guild_id):
            session = self._live_session(guild_id, activity)
            if session is None:
                return
            logger.error(LogTemplates.PLAYBACK_ERROR, guild_id, message)
            session.player.stop()
            session.mark_idle()
            self._streams.kill(guild_id)
            if not session.queue:
                await self._begin_draining(session)

    # ------------------------------------------------------------------
    # Announcements
    # ------------------------------------------------------------------

    def _is_current(self, guild_id: DiscordSnowflake, epoch: int) -> bool:
        """False once a stop has superseded the request that began at *epoch*."""
        if self._registry.epoch(guild_id) == epoch:
            return True
        logger.debug(LogTemplates.ANNOUNCE_SUPERSEDED, guild_id)
        return False

    async def _announce_first(
        self,
        guild_id: DiscordSnowflake,
        epoch: int,
        outcome: EnqueueOutcome,
        *,
        is_playlist: bool,
        reply: ReplyTarget,
    ) -> None:
        if not self._is_current(guild_id, epoch):
            return
        if outcome.status is not EnqueueStatus.STARTED:
            if not is_playlist:
                await reply.edit(DiscordUIMessages.ERROR_NO_AUDIO_INFO)
            return
        await self._announce(
            AnnounceKind.for_first(is_playlist=is_playlist),
            outcome.first_title or "",
            reply,
            outcome.playlist_title,
            still_current=partial(self._is_current, guild_id, epoch),
        )

    @staticmethod
    async def _announce(
        kind: AnnounceKind,
        title: str,
        reply: ReplyTarget | None,
        playlist_title: str | None = None,
        *,
        still_current: Callable[[], bool] = lambda: True,
    ) -> None:
        """Report a started entry to the requester."""
        if reply is None or not kind.sends_message:
            return

        now_playing = DiscordUIMessages.NOW_PLAYING.format(title=title)
        if kind is AnnounceKind.FIRST_OF_PLAYLIST and playlist_title:
            await reply.edit(DiscordUIMessages.PLAYLIST_ADDED.format(playlist_title=playlist_title))
            # A stop may have committed while the first message was in flight.
            if still_current():
                await reply.follow_up(now_playing)
        else:
            await reply.edit(now_playing)

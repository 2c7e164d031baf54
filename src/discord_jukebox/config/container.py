"""Dependency Injection Container

Builds the playback object graph lazily on first access and owns its
shutdown. Everything below the cog layer is reached through here.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ..domain.shared.messages import ErrorMessages, LogTemplates

logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from discord.ext.commands import Bot

    from ..application.commands.play_query import PlayQueryHandler
    from ..application.commands.skip_entries import SkipEntriesHandler
    from ..application.commands.stop_playback import StopPlaybackHandler
    from ..application.interfaces.feedback import PresencePublisher
    from ..application.interfaces.media_resolver import MediaResolver
    from ..application.interfaces.stream_supervisor import StreamSupervisor
    from ..application.interfaces.voice_adapter import VoiceGateway
    from ..application.queries.get_queue import GetQueueHandler
    from ..application.services.playback_orchestrator import PlaybackOrchestrator
    from ..domain.playback.registry import SessionRegistry
    from .settings import Settings


@dataclass
class Container:
    """Dependency injection container.

    Components are lazily initialized when first accessed.
    """

    settings: Settings
    _bot: Bot | None = None

    # Domain state
    _session_registry: SessionRegistry | None = None

    # Infrastructure adapters
    _media_resolver: MediaResolver | None = None
    _stream_supervisor: StreamSupervisor | None = None
    _voice_gateway: VoiceGateway | None = None
    _presence: PresencePublisher | None = None

    # Application services
    _playback_orchestrator: PlaybackOrchestrator | None = None

    # Command handlers
    _play_query_handler: PlayQueryHandler | None = None
    _stop_playback_handler: StopPlaybackHandler | None = None
    _skip_entries_handler: SkipEntriesHandler | None = None

    # Query handlers
    _get_queue_handler: GetQueueHandler | None = None

    def set_bot(self, bot: Bot) -> None:
        """Set the Discord bot instance."""
        self._bot = bot

    @property
    def bot(self) -> Bot:
        """Get the Discord bot instance."""
        if self._bot is None:
            raise RuntimeError(ErrorMessages.BOT_NOT_INITIALIZED)
        return self._bot

    # === Domain State ===

    @property
    def session_registry(self) -> SessionRegistry:
        if self._session_registry is None:
            from ..domain.playback.registry import SessionRegistry

            self._session_registry = SessionRegistry()
        return self._session_registry

    # === Infrastructure Adapters ===

    @property
    def media_resolver(self) -> MediaResolver:
        """Get the yt-dlp media resolver."""
        if self._media_resolver is None:
            from ..infrastructure.audio.ytdlp_resolver import YtDlpResolver

            self._media_resolver = YtDlpResolver(self.settings.audio)
        return self._media_resolver

    @property
    def stream_supervisor(self) -> StreamSupervisor:
        """Get the yt-dlp stream supervisor."""
        if self._stream_supervisor is None:
            from ..infrastructure.audio.stream_supervisor import YtDlpStreamSupervisor

            self._stream_supervisor = YtDlpStreamSupervisor(self.settings.audio)
        return self._stream_supervisor

    @property
    def voice_gateway(self) -> VoiceGateway:
        """Get the Discord voice gateway."""
        if self._voice_gateway is None:
            from ..infrastructure.discord.adapters.voice_adapter import DiscordVoiceGateway

            self._voice_gateway = DiscordVoiceGateway(self.bot, self.settings.audio)
        return self._voice_gateway

    @property
    def presence(self) -> PresencePublisher:
        if self._presence is None:
            from ..infrastructure.discord.adapters.feedback import DiscordPresence

            self._presence = DiscordPresence(self.bot)
        return self._presence

    # === Application Services ===

    @property
    def playback_orchestrator(self) -> PlaybackOrchestrator:
        """Get the playback orchestrator."""
        if self._playback_orchestrator is None:
            from ..application.services.playback_orchestrator import PlaybackOrchestrator

            self._playback_orchestrator = PlaybackOrchestrator(
                registry=self.session_registry,
                resolver=self.media_resolver,
                streams=self.stream_supervisor,
                voice=self.voice_gateway,
                presence=self.presence,
                settings=self.settings.playback,
            )
        return self._playback_orchestrator

    # === Command Handlers ===

    @property
    def play_query_handler(self) -> PlayQueryHandler:
        if self._play_query_handler is None:
            from ..application.commands.play_query import PlayQueryHandler

            self._play_query_handler = PlayQueryHandler(orchestrator=self.playback_orchestrator)
        return self._play_query_handler

    @property
    def stop_playback_handler(self) -> StopPlaybackHandler:
        if self._stop_playback_handler is None:
            from ..application.commands.stop_playback import StopPlaybackHandler

            self._stop_playback_handler = StopPlaybackHandler(
                orchestrator=self.playback_orchestrator
            )
        return self._stop_playback_handler

    @property
    def skip_entries_handler(self) -> SkipEntriesHandler:
        if self._skip_entries_handler is None:
            from ..application.commands.skip_entries import SkipEntriesHandler

            self._skip_entries_handler = SkipEntriesHandler(
                orchestrator=self.playback_orchestrator
            )
        return self._skip_entries_handler

    # === Query Handlers ===

    @property
    def get_queue_handler(self) -> GetQueueHandler:
        if self._get_queue_handler is None:
            from ..application.queries.get_queue import GetQueueHandler

            self._get_queue_handler = GetQueueHandler(orchestrator=self.playback_orchestrator)
        return self._get_queue_handler

    # === Lifecycle ===

    async def shutdown(self) -> None:
        """Destroy every session and kill every stream process."""
        if self._playback_orchestrator is not None:
            await self._playback_orchestrator.shutdown()
        if self._stream_supervisor is not None:
            self._stream_supervisor.shutdown()
        logger.info(LogTemplates.BOT_CONTAINER_SHUTDOWN)


def create_container(settings: Settings) -> Container:
    """Create a new dependency injection container."""
    return Container(settings)

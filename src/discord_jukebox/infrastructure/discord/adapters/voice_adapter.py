"""discord.py implementations of the voice gateway, connection and player."""

from __future__ import annotations

import asyncio
import concurrent.futures
import logging
from typing import IO

import discord

from discord_jukebox.application.interfaces.voice_adapter import (
    AudioPlayer,
    ErrorHandler,
    IdleHandler,
    VoiceConnection,
    VoiceGateway,
)
from discord_jukebox.config.settings import AudioSettings
from discord_jukebox.domain.shared.exceptions import (
    ConnectionTimeoutError,
    PlaybackEngineError,
    VoiceConnectionError,
)
from discord_jukebox.domain.shared.messages import LogTemplates

logger = logging.getLogger(__name__)


class DiscordAudioPlayer(AudioPlayer):
    """Feeds a byte stream through FFmpeg into a ``discord.VoiceClient``.

    discord.py calls ``after`` from its audio thread, including when a source
    is stopped or replaced. Each ``play`` takes a new generation number and
    callbacks from older generations are dropped.
    """

    def __init__(
        self,
        voice_client: discord.VoiceClient,
        guild_id: int,
        *,
        settings: AudioSettings,
        loop: asyncio.AbstractEventLoop,
    ) -> None:
        self._vc = voice_client
        self._guild_id = guild_id
        self._settings = settings
        self._loop = loop
        self._generation = 0

    @property
    def is_playing(self) -> bool:
        return self._vc.is_playing()

    def play(self, stream: IO[bytes], *, on_idle: IdleHandler, on_error: ErrorHandler) -> None:
        self._generation += 1
        generation = self._generation
        if self._vc.is_playing() or self._vc.is_paused():
            self._vc.stop()

        def after_callback(error: Exception | None = None) -> None:
            if generation != self._generation:
                logger.debug(LogTemplates.PLAYBACK_STALE_EVENT, self._guild_id)
                return
            if self._loop.is_closed():
                return
            coro = on_error(str(error)) if error else on_idle()
            future = asyncio.run_coroutine_threadsafe(coro, self._loop)
            future.add_done_callback(self._log_callback_failure)

        try:
            source = discord.FFmpegPCMAudio(
                stream,
                pipe=True,
                before_options=self._settings.ffmpeg_options.get("before_options", ""),
                options=self._settings.ffmpeg_options.get("options", ""),
            )
            volume_source = discord.PCMVolumeTransformer(
                source, volume=self._settings.default_volume
            )
            self._vc.play(volume_source, after=after_callback)
        except (discord.ClientException, OSError, TypeError) as exc:
            raise PlaybackEngineError(self._guild_id, str(exc)) from exc

    def stop(self) -> None:
        self._generation += 1
        if self._vc.is_playing() or self._vc.is_paused():
            self._vc.stop()
            logger.debug(LogTemplates.PLAYBACK_STOPPED, self._guild_id)

    def _log_callback_failure(self, future: concurrent.futures.Future[None]) -> None:
        if future.cancelled():
            return
        exc = future.exception()
        if exc is not None:
            logger.error(
                LogTemplates.PLAYBACK_CALLBACK_ERROR,
                self._guild_id,
                exc_info=(type(exc), exc, exc.__traceback__),
            )


class DiscordVoiceConnection(VoiceConnection):
    def __init__(
        self, voice_client: discord.VoiceClient, guild_id: int, settings: AudioSettings
    ) -> None:
        self._vc = voice_client
        self._guild_id = guild_id
        self._settings = settings

    @property
    def voice_client(self) -> discord.VoiceClient:
        return self._vc

    def create_player(self) -> DiscordAudioPlayer:
        return DiscordAudioPlayer(
            self._vc,
            self._guild_id,
            settings=self._settings,
            loop=asyncio.get_running_loop(),
        )

    async def destroy(self) -> None:
        if self._vc.is_playing() or self._vc.is_paused():
            self._vc.stop()
        await self._vc.disconnect(force=True)
        logger.info(LogTemplates.VOICE_DISCONNECTED, self._guild_id)


class DiscordVoiceGateway(VoiceGateway):
    def __init__(self, bot: discord.Client, settings: AudioSettings | None = None) -> None:
        self._bot = bot
        self._settings = settings or AudioSettings()

    async def connect(
        self, guild_id: int, channel_id: int, *, ready_timeout: float
    ) -> DiscordVoiceConnection:
        guild = self._bot.get_guild(guild_id)
        channel = guild.get_channel(channel_id) if guild is not None else None
        if guild is None or not isinstance(channel, discord.VoiceChannel | discord.StageChannel):
            logger.warning(LogTemplates.VOICE_CHANNEL_NOT_FOUND, channel_id, guild_id)
            raise VoiceConnectionError(guild_id)

        await self._cleanup_stale(guild)

        try:
            async with asyncio.timeout(ready_timeout):
                voice_client = await channel.connect(self_deaf=True, timeout=ready_timeout)
        except TimeoutError as exc:
            logger.error(LogTemplates.VOICE_CONNECTION_TIMEOUT, guild_id, ready_timeout)
            await self._cleanup_stale(guild)
            raise ConnectionTimeoutError(guild_id, ready_timeout) from exc
        except (discord.ClientException, discord.HTTPException) as exc:
            logger.error(LogTemplates.VOICE_CLIENT_ERROR, guild_id, exc)
            raise VoiceConnectionError(guild_id, str(exc)) from exc

        logger.info(LogTemplates.VOICE_CONNECTED, channel.name, guild.name)
        return DiscordVoiceConnection(voice_client, guild_id, self._settings)

    async def _cleanup_stale(self, guild: discord.Guild) -> None:
        """Drop a voice client left behind without a session."""
        stale = guild.voice_client
        if stale is None:
            return
        logger.warning(LogTemplates.VOICE_STALE_CLEANUP, guild.id)
        try:
            await stale.disconnect(force=True)
        except (discord.ClientException, discord.HTTPException, OSError) as exc:
            logger.warning(LogTemplates.VOICE_CLEANUP_ERROR, guild.id, exc)

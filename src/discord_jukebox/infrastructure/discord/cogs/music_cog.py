"""Slash-command cog for /play, /stop, /skip and /queue."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import discord
import pydantic
from discord import app_commands
from discord.ext import commands

from discord_jukebox.application.commands.play_query import PlayQueryCommand
from discord_jukebox.application.commands.skip_entries import SkipEntriesCommand
from discord_jukebox.application.commands.stop_playback import StopPlaybackCommand
from discord_jukebox.application.queries.get_queue import GetQueueQuery
from discord_jukebox.domain.shared.messages import DiscordUIMessages, ErrorMessages, LogTemplates
from discord_jukebox.infrastructure.discord.adapters.feedback import InteractionReply
from discord_jukebox.utils.logging import bind_guild

if TYPE_CHECKING:
    from ....config.container import Container

logger = logging.getLogger(__name__)


def _requester_channel_id(interaction: discord.Interaction) -> int | None:
    user = interaction.user
    if isinstance(user, discord.Member) and user.voice and user.voice.channel:
        return user.voice.channel.id
    return None


class MusicCog(commands.Cog):
    def __init__(self, bot: commands.Bot, container: Container) -> None:
        self.bot = bot
        self.container = container

    @staticmethod
    def _log_command(interaction: discord.Interaction, name: str, extra: str = "") -> None:
        bind_guild(interaction.guild_id)
        guild = interaction.guild.name if interaction.guild else None
        logger.info(LogTemplates.COMMAND_RECEIVED, name, extra, interaction.user, guild)

    @staticmethod
    async def _send(interaction: discord.Interaction, text: str) -> None:
        logger.info(LogTemplates.REPLY_SENT, interaction.user, interaction.guild_id, text)
        await interaction.response.send_message(text)

    @app_commands.command(name="play", description="Play a song or playlist.")
    @app_commands.describe(query="URL or search term")
    @app_commands.guild_only()
    async def play(self, interaction: discord.Interaction, query: str) -> None:
        self._log_command(interaction, "play", f' - "{query}"')
        await interaction.response.defer()

        assert interaction.guild is not None
        reply = InteractionReply(interaction)

        try:
            command = PlayQueryCommand(
                guild_id=interaction.guild.id,
                channel_id=_requester_channel_id(interaction),
                user_name=str(interaction.user),
                query=query,
            )
        except pydantic.ValidationError:
            logger.debug(ErrorMessages.EMPTY_QUERY)
            await reply.edit(DiscordUIMessages.ERROR_NO_AUDIO_INFO)
            return

        result = await self.container.play_query_handler.handle(command, reply)
        logger.debug("Play request in guild %s finished: %s", interaction.guild.id, result)

    @app_commands.command(name="stop", description="Stop playing and leave the voice channel.")
    @app_commands.guild_only()
    async def stop(self, interaction: discord.Interaction) -> None:
        self._log_command(interaction, "stop")
        await interaction.response.defer()
        assert interaction.guild is not None

        result = await self.container.stop_playback_handler.handle(
            StopPlaybackCommand(guild_id=interaction.guild.id)
        )
        await InteractionReply(interaction).edit(result.message)

    @app_commands.command(name="skip", description="Skip the current song.")
    @app_commands.describe(count="Number of songs to skip (default: 1)")
    @app_commands.guild_only()
    async def skip(
        self,
        interaction: discord.Interaction,
        count: app_commands.Range[int, 1, None] = 1,
    ) -> None:
        self._log_command(interaction, "skip", f" - {count} songs" if count > 1 else "")
        await interaction.response.defer()
        assert interaction.guild is not None

        result = await self.container.skip_entries_handler.handle(
            SkipEntriesCommand(guild_id=interaction.guild.id, count=count)
        )
        await InteractionReply(interaction).edit(result.message)

    @app_commands.command(name="queue", description="Show the current queue.")
    @app_commands.guild_only()
    async def queue(self, interaction: discord.Interaction) -> None:
        self._log_command(interaction, "queue")
        assert interaction.guild is not None

        info = await self.container.get_queue_handler.handle(
            GetQueueQuery(guild_id=interaction.guild.id)
        )
        await self._send(interaction, info.render())


async def setup(bot: commands.Bot) -> None:
    container = getattr(bot, "container", None)
    if container is None:
        raise RuntimeError(ErrorMessages.CONTAINER_NOT_FOUND)

    await bot.add_cog(MusicCog(bot, container))

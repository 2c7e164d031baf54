"""discord.py implementations of reply and presence output."""

from __future__ import annotations

import logging

import discord

from discord_jukebox.application.interfaces.feedback import PresencePublisher, ReplyTarget
from discord_jukebox.domain.shared.messages import LogTemplates

logger = logging.getLogger(__name__)


class InteractionReply(ReplyTarget):
    """Edits the deferred response of a slash command, or follows up on it."""

    def __init__(self, interaction: discord.Interaction) -> None:
        self._interaction = interaction

    @property
    def _guild_id(self) -> int | None:
        return self._interaction.guild_id

    async def edit(self, text: str) -> None:
        logger.info(LogTemplates.REPLY_EDITED, self._interaction.user, self._guild_id, text)
        try:
            await self._interaction.edit_original_response(content=text)
        except discord.HTTPException as exc:
            logger.warning(LogTemplates.REPLY_SEND_FAILED, self._guild_id, exc)

    async def follow_up(self, text: str) -> None:
        logger.info(LogTemplates.REPLY_FOLLOW_UP, self._interaction.user, self._guild_id, text)
        try:
            await self._interaction.followup.send(text)
        except discord.HTTPException as exc:
            logger.warning(LogTemplates.REPLY_SEND_FAILED, self._guild_id, exc)


class DiscordPresence(PresencePublisher):
    """Shows "Listening to <title>" on the bot's profile."""

    def __init__(self, bot: discord.Client) -> None:
        self._bot = bot

    async def show_listening(self, title: str) -> None:
        activity = discord.Activity(type=discord.ActivityType.listening, name=title)
        await self._change(activity)

    async def clear(self) -> None:
        await self._change(None)

    async def _change(self, activity: discord.Activity | None) -> None:
        if not self._bot.is_ready():
            return
        try:
            await self._bot.change_presence(activity=activity)
        except discord.DiscordException as exc:
            logger.warning(LogTemplates.PRESENCE_FAILED, exc)

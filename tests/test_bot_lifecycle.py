"""
Unit Tests for Bot Lifecycle

Tests for JukeboxBot initialization, setup hook, command sync, the global
error handlers and shutdown.
"""

import asyncio
from unittest.mock import AsyncMock, MagicMock, PropertyMock, patch

import discord
import pytest
from discord.ext import commands

from discord_jukebox.domain.shared.messages import DiscordUIMessages
from discord_jukebox.infrastructure.discord.bot import COGS, JukeboxBot, create_bot


@pytest.fixture
def mock_settings():
    settings = MagicMock()
    settings.discord.sync_on_startup = False
    settings.discord.test_guild_ids = ()
    return settings


@pytest.fixture
def mock_container():
    container = MagicMock()
    container.shutdown = AsyncMock()
    return container


# =============================================================================
# Initialization Tests
# =============================================================================


class TestBotInitialization:
    """Tests for JukeboxBot initialization."""

    @pytest.mark.asyncio
    async def test_init_sets_intents(self, mock_container, mock_settings):
        bot = JukeboxBot(container=mock_container, settings=mock_settings)

        assert bot.intents.voice_states is True
        assert bot.intents.guilds is True

    @pytest.mark.asyncio
    async def test_init_registers_with_container(self, mock_container, mock_settings):
        bot = JukeboxBot(container=mock_container, settings=mock_settings)

        mock_container.set_bot.assert_called_once_with(bot)
        assert bot.container is mock_container
        assert bot.help_command is None

    @pytest.mark.asyncio
    async def test_create_bot(self, mock_container, mock_settings):
        bot = create_bot(mock_container, mock_settings)

        assert isinstance(bot, JukeboxBot)
        assert bot.settings is mock_settings


# =============================================================================
# Setup Hook Tests
# =============================================================================


class TestSetupHook:
    """Tests for JukeboxBot.setup_hook."""

    @pytest.mark.asyncio
    async def test_setup_loads_cogs_and_error_handler(self, mock_container, mock_settings):
        bot = JukeboxBot(container=mock_container, settings=mock_settings)

        with (
            patch.object(bot, "load_extension", new_callable=AsyncMock) as load,
            patch.object(bot, "_sync_commands", new_callable=AsyncMock) as sync,
        ):
            await bot.setup_hook()

        assert [call.args[0] for call in load.call_args_list] == list(COGS)
        assert bot.tree.on_error == bot._on_app_command_error
        sync.assert_not_called()

    @pytest.mark.asyncio
    async def test_setup_syncs_when_enabled(self, mock_container, mock_settings):
        mock_settings.discord.sync_on_startup = True
        bot = JukeboxBot(container=mock_container, settings=mock_settings)

        with (
            patch.object(bot, "load_extension", new_callable=AsyncMock),
            patch.object(bot, "_sync_commands", new_callable=AsyncMock) as sync,
        ):
            await bot.setup_hook()

        sync.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_cog_load_failure_propagates(self, mock_container, mock_settings):
        bot = JukeboxBot(container=mock_container, settings=mock_settings)
        error = commands.ExtensionNotFound(COGS[0])

        with patch.object(bot, "load_extension", new_callable=AsyncMock, side_effect=error):
            with pytest.raises(commands.ExtensionNotFound):
                await bot.setup_hook()

    @pytest.mark.asyncio
    async def test_loop_exception_handler_logs(self, caplog):
        loop = asyncio.get_running_loop()

        JukeboxBot._on_loop_exception(
            loop, {"message": "Task exception was never retrieved", "exception": ValueError("x")}
        )

        assert "Task exception was never retrieved" in caplog.text


# =============================================================================
# Command Sync Tests
# =============================================================================


class TestSyncCommands:
    """Tests for JukeboxBot._sync_commands."""

    @pytest.mark.asyncio
    async def test_sync_global(self, mock_container, mock_settings):
        bot = JukeboxBot(container=mock_container, settings=mock_settings)

        with patch.object(bot.tree, "sync", new_callable=AsyncMock, return_value=[]) as sync:
            await bot._sync_commands()

        sync.assert_awaited_once_with()

    @pytest.mark.asyncio
    async def test_sync_test_guilds_first(self, mock_container, mock_settings):
        mock_settings.discord.test_guild_ids = (111111, 222222)
        bot = JukeboxBot(container=mock_container, settings=mock_settings)

        with (
            patch.object(bot.tree, "copy_global_to") as copy,
            patch.object(bot.tree, "sync", new_callable=AsyncMock, return_value=[]) as sync,
        ):
            await bot._sync_commands()

        assert copy.call_count == 2
        assert sync.await_count == 3

    @pytest.mark.asyncio
    async def test_sync_errors_are_logged(self, mock_container, mock_settings):
        mock_settings.discord.test_guild_ids = (111111,)
        bot = JukeboxBot(container=mock_container, settings=mock_settings)
        error = discord.HTTPException(MagicMock(), "Missing Access")

        with (
            patch.object(bot.tree, "copy_global_to"),
            patch.object(bot.tree, "sync", new_callable=AsyncMock, side_effect=error),
        ):
            await bot._sync_commands()


# =============================================================================
# Error Handler Tests
# =============================================================================


class TestAppCommandErrorHandler:
    """Tests for JukeboxBot._on_app_command_error."""

    @pytest.mark.asyncio
    async def test_sends_generic_ephemeral_message(self, mock_container, mock_settings):
        bot = JukeboxBot(container=mock_container, settings=mock_settings)
        interaction = MagicMock()
        interaction.response.is_done.return_value = False
        interaction.response.send_message = AsyncMock()

        await bot._on_app_command_error(interaction, ValueError("secret detail"))

        interaction.response.send_message.assert_awaited_once_with(
            DiscordUIMessages.ERROR_OCCURRED, ephemeral=True
        )

    @pytest.mark.asyncio
    async def test_uses_followup_after_response(self, mock_container, mock_settings):
        bot = JukeboxBot(container=mock_container, settings=mock_settings)
        interaction = MagicMock()
        interaction.response.is_done.return_value = True
        interaction.followup.send = AsyncMock()

        await bot._on_app_command_error(interaction, ValueError("boom"))

        interaction.followup.send.assert_awaited_once_with(
            DiscordUIMessages.ERROR_OCCURRED, ephemeral=True
        )

    @pytest.mark.asyncio
    async def test_send_failure_is_swallowed(self, mock_container, mock_settings):
        bot = JukeboxBot(container=mock_container, settings=mock_settings)
        interaction = MagicMock()
        interaction.response.is_done.return_value = False
        interaction.response.send_message = AsyncMock(
            side_effect=discord.HTTPException(MagicMock(), "Send failed")
        )

        await bot._on_app_command_error(interaction, Exception("Test error"))


# =============================================================================
# Ready and Close Tests
# =============================================================================


class TestReadyAndClose:
    """Tests for on_ready and close."""

    @pytest.mark.asyncio
    async def test_on_ready_logs(self, mock_container, mock_settings, caplog):
        bot = JukeboxBot(container=mock_container, settings=mock_settings)
        mock_user = MagicMock()
        mock_user.id = 123456789

        with (
            patch.object(type(bot), "user", PropertyMock(return_value=mock_user)),
            patch.object(type(bot), "guilds", PropertyMock(return_value=[MagicMock()])),
            caplog.at_level("INFO"),
        ):
            await bot.on_ready()

        assert "Connected to 1 guilds" in caplog.text

    @pytest.mark.asyncio
    async def test_close_shuts_down_container_and_voice(self, mock_container, mock_settings):
        bot = JukeboxBot(container=mock_container, settings=mock_settings)
        vc = MagicMock()
        vc.disconnect = AsyncMock()

        with (
            patch.object(type(bot), "voice_clients", PropertyMock(return_value=[vc])),
            patch("discord.ext.commands.Bot.close", new_callable=AsyncMock) as parent_close,
        ):
            await bot.close()

        mock_container.shutdown.assert_awaited_once()
        vc.disconnect.assert_awaited_once_with(force=True)
        parent_close.assert_awaited_once()
        assert bot._shutdown_event.is_set()

    @pytest.mark.asyncio
    async def test_close_survives_container_error(self, mock_container, mock_settings):
        mock_container.shutdown.side_effect = RuntimeError("boom")
        bot = JukeboxBot(container=mock_container, settings=mock_settings)

        with (
            patch.object(type(bot), "voice_clients", PropertyMock(return_value=[])),
            patch("discord.ext.commands.Bot.close", new_callable=AsyncMock),
        ):
            await bot.close()

        assert bot._shutdown_event.is_set()

    @pytest.mark.asyncio
    async def test_close_logs_guild_id_of_failed_disconnect(
        self, mock_container, mock_settings, caplog
    ):
        bot = JukeboxBot(container=mock_container, settings=mock_settings)
        vc = MagicMock()
        vc.channel.guild.id = 987654321
        vc.disconnect = AsyncMock(side_effect=discord.ClientException("already gone"))

        with (
            patch.object(type(bot), "voice_clients", PropertyMock(return_value=[vc])),
            patch("discord.ext.commands.Bot.close", new_callable=AsyncMock),
            caplog.at_level("DEBUG"),
        ):
            await bot.close()

        assert "Error during voice cleanup in guild 987654321" in caplog.text
        assert bot._shutdown_event.is_set()

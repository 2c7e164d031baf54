#!/usr/bin/env python3
"""Process entry point: configure logging, build the bot, run until shutdown."""

from __future__ import annotations

import json
import logging
import logging.config
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Any

from discord_jukebox.domain.shared.messages import ErrorMessages, LogTemplates
from discord_jukebox.utils.logging import ColoredFormatter, GuildContextFilter

if TYPE_CHECKING:
    from discord_jukebox.config.settings import Settings

_LOGGING_CONFIG_PATH = Path(__file__).resolve().parents[2] / "logging_config.json"
_CONSOLE_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | guild=%(guild_id)s | %(message)s"

EXIT_OK = 0
EXIT_FAILURE = 1


def _read_logging_config(config_path: Path) -> dict[str, Any] | None:
    try:
        with open(config_path) as f:
            return json.load(f)
    except (FileNotFoundError, json.JSONDecodeError):
        return None


def _console_handler() -> logging.Handler:
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(ColoredFormatter(_CONSOLE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    handler.addFilter(GuildContextFilter())
    return handler


def setup_logging(log_level: str = "INFO", config_path: Path = _LOGGING_CONFIG_PATH) -> None:
    """Apply the dictConfig file at *config_path*.

    A missing, malformed or rejected file leaves a single colored stdout
    handler instead. Either way the root level ends up at *log_level*.
    """
    level = getattr(logging, log_level.upper(), logging.INFO)

    config = _read_logging_config(config_path)
    if config is not None:
        try:
            logging.config.dictConfig(config)
        except ValueError:
            config = None

    if config is None:
        logging.basicConfig(level=level, handlers=[_console_handler()], force=True)
        logging.getLogger(__name__).warning(
            "Could not load %s, logging to the console only", config_path
        )

    logging.getLogger().setLevel(level)


def _serve(settings: Settings, token: str, logger: logging.Logger) -> int:
    from discord_jukebox.config.container import create_container
    from discord_jukebox.infrastructure.discord.bot import create_bot

    bot = create_bot(create_container(settings), settings)
    logger.info(LogTemplates.BOT_STARTING_RUN)
    try:
        bot.run_with_graceful_shutdown(token)
    except KeyboardInterrupt:
        logger.info(LogTemplates.BOT_KEYBOARD_INTERRUPT)
    except Exception as e:
        logger.exception(LogTemplates.BOT_FATAL_ERROR, e)
        return EXIT_FAILURE
    else:
        logger.info(LogTemplates.BOT_STOPPED)
    return EXIT_OK


def main() -> int:
    from discord_jukebox.config.settings import get_settings

    settings = get_settings()
    setup_logging("DEBUG" if settings.debug else settings.log_level)
    logger = logging.getLogger(__name__)

    token = settings.discord.token.get_secret_value()
    if not token:
        logger.error(ErrorMessages.DISCORD_TOKEN_REQUIRED)
        return EXIT_FAILURE

    logger.info(LogTemplates.BOT_STARTING, settings.environment)
    return _serve(settings, token, logger)


def cli() -> None:
    """Console script entry point (used by pyproject.toml [project.scripts])."""
    sys.exit(main())


if __name__ == "__main__":
    cli()  # pragma: no cover

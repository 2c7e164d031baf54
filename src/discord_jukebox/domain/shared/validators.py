"""Shared validators for domain models and settings."""

from __future__ import annotations

from discord_jukebox.domain.shared.messages import ErrorMessages


def validate_discord_snowflake(value: int) -> int:
    """Validate a Discord snowflake ID.

    Discord snowflake IDs are 64-bit unsigned integers identifying guilds,
    channels, users and messages.

    Raises:
        ValueError: If the snowflake ID is out of range.
    """
    if value <= 0:
        raise ValueError(ErrorMessages.INVALID_SNOWFLAKE)
    if value >= 2**64:
        raise ValueError(ErrorMessages.SNOWFLAKE_TOO_LARGE)
    return value


def validate_skip_count(value: int) -> int:
    if value < 1:
        raise ValueError(ErrorMessages.INVALID_SKIP_COUNT)
    return value

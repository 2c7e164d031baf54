"""Reusable Pydantic Annotated types for domain-wide validation.

Constrained types used across the package are defined here once, so models
can simply annotate their fields::

    from discord_jukebox.domain.shared.types import DiscordSnowflake, NonEmptyStr

    class MyModel(BaseModel):
        guild_id: DiscordSnowflake
        title: NonEmptyStr
"""

from __future__ import annotations

import re
from typing import Annotated, Final

from pydantic import Field

HTTP_SCHEME_PATTERN: Final[re.Pattern[str]] = re.compile(r"^https?://")
"""Transport schemes accepted for stream locators."""

# ── Numeric constraints ─────────────────────────────────────────────

DiscordSnowflake = Annotated[int, Field(gt=0, lt=2**64)]
"""Positive integer that fits a Discord snowflake (1 … 2^64-1)."""

NonNegativeInt = Annotated[int, Field(ge=0)]
"""Integer >= 0."""

PositiveFloat = Annotated[float, Field(gt=0.0)]
"""Float > 0.0."""


# ── String constraints ──────────────────────────────────────────────

NonEmptyStr = Annotated[str, Field(min_length=1)]
"""String with at least one character."""

EntryTitleStr = Annotated[str, Field(min_length=1, max_length=500)]
"""Entry title: 1-500 characters."""

HttpUrlStr = Annotated[str, Field(pattern=r"^https?://")]
"""String that starts with http:// or https://."""


def is_http_url(value: str | None) -> bool:
    """Return True when *value* begins with an HTTP-family scheme."""
    return value is not None and HTTP_SCHEME_PATTERN.match(value) is not None

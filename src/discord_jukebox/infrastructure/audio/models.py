"""Pydantic models and helpers for yt-dlp invocation and its printed output.

The resolver asks yt-dlp to print one line per entry::

    ENTRY=TITLE->...|||VIDEO_URL->...|||AUDIO_URL->...|||EXT->...|||ACODEC->...|||PLAYLIST->...

and these helpers turn such a line back into an :class:`Entry`.
"""

from __future__ import annotations

import logging
import shutil
import sys
from typing import TYPE_CHECKING, Any, Final

from pydantic import BaseModel, ConfigDict, Field, field_validator

from discord_jukebox.domain.playback.entities import Entry
from discord_jukebox.domain.shared.messages import LogTemplates

if TYPE_CHECKING:
    from discord_jukebox.config.settings import AudioSettings

logger = logging.getLogger(__name__)

ENTRY_MARKER: Final[str] = "ENTRY="
FIELD_SEPARATOR: Final[str] = "|||"
KEY_VALUE_SEPARATOR: Final[str] = "->"
MISSING_VALUE: Final[str] = "NA"
STREAM_LINE_LIMIT: Final[int] = 1024 * 1024  # 1 MiB

# Printed key -> yt-dlp output template field.
PRINT_FIELDS: Final[dict[str, str]] = {
    "TITLE": "title",
    "VIDEO_URL": "webpage_url",
    "AUDIO_URL": "url",
    "EXT": "ext",
    "ACODEC": "acodec",
    "PLAYLIST": "playlist_title",
}

PRINT_TEMPLATE: Final[str] = ENTRY_MARKER + FIELD_SEPARATOR.join(
    f"{key}{KEY_VALUE_SEPARATOR}%({field})s" for key, field in PRINT_FIELDS.items()
)


class PrintedEntry(BaseModel):
    """One ``ENTRY=`` line from yt-dlp, with yt-dlp's ``NA`` placeholders removed."""

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    title: str | None = Field(default=None, alias="TITLE")
    webpage_url: str | None = Field(default=None, alias="VIDEO_URL")
    url: str | None = Field(default=None, alias="AUDIO_URL")
    ext: str | None = Field(default=None, alias="EXT")
    acodec: str | None = Field(default=None, alias="ACODEC")
    playlist_title: str | None = Field(default=None, alias="PLAYLIST")

    @field_validator("*", mode="before")
    @classmethod
    def _coerce_missing_to_none(cls, v: Any) -> str | None:
        """Convert empty, whitespace-only and ``NA`` values to None."""
        if not isinstance(v, str):
            return None
        v = v.strip()
        if not v or v == MISSING_VALUE:
            return None
        return v

    def to_entry(self) -> Entry:
        """Build the domain entry.

        Raises:
            ValidationError: If the title is missing.
            InvalidStreamReferenceError: If the stream URL is missing or not http(s).
        """
        return Entry.create(
            title=self.title,
            stream_ref=self.url,
            source_ref=self.webpage_url,
            container_hint=self.ext,
            codec_hint=self.acodec,
        )


def split_fields(payload: str) -> dict[str, str]:
    """Split the part after ``ENTRY=`` into ``KEY -> value`` pairs.

    A fragment that does not start with a known key belongs to the value
    before it: the separator was part of that value (usually a title).
    Fragments before the first known key are dropped.
    """
    fields: dict[str, str] = {}
    last_key: str | None = None
    for fragment in payload.split(FIELD_SEPARATOR):
        key, sep, value = fragment.partition(KEY_VALUE_SEPARATOR)
        if sep and key in PRINT_FIELDS and key not in fields:
            fields[key] = value
            last_key = key
        elif last_key is not None:
            fields[last_key] += FIELD_SEPARATOR + fragment
    return fields


def parse_entry_line(line: str) -> PrintedEntry | None:
    """Parse one line of resolver output; ``None`` if it is not an entry line."""
    line = line.strip()
    if not line.startswith(ENTRY_MARKER):
        return None
    return PrintedEntry.model_validate(split_fields(line[len(ENTRY_MARKER):]))


def build_ytdlp_command(settings: AudioSettings) -> list[str]:
    """Return the argv prefix that runs yt-dlp.

    An explicit ``ytdlp_path`` wins, then ``yt-dlp`` on PATH, then the
    installed ``yt_dlp`` module under the current interpreter.
    """
    if settings.ytdlp_path:
        if shutil.which(settings.ytdlp_path) is None:
            logger.warning(LogTemplates.YTDLP_NOT_FOUND, settings.ytdlp_path)
        command = [settings.ytdlp_path]
    elif (found := shutil.which("yt-dlp")) is not None:
        command = [found]
    else:
        command = [sys.executable, "-m", "yt_dlp"]
    logger.debug(LogTemplates.YTDLP_COMMAND, command)
    return command

"""MediaResolver implementation that streams entries out of a yt-dlp process."""

from __future__ import annotations

import asyncio
import contextlib
import logging
import re
from collections.abc import AsyncIterator, Sequence
from typing import Final

from discord_jukebox.application.interfaces.media_resolver import MediaResolver
from discord_jukebox.config.settings import AudioSettings
from discord_jukebox.domain.playback.value_objects import ResolvedEntry
from discord_jukebox.domain.shared.exceptions import ResolutionFailure, ValidationError
from discord_jukebox.domain.shared.messages import LogTemplates
from discord_jukebox.infrastructure.audio.models import (
    PRINT_TEMPLATE,
    STREAM_LINE_LIMIT,
    build_ytdlp_command,
    parse_entry_line,
)

logger = logging.getLogger(__name__)

PLAYLIST_PATTERNS: Final[list[re.Pattern[str]]] = [
    re.compile(r"[?&]list="),
    re.compile(r"/playlist\?"),
    re.compile(r"/sets/"),
]


class YtDlpResolver(MediaResolver):
    """Runs ``yt-dlp --print`` and yields entries line by line.

    The process keeps running after the entry cap is reached so that it can
    exit on its own; only closing the iterator early kills it.
    """

    def __init__(
        self,
        settings: AudioSettings | None = None,
        *,
        command: Sequence[str] | None = None,
    ) -> None:
        self._settings = settings or AudioSettings()
        self._command = list(command) if command else build_ytdlp_command(self._settings)

    @property
    def max_entries(self) -> int:
        return self._settings.max_entries

    def build_target(self, query: str) -> str:
        """URLs go to yt-dlp untouched; anything else becomes a search."""
        query = query.strip()
        if query.startswith("http"):
            return query
        return f"{self._settings.search_prefix}{query}"

    def build_args(self, target: str) -> list[str]:
        return [
            *self._command,
            "-f",
            self._settings.ytdlp_format,
            "--print",
            PRINT_TEMPLATE,
            target,
        ]

    def is_playlist(self, query: str) -> bool:
        return any(pattern.search(query) for pattern in PLAYLIST_PATTERNS)

    async def resolve(self, query: str) -> AsyncIterator[ResolvedEntry]:
        target = self.build_target(query)
        try:
            process = await asyncio.create_subprocess_exec(
                *self.build_args(target),
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                limit=STREAM_LINE_LIMIT,
            )
        except OSError as exc:
            logger.error(LogTemplates.RESOLVER_SPAWN_FAILED, target, exc)
            raise ResolutionFailure(target) from exc

        logger.debug(LogTemplates.RESOLVER_STARTED, target, process.pid)
        stderr_task = asyncio.create_task(self._drain_stderr(process.stderr))

        accepted = 0
        playlist_title: str | None = None
        finished = False
        try:
            assert process.stdout is not None
            while True:
                try:
                    raw = await process.stdout.readline()
                except (OSError, ValueError):
                    logger.exception(LogTemplates.RESOLVER_READ_FAILED, target)
                    break
                if not raw:
                    break

                line = raw.decode("utf-8", errors="replace")
                printed = parse_entry_line(line)
                if printed is None:
                    if line.strip():
                        logger.debug(LogTemplates.RESOLVER_LINE_SKIPPED, line.strip())
                    continue

                if printed.playlist_title and playlist_title is None:
                    playlist_title = printed.playlist_title

                if accepted >= self.max_entries:
                    continue
                try:
                    entry = printed.to_entry()
                except ValidationError:
                    logger.debug(
                        LogTemplates.RESOLVER_ENTRY_REJECTED,
                        bool(printed.title),
                        bool(printed.url and printed.url.startswith("http")),
                        accepted,
                    )
                    continue

                accepted += 1
                logger.debug(LogTemplates.RESOLVER_ENTRY_ACCEPTED, accepted, target, entry.title)
                yield ResolvedEntry(
                    entry=entry,
                    is_first=accepted == 1,
                    playlist_title=playlist_title,
                )

            code = await process.wait()
            await stderr_task
            finished = True
            logger.debug(LogTemplates.RESOLVER_FINISHED, target, code, accepted)
        finally:
            if not finished:
                await self._terminate(process, target, stderr_task)

        if accepted == 0:
            logger.info(LogTemplates.RESOLVER_NO_ENTRIES, target)
            raise ResolutionFailure(target)

    @staticmethod
    async def _drain_stderr(stream: asyncio.StreamReader | None) -> None:
        if stream is None:
            return
        while True:
            try:
                raw = await stream.readline()
            except ValueError:
                # Over-long line; readline has already discarded it.
                logger.debug(LogTemplates.RESOLVER_STDERR_OVERLONG)
                continue
            if not raw:
                return
            line = raw.decode("utf-8", errors="replace").strip()
            if line:
                logger.debug(LogTemplates.RESOLVER_STDERR, line)

    @staticmethod
    async def _terminate(
        process: asyncio.subprocess.Process, target: str, stderr_task: asyncio.Task[None]
    ) -> None:
        if process.returncode is None:
            logger.debug(LogTemplates.RESOLVER_CLOSED_EARLY, target, process.pid)
            with contextlib.suppress(ProcessLookupError):
                process.kill()
        await process.wait()
        stderr_task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await stderr_task

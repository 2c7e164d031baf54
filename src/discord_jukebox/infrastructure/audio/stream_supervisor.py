"""StreamSupervisor implementation running one ``yt-dlp -o -`` process per guild."""

from __future__ import annotations

import logging
import subprocess
import threading
from collections.abc import Sequence
from typing import IO

from discord_jukebox.application.interfaces.stream_supervisor import StreamSupervisor
from discord_jukebox.config.settings import AudioSettings
from discord_jukebox.domain.playback.entities import Entry
from discord_jukebox.domain.shared.exceptions import StreamStartError
from discord_jukebox.domain.shared.messages import LogTemplates
from discord_jukebox.infrastructure.audio.models import build_ytdlp_command

logger = logging.getLogger(__name__)


class YtDlpStreamSupervisor(StreamSupervisor):
    """Spawns yt-dlp with its stdout piped to the player.

    Each process gets a daemon reaper thread that drains stderr, waits for
    the exit and drops the registry slot if it still points at that process.
    The registry is shared with those threads and guarded by a plain lock.
    """

    def __init__(
        self,
        settings: AudioSettings | None = None,
        *,
        command: Sequence[str] | None = None,
    ) -> None:
        self._settings = settings or AudioSettings()
        self._command = list(command) if command else build_ytdlp_command(self._settings)
        self._processes: dict[int, subprocess.Popen[bytes]] = {}
        self._lock = threading.Lock()

    def build_args(self, entry: Entry) -> list[str]:
        return [*self._command, "-o", "-", entry.stream_ref]

    def start_stream(self, guild_id: int, entry: Entry) -> IO[bytes]:
        self.kill(guild_id)

        try:
            process = subprocess.Popen(
                self.build_args(entry),
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
            )
        except OSError as exc:
            logger.error(LogTemplates.STREAM_SPAWN_FAILED, guild_id, exc)
            raise StreamStartError(guild_id) from exc

        with self._lock:
            self._processes[guild_id] = process

        threading.Thread(
            target=self._reap,
            args=(guild_id, process),
            name=f"stream-reaper-{guild_id}",
            daemon=True,
        ).start()

        logger.info(LogTemplates.STREAM_SPAWNED, process.pid, guild_id, entry.title)
        assert process.stdout is not None
        return process.stdout

    def kill(self, guild_id: int) -> bool:
        with self._lock:
            process = self._processes.pop(guild_id, None)
        if process is None:
            return False
        self._terminate(guild_id, process)
        return True

    def is_live(self, guild_id: int) -> bool:
        with self._lock:
            process = self._processes.get(guild_id)
        return process is not None and process.poll() is None

    def live_count(self) -> int:
        with self._lock:
            processes = list(self._processes.values())
        return sum(1 for process in processes if process.poll() is None)

    def shutdown(self) -> int:
        with self._lock:
            processes = list(self._processes.items())
            self._processes.clear()
        for guild_id, process in processes:
            self._terminate(guild_id, process)
        logger.info(LogTemplates.STREAMS_SHUTDOWN, len(processes))
        return len(processes)

    @staticmethod
    def _terminate(guild_id: int, process: subprocess.Popen[bytes]) -> None:
        if process.poll() is not None:
            return
        try:
            process.terminate()
            logger.debug(LogTemplates.STREAM_KILLED, process.pid, guild_id)
        except OSError as exc:
            logger.warning(LogTemplates.STREAM_KILL_FAILED, process.pid, exc)

    def _reap(self, guild_id: int, process: subprocess.Popen[bytes]) -> None:
        if process.stderr is not None:
            try:
                for raw in process.stderr:
                    line = raw.decode("utf-8", errors="replace").strip()
                    if line:
                        logger.debug(LogTemplates.STREAM_STDERR, guild_id, line)
            except (OSError, ValueError) as exc:
                logger.debug(LogTemplates.STREAM_STDERR, guild_id, repr(exc))

        code = process.wait()
        with self._lock:
            if self._processes.get(guild_id) is process:
                del self._processes[guild_id]
        logger.debug(LogTemplates.STREAM_EXITED, process.pid, guild_id, code)

"""
Unit Tests for YtDlpStreamSupervisor

subprocess.Popen is replaced by a fake whose exit is controlled by the test,
so the reaper threads can be observed deterministically.
"""

import io
import subprocess
import threading
import time
from unittest.mock import patch

import pytest

from conftest import GUILD_ID, make_entry
from discord_jukebox.config.settings import AudioSettings
from discord_jukebox.domain.shared.exceptions import StreamStartError
from discord_jukebox.infrastructure.audio.stream_supervisor import YtDlpStreamSupervisor


class FakePopen:
    instances: list["FakePopen"] = []

    def __init__(self, args, **kwargs):
        self.args = args
        self.kwargs = kwargs
        self.pid = 1000 + len(FakePopen.instances)
        self.stdout = io.BytesIO(b"audio-bytes")
        self.stderr = io.BytesIO(b"[download] 10%\n")
        self.returncode = None
        self.terminated = False
        self.reaped = threading.Event()
        self._exited = threading.Event()
        FakePopen.instances.append(self)

    def poll(self):
        return self.returncode

    def terminate(self):
        self.terminated = True
        self.exit(-15)

    def exit(self, code=0):
        self.returncode = code
        self._exited.set()

    def wait(self, timeout=None):
        self._exited.wait(timeout=5)
        self.reaped.set()
        return self.returncode


def _wait_until(predicate, timeout=2.0):
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.01)
    return False


@pytest.fixture
def supervisor():
    FakePopen.instances = []
    sup = YtDlpStreamSupervisor(AudioSettings(), command=["yt-dlp"])
    with patch.object(subprocess, "Popen", FakePopen):
        yield sup
        sup.shutdown()


# =============================================================================
# Spawn Tests
# =============================================================================


class TestStartStream:
    """Tests for YtDlpStreamSupervisor.start_stream."""

    def test_build_args(self, supervisor):
        entry = make_entry("Song")

        assert supervisor.build_args(entry) == ["yt-dlp", "-o", "-", entry.stream_ref]

    def test_returns_process_stdout(self, supervisor):
        stream = supervisor.start_stream(GUILD_ID, make_entry("Song"))

        process = FakePopen.instances[0]
        assert stream is process.stdout
        assert process.kwargs["stdout"] == subprocess.PIPE
        assert process.kwargs["stdin"] == subprocess.DEVNULL
        assert supervisor.is_live(GUILD_ID) is True
        assert supervisor.live_count() == 1

    def test_start_kills_previous_process(self, supervisor):
        """Only one process may be live per guild."""
        supervisor.start_stream(GUILD_ID, make_entry("A"))
        supervisor.start_stream(GUILD_ID, make_entry("B"))

        first, second = FakePopen.instances
        assert first.terminated is True
        assert second.terminated is False
        assert supervisor.live_count() == 1

    def test_guilds_are_independent(self, supervisor):
        supervisor.start_stream(GUILD_ID, make_entry("A"))
        supervisor.start_stream(GUILD_ID + 1, make_entry("B"))

        assert supervisor.live_count() == 2
        assert not any(process.terminated for process in FakePopen.instances)

    def test_spawn_failure_raises_stream_start_error(self, supervisor):
        with patch.object(subprocess, "Popen", side_effect=FileNotFoundError("yt-dlp")):
            with pytest.raises(StreamStartError):
                supervisor.start_stream(GUILD_ID, make_entry("A"))

        assert supervisor.is_live(GUILD_ID) is False


# =============================================================================
# Kill and Shutdown Tests
# =============================================================================


class TestKill:
    """Tests for kill and shutdown."""

    def test_kill_terminates(self, supervisor):
        supervisor.start_stream(GUILD_ID, make_entry("A"))

        assert supervisor.kill(GUILD_ID) is True
        assert FakePopen.instances[0].terminated is True
        assert supervisor.is_live(GUILD_ID) is False

    def test_kill_without_process(self, supervisor):
        assert supervisor.kill(GUILD_ID) is False

    def test_kill_after_exit_does_not_terminate(self, supervisor):
        supervisor.start_stream(GUILD_ID, make_entry("A"))
        process = FakePopen.instances[0]
        process.exit(0)

        supervisor.kill(GUILD_ID)

        assert process.terminated is False

    def test_shutdown_kills_everything(self, supervisor):
        supervisor.start_stream(GUILD_ID, make_entry("A"))
        supervisor.start_stream(GUILD_ID + 1, make_entry("B"))

        assert supervisor.shutdown() == 2
        assert all(process.terminated for process in FakePopen.instances)
        assert supervisor.live_count() == 0


# =============================================================================
# Reaper Tests
# =============================================================================


class TestReaper:
    """Tests for the per-process reaper thread."""

    def test_exit_clears_registry_slot(self, supervisor):
        supervisor.start_stream(GUILD_ID, make_entry("A"))

        FakePopen.instances[0].exit(0)

        assert _wait_until(lambda: GUILD_ID not in supervisor._processes)

    def test_old_reaper_keeps_newer_process(self, supervisor):
        """A reaper must only drop the slot if it still points at its own process."""
        supervisor.start_stream(GUILD_ID, make_entry("A"))
        supervisor.start_stream(GUILD_ID, make_entry("B"))
        first, second = FakePopen.instances

        assert first.reaped.wait(timeout=2)
        time.sleep(0.05)

        assert supervisor._processes[GUILD_ID] is second
        assert supervisor.is_live(GUILD_ID) is True

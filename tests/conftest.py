import asyncio
import io
from collections.abc import AsyncIterator

import pytest
import pytest_asyncio

from discord_jukebox.application.interfaces.feedback import PresencePublisher, ReplyTarget
from discord_jukebox.application.interfaces.media_resolver import MediaResolver
from discord_jukebox.application.interfaces.stream_supervisor import StreamSupervisor
from discord_jukebox.application.interfaces.voice_adapter import (
    AudioPlayer,
    VoiceConnection,
    VoiceGateway,
)
from discord_jukebox.config.settings import PlaybackSettings
from discord_jukebox.domain.playback.entities import Entry
from discord_jukebox.domain.playback.registry import SessionRegistry
from discord_jukebox.domain.playback.value_objects import ResolvedEntry
from discord_jukebox.domain.shared.exceptions import (
    PlaybackEngineError,
    ResolutionFailure,
    StreamStartError,
)

GUILD_ID = 111111111111
CHANNEL_ID = 222222222222


def make_entry(title: str, **overrides) -> Entry:
    slug = title.lower().replace(" ", "-")
    return Entry.create(
        title=title,
        stream_ref=overrides.pop("stream_ref", f"https://cdn.example.com/{slug}.webm"),
        source_ref=overrides.pop("source_ref", f"https://youtube.com/watch?v={slug}"),
        **overrides,
    )


# ============================================================================
# Port Fakes
# ============================================================================


class FakeReply(ReplyTarget):
    """Records every edit and follow-up sent to the requester."""

    def __init__(self):
        self.edits: list[str] = []
        self.follow_ups: list[str] = []

    async def edit(self, text: str) -> None:
        self.edits.append(text)

    async def follow_up(self, text: str) -> None:
        self.follow_ups.append(text)


class FakePresence(PresencePublisher):
    def __init__(self):
        self.current: str | None = None
        self.history: list[str | None] = []

    async def show_listening(self, title: str) -> None:
        self.current = title
        self.history.append(title)

    async def clear(self) -> None:
        self.current = None
        self.history.append(None)


class FakePlayer(AudioPlayer):
    """Player whose end-of-source events are fired by the test."""

    def __init__(self):
        self.streams: list = []
        self.handlers: list[tuple] = []
        self.stops = 0
        self.refuse = False
        self._active: tuple | None = None

    @property
    def is_playing(self) -> bool:
        return self._active is not None

    def play(self, stream, *, on_idle, on_error) -> None:
        if self.refuse:
            raise PlaybackEngineError(GUILD_ID, "source refused")
        self.streams.append(stream)
        self._active = (on_idle, on_error)
        self.handlers.append(self._active)

    def stop(self) -> None:
        self.stops += 1
        self._active = None

    async def finish(self) -> None:
        on_idle, _ = self._active
        self._active = None
        await on_idle()

    async def fail(self, message: str = "decoder error") -> None:
        _, on_error = self._active
        self._active = None
        await on_error(message)


class FakeConnection(VoiceConnection):
    def __init__(self):
        self.player = FakePlayer()
        self.destroyed = False

    def create_player(self) -> FakePlayer:
        return self.player

    async def destroy(self) -> None:
        self.destroyed = True


class FakeGateway(VoiceGateway):
    def __init__(self):
        self.connects: list[tuple[int, int, float]] = []
        self.connections: list[FakeConnection] = []
        self.error: Exception | None = None

    async def connect(self, guild_id, channel_id, *, ready_timeout) -> FakeConnection:
        self.connects.append((guild_id, channel_id, ready_timeout))
        if self.error is not None:
            raise self.error
        connection = FakeConnection()
        self.connections.append(connection)
        return connection


class FakeStreams(StreamSupervisor):
    """In-memory stream table; counts starts that found a process still live."""

    def __init__(self):
        self.live: dict[int, io.BytesIO] = {}
        self.started: list[tuple[int, Entry]] = []
        self.killed: list[int] = []
        self.failures = 0
        self.overlaps = 0

    def start_stream(self, guild_id, entry):
        if self.failures:
            self.failures -= 1
            raise StreamStartError(guild_id)
        if guild_id in self.live:
            self.overlaps += 1
        stream = io.BytesIO(entry.title.encode())
        self.live[guild_id] = stream
        self.started.append((guild_id, entry))
        return stream

    def kill(self, guild_id) -> bool:
        self.killed.append(guild_id)
        return self.live.pop(guild_id, None) is not None

    def is_live(self, guild_id) -> bool:
        return guild_id in self.live

    def live_count(self) -> int:
        return len(self.live)

    def shutdown(self) -> int:
        count = len(self.live)
        self.live.clear()
        return count


class FakeResolver(MediaResolver):
    """Yields preset entries; ``gates[i]`` holds back entry *i* until set."""

    def __init__(self):
        self.entries: list[Entry] = []
        self.playlist_title: str | None = None
        self.gates: dict[int, asyncio.Event] = {}
        self.queries: list[str] = []
        self.closed = False
        self.exhausted = False

    def is_playlist(self, query: str) -> bool:
        return "list=" in query

    async def resolve(self, query: str) -> AsyncIterator[ResolvedEntry]:
        self.queries.append(query)
        try:
            for index, entry in enumerate(self.entries):
                gate = self.gates.get(index)
                if gate is not None:
                    await gate.wait()
                yield ResolvedEntry(
                    entry=entry, is_first=index == 0, playlist_title=self.playlist_title
                )
            self.exhausted = True
            if not self.entries:
                raise ResolutionFailure(query)
        finally:
            self.closed = True


# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def playback_settings():
    """Short idle timeout and no retry backoff so tests run fast."""
    return PlaybackSettings(
        idle_timeout_seconds=0.05,
        connect_timeout_seconds=5.0,
        max_retries=3,
        retry_backoff_seconds=0.0,
    )


@pytest.fixture
def registry():
    return SessionRegistry()


@pytest.fixture
def resolver():
    return FakeResolver()


@pytest.fixture
def streams():
    return FakeStreams()


@pytest.fixture
def gateway():
    return FakeGateway()


@pytest.fixture
def presence():
    return FakePresence()


@pytest.fixture
def reply():
    return FakeReply()


@pytest_asyncio.fixture
async def orchestrator(registry, resolver, streams, gateway, presence, playback_settings):
    """Orchestrator wired to fakes; shut down after each test."""
    from discord_jukebox.application.services.playback_orchestrator import (
        PlaybackOrchestrator,
    )

    orch = PlaybackOrchestrator(
        registry=registry,
        resolver=resolver,
        streams=streams,
        voice=gateway,
        presence=presence,
        settings=playback_settings,
    )
    yield orch
    await orch.shutdown()


@pytest.fixture
def sample_entry():
    return make_entry("Test Song")

"""Process-wide, guild-keyed table of tenant sessions."""

from __future__ import annotations

import asyncio
from collections.abc import Iterator

from discord_jukebox.domain.playback.entities import TenantSession


class SessionRegistry:
    """Holds at most one session per guild plus the primitives that serialize it.

    Every guild gets its own ``asyncio.Lock``; handlers for the same guild run
    one at a time while different guilds never contend. The epoch counter is
    bumped by ``stop`` so that a resolution still running for an earlier play
    request can notice it has been superseded.
    """

    def __init__(self) -> None:
        self._sessions: dict[int, TenantSession] = {}
        self._locks: dict[int, asyncio.Lock] = {}
        self._epochs: dict[int, int] = {}

    def lock(self, guild_id: int) -> asyncio.Lock:
        lock = self._locks.get(guild_id)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[guild_id] = lock
        return lock

    def get(self, guild_id: int) -> TenantSession | None:
        return self._sessions.get(guild_id)

    def add(self, session: TenantSession) -> None:
        existing = self._sessions.get(session.guild_id)
        if existing is not None and existing is not session:
            raise RuntimeError(f"Guild {session.guild_id} already has a session")
        self._sessions[session.guild_id] = session

    def remove(self, guild_id: int) -> TenantSession | None:
        return self._sessions.pop(guild_id, None)

    def epoch(self, guild_id: int) -> int:
        return self._epochs.get(guild_id, 0)

    def bump_epoch(self, guild_id: int) -> int:
        self._epochs[guild_id] = self.epoch(guild_id) + 1
        return self._epochs[guild_id]

    def __contains__(self, guild_id: object) -> bool:
        return guild_id in self._sessions

    def __len__(self) -> int:
        return len(self._sessions)

    def __iter__(self) -> Iterator[TenantSession]:
        return iter(list(self._sessions.values()))

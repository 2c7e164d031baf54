"""
Playback Bounded Context

Entries, per-guild sessions and the registry that serializes access to them.
"""

from discord_jukebox.domain.playback.entities import Entry, TenantSession
from discord_jukebox.domain.playback.registry import SessionRegistry
from discord_jukebox.domain.playback.value_objects import AnnounceKind, ResolvedEntry, SessionState

__all__ = [
    # Entities
    "Entry",
    "TenantSession",
    # Value Objects
    "AnnounceKind",
    "ResolvedEntry",
    "SessionState",
    # Registry
    "SessionRegistry",
]

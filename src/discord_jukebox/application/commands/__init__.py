"""
Application Commands (CQRS Write Side)

Command objects and their handlers for write operations.
Commands represent intent to change the system state.
"""

from discord_jukebox.application.commands.play_query import (
    PlayQueryCommand,
    PlayQueryHandler,
    PlayResult,
    PlayStatus,
)
from discord_jukebox.application.commands.skip_entries import (
    SkipEntriesCommand,
    SkipEntriesHandler,
    SkipResult,
    SkipStatus,
)
from discord_jukebox.application.commands.stop_playback import (
    StopPlaybackCommand,
    StopPlaybackHandler,
    StopResult,
    StopStatus,
)

__all__ = [
    # Play
    "PlayQueryCommand",
    "PlayQueryHandler",
    "PlayResult",
    "PlayStatus",
    # Skip
    "SkipEntriesCommand",
    "SkipEntriesHandler",
    "SkipResult",
    "SkipStatus",
    # Stop
    "StopPlaybackCommand",
    "StopPlaybackHandler",
    "StopResult",
    "StopStatus",
]

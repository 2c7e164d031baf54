"""Application services."""

from discord_jukebox.application.services.playback_orchestrator import (
    EnqueueOutcome,
    EnqueueStatus,
    PlaybackOrchestrator,
    QueueSnapshot,
)

__all__ = [
    "EnqueueOutcome",
    "EnqueueStatus",
    "PlaybackOrchestrator",
    "QueueSnapshot",
]

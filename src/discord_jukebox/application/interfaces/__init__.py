"""
Application Interfaces (Ports)

Abstract interfaces that define contracts between the application
layer and infrastructure adapters.
"""

from discord_jukebox.application.interfaces.feedback import PresencePublisher, ReplyTarget
from discord_jukebox.application.interfaces.media_resolver import MediaResolver
from discord_jukebox.application.interfaces.stream_supervisor import StreamSupervisor
from discord_jukebox.application.interfaces.voice_adapter import (
    AudioPlayer,
    VoiceConnection,
    VoiceGateway,
)

__all__ = [
    "AudioPlayer",
    "MediaResolver",
    "PresencePublisher",
    "ReplyTarget",
    "StreamSupervisor",
    "VoiceConnection",
    "VoiceGateway",
]

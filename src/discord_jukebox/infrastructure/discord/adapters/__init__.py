"""discord.py adapters for the application ports."""

from discord_jukebox.infrastructure.discord.adapters.feedback import (
    DiscordPresence,
    InteractionReply,
)
from discord_jukebox.infrastructure.discord.adapters.voice_adapter import (
    DiscordAudioPlayer,
    DiscordVoiceConnection,
    DiscordVoiceGateway,
)

__all__ = [
    "DiscordAudioPlayer",
    "DiscordPresence",
    "DiscordVoiceConnection",
    "DiscordVoiceGateway",
    "InteractionReply",
]

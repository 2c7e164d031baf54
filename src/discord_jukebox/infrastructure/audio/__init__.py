"""yt-dlp backed resolver and stream supervisor."""

from discord_jukebox.infrastructure.audio.stream_supervisor import YtDlpStreamSupervisor
from discord_jukebox.infrastructure.audio.ytdlp_resolver import YtDlpResolver

__all__ = [
    "YtDlpResolver",
    "YtDlpStreamSupervisor",
]

"""Discord Jukebox - per-guild media queue bot built on yt-dlp and discord.py."""

__version__ = "1.0.0"

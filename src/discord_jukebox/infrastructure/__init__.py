"""
Infrastructure Layer

Adapters for the outside world: yt-dlp processes and discord.py.
"""

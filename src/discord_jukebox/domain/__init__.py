"""
Domain Layer

Pure playback logic organized by bounded contexts:
- shared/: Exceptions, constrained types and message catalogues
- playback/: Entries, tenant sessions and the session registry
"""

from discord_jukebox.domain.shared.exceptions import DomainError

__all__ = [
    "DomainError",
]

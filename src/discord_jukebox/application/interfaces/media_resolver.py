"""Port interface for turning a query into playable entries."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import AsyncIterator
from typing import TYPE_CHECKING

from discord_jukebox.domain.shared.types import NonEmptyStr

if TYPE_CHECKING:
    from ...domain.playback.value_objects import ResolvedEntry


class MediaResolver(ABC):
    """Interface for incrementally resolving a search query or URL."""

    @abstractmethod
    def resolve(self, query: NonEmptyStr) -> AsyncIterator[ResolvedEntry]:
        """Yield entries as soon as each one is parsed.

        The first yielded item has ``is_first`` set. When the sequence ends
        without a single valid entry, iteration raises ``ResolutionFailure``
        instead of finishing quietly. Closing the iterator early releases the
        underlying process.
        """
        ...

    @abstractmethod
    def is_playlist(self, query: NonEmptyStr) -> bool:
        """Tell from the query text alone whether it points at a playlist."""
        ...

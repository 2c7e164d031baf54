"""Immutable value objects for the playback bounded context."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from discord_jukebox.domain.playback.entities import Entry


class AnnounceKind(Enum):
    """How a started entry is reported to the requester."""

    FIRST_OF_SINGLE = "first_of_single"
    FIRST_OF_PLAYLIST = "first_of_playlist"
    SUBSEQUENT_AUTO = "subsequent_auto"

    @property
    def sends_message(self) -> bool:
        return self is not AnnounceKind.SUBSEQUENT_AUTO

    @classmethod
    def for_first(cls, *, is_playlist: bool) -> AnnounceKind:
        return cls.FIRST_OF_PLAYLIST if is_playlist else cls.FIRST_OF_SINGLE


class SessionState(Enum):
    """Lifecycle states of a tenant session."""

    ACTIVE = "active"
    DRAINING = "draining"
    DESTROYED = "destroyed"


@dataclass(frozen=True, slots=True)
class ResolvedEntry:
    """One item of a resolution stream.

    ``playlist_title`` is whatever the resolver had seen by the time this
    entry was emitted, so the first entry may lack a title that a later
    line reveals.
    """

    entry: Entry
    is_first: bool
    playlist_title: str | None = None

"""Port interfaces for user-visible output: replies and bot presence."""

from __future__ import annotations

from abc import ABC, abstractmethod


class ReplyTarget(ABC):
    """The deferred response of one command invocation."""

    @abstractmethod
    async def edit(self, text: str) -> None:
        """Replace the acknowledgement text."""
        ...

    @abstractmethod
    async def follow_up(self, text: str) -> None:
        """Send a second message after the acknowledgement."""
        ...


class PresencePublisher(ABC):
    """Shows what the bot is listening to."""

    @abstractmethod
    async def show_listening(self, title: str) -> None:
        ...

    @abstractmethod
    async def clear(self) -> None:
        ...

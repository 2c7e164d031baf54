"""Utility functions for formatting Discord messages."""

from __future__ import annotations

from functools import cache


@cache
def truncate(text: str, max_length: int = 90) -> str:
    if len(text) <= max_length:
        return text
    return text[: max_length - 1] + "…"


def format_titles(titles: list[str], max_length: int = 90) -> str:
    """Join titles as a bold, comma separated list."""
    return ", ".join(f"**{truncate(title, max_length)}**" for title in titles)

"""
Application Queries (CQRS Read Side)

Query objects and handlers for read operations.
"""

from discord_jukebox.application.queries.get_queue import GetQueueHandler, GetQueueQuery, QueueInfo

__all__ = [
    "GetQueueHandler",
    "GetQueueQuery",
    "QueueInfo",
]

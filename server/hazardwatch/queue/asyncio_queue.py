"""In-process asyncio queue implementation of LocationQueue."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from hazardwatch.core.models import Location


class AsyncioLocationQueue:
    """LocationQueue backed by asyncio.Queue.

    When full, the oldest pending update is dropped: only the most recent
    positions matter for geofencing.
    """

    def __init__(self, max_size: int = 100) -> None:
        self._queue: asyncio.Queue[Location] = asyncio.Queue(maxsize=max_size)

    async def put(self, location: Location) -> None:
        if self._queue.full():
            self._queue.get_nowait()
        self._queue.put_nowait(location)

    async def get(self) -> Location:
        return await self._queue.get()

    def qsize(self) -> int:
        return self._queue.qsize()

"""Queue interface (port) for user location updates."""

from __future__ import annotations

from typing import Protocol, TYPE_CHECKING

if TYPE_CHECKING:
    from hazardwatch.core.models import Location


class LocationQueue(Protocol):
    """Port: accepts location updates and delivers them to the monitor."""

    async def put(self, location: Location) -> None: ...

    async def get(self) -> Location: ...

    def qsize(self) -> int: ...

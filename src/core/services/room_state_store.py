import asyncio
import logging
import time
from dataclasses import replace
from typing import Dict, Iterable, List, Optional

from core.models.monitor_enum import StatusRule
from core.models.reading import Reading
from core.models.room_state import RoomState, SystemStatus
from core.processing.classifier import derive_status

logger = logging.getLogger(__name__)


class UnknownRoomError(KeyError):
    """Raised when a reading targets a room the store does not know."""


class RoomStateStore:
    """
    In-memory cache of the latest state of every known room.

    Rooms are never removed; a room that stops reporting simply keeps its last
    state. All reads return copies, so callers cannot mutate the cache.
    """

    def __init__(self, status_rule: StatusRule = StatusRule.STRICT):
        self.status_rule = status_rule
        self._rooms: Dict[str, RoomState] = {}
        self._lock = asyncio.Lock()

    async def register(self, room: RoomState) -> RoomState:
        """Add a room, or refresh its name/location if it already exists."""
        async with self._lock:
            existing = self._rooms.get(room.id)
            if existing is None:
                self._rooms[room.id] = replace(room)
            else:
                existing.name = room.name
                existing.location = room.location
                existing.description = room.description
            return replace(self._rooms[room.id])

    async def load(self, rooms: Iterable[RoomState]):
        for room in rooms:
            await self.register(room)
        logger.info(f"Room state store holds {len(self._rooms)} rooms")

    async def get(self, room_id: str) -> Optional[RoomState]:
        async with self._lock:
            room = self._rooms.get(room_id)
            return replace(room) if room is not None else None

    async def upsert(self, reading: Reading) -> RoomState:
        """
        Merge the reported fields of ``reading`` onto the room's state.

        Fields the device did not send keep their previous value. The status is
        recomputed from the merged state and the room is marked active.
        """
        async with self._lock:
            room = self._rooms.get(reading.room_id)
            if room is None:
                raise UnknownRoomError(reading.room_id)

            merged = replace(room, **reading.reported_fields())
            merged.status = derive_status(merged.as_reading(), self.status_rule)
            merged.is_active = True
            merged.last_update = int(time.time() * 1000)
            self._rooms[room.id] = merged
            return replace(merged)

    async def list(self) -> List[RoomState]:
        async with self._lock:
            return [replace(room) for room in self._rooms.values()]

    async def room_ids(self) -> List[str]:
        async with self._lock:
            return list(self._rooms.keys())

    async def aggregate(self) -> SystemStatus:
        """
        Combine the active rooms: any raised flag, the highest flood level and
        quake intensity, and the floored average signal strength.
        """
        async with self._lock:
            active = [replace(room) for room in self._rooms.values() if room.is_active]

        status = SystemStatus(timestamp=int(time.time() * 1000))
        if not active:
            return status

        status.fire = any(room.fire for room in active)
        status.flood = any(room.flood for room in active)
        status.quake = any(room.quake for room in active)
        status.flood_level = max(room.flood_level for room in active)
        status.quake_intensity = max(room.quake_intensity for room in active)
        status.rssi = sum(room.rssi for room in active) // len(active)
        return status

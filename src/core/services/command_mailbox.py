import asyncio
import logging
from typing import Dict, List, Optional

from core.services.room_state_store import RoomStateStore

logger = logging.getLogger(__name__)


class CommandMailbox:
    """
    Single-slot outgoing command queue per room.

    A newer command overwrites an unconsumed one. Broadcasting writes the
    command into every known room's slot one by one; there is no separate
    broadcast channel, so a later per-room command still replaces the broadcast
    for that room only. ``poll`` reads and clears a slot in one step.
    """

    def __init__(self, room_store: RoomStateStore):
        self.room_store = room_store
        self._slots: Dict[str, str] = {}
        self._lock = asyncio.Lock()

    async def enqueue(self, command: str, room_id: Optional[str] = None) -> List[str]:
        """Queue ``command`` for ``room_id``, or for every known room when it is None.

        Returns the room ids whose slot was written.
        """
        if room_id is not None:
            targets = [room_id]
        else:
            targets = await self.room_store.room_ids()

        async with self._lock:
            for target in targets:
                previous = self._slots.get(target)
                if previous is not None:
                    logger.debug(f"Command '{previous}' for room {target} replaced by '{command}'")
                self._slots[target] = command

        logger.info(f"Queued command '{command}' for room {room_id if room_id is not None else 'ALL'}")
        return targets

    async def poll(self, room_id: str) -> Optional[str]:
        """Return and remove the pending command for ``room_id``, None when empty."""
        async with self._lock:
            command = self._slots.pop(room_id, None)
        if command is not None:
            logger.info(f"Command fetched by room {room_id}: {command}")
        return command

    async def pending(self) -> Dict[str, str]:
        """Snapshot of all unconsumed commands."""
        async with self._lock:
            return dict(self._slots)

import asyncio
import logging
import random
import time
from typing import Dict, Optional

from core.models.reading import Reading
from core.services.command_mailbox import CommandMailbox
from core.services.ingestion import IngestionCoordinator
from core.services.room_state_store import RoomStateStore

logger = logging.getLogger(__name__)

# Chance per room and per tick of each simulated event
FIRE_PROBABILITY = 0.002
QUAKE_PROBABILITY = 0.002
FLOOD_PROBABILITY = 0.005

RESET_ALARM = "RESET_ALARM"
TEST_PING = "TEST_PING"


class DeviceEmulator:
    """
    Stands in for the ESP32 room devices when no hardware is attached.

    Every tick each known room sends one reading and then polls its command
    slot, like the firmware does over HTTP.
    """

    def __init__(
        self,
        coordinator: IngestionCoordinator,
        mailbox: CommandMailbox,
        room_store: RoomStateStore,
        interval: float = 2.0,
        rng: Optional[random.Random] = None,
    ):
        self.coordinator = coordinator
        self.mailbox = mailbox
        self.room_store = room_store
        self.interval = interval
        self.rng = rng or random.Random()
        self.running = False
        # Simulated water level per room, drifts slowly
        self._water: Dict[str, float] = {}
        self._task: Optional[asyncio.Task] = None

    def start(self):
        if self.running:
            return
        self.running = True
        self._task = asyncio.get_running_loop().create_task(self._loop())
        logger.info(f"DeviceEmulator started (interval {self.interval}s)")

    def stop(self) -> Optional[asyncio.Task]:
        """Cancel the loop. Returns the cancelled task so the caller can await it."""
        self.running = False
        task, self._task = self._task, None
        if task:
            task.cancel()
        logger.info("DeviceEmulator stopped")
        return task

    async def _loop(self):
        while self.running:
            start_loop = time.time()
            try:
                await self.step()
            except Exception as e:
                logger.error(f"DeviceEmulator tick failed: {e}")
            elapsed = time.time() - start_loop
            await asyncio.sleep(max(0, self.interval - elapsed))

    async def step(self):
        """Send one reading for every known room and apply pending commands."""
        for room_id in await self.room_store.room_ids():
            await self.coordinator.ingest(self.generate_reading(room_id))
            command = await self.mailbox.poll(room_id)
            if command is not None:
                self.apply_command(room_id, command)

    def generate_reading(self, room_id: str) -> Reading:
        water = self._water.get(room_id, 0.0)
        water = min(40.0, max(0.0, water + self.rng.uniform(-2.0, 2.5)))
        self._water[room_id] = water

        fire = self.rng.random() < FIRE_PROBABILITY
        quake = self.rng.random() < QUAKE_PROBABILITY
        flood = self.rng.random() < FLOOD_PROBABILITY
        flood_level = int(self.rng.uniform(45, 80)) if flood else int(water)

        return Reading(
            id=room_id,
            fire=fire,
            flood=flood,
            quake=quake,
            flood_level=flood_level,
            quake_intensity=round(self.rng.uniform(3.5, 7.5), 1) if quake else 0.0,
            temperature=round(22 + self.rng.uniform(-2, 2), 1),
            humidity=round(45 + self.rng.uniform(-5, 5), 1),
            rssi=self.rng.randint(-80, -40),
            timestamp=int(time.time() * 1000),
        )

    def apply_command(self, room_id: str, command: str):
        if command == RESET_ALARM:
            self._water[room_id] = 0.0
            logger.info(f"[Emulator] Room {room_id} alarm reset")
        elif command == TEST_PING:
            logger.info(f"[Emulator] Room {room_id} answered ping")
        else:
            logger.warning(f"[Emulator] Room {room_id} ignored unknown command '{command}'")

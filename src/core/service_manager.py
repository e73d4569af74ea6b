# External libs
import asyncio
import logging
from typing import List, Optional

# Internal libs
from core.config_loader import config_loader
from core.db.database import Database
from core.db.repository import MonitoringRepository
from core.event_hub import EventHub
from core.models.monitor_enum import StatusRule
from core.models.room_state import RoomState
from core.processing.alert_deriver import AlertDeriver
from core.services.command_mailbox import CommandMailbox
from core.services.device_emulator import DeviceEmulator
from core.services.ingestion import IngestionCoordinator
from core.services.live_updates import ConnectionManager
from core.services.notifier import PushNotifier
from core.services.room_state_store import RoomStateStore
from core.services.serial_handler import SerialBridge

logger = logging.getLogger(__name__)


class ServiceManager:
    """
    Builds and owns every stateful component of the backend.

    One instance lives on ``app.state.services`` for the lifetime of the
    process; routers reach the components through it.
    """

    def __init__(
        self,
        database_url: str,
        ntfy_url: str,
        notifications_enabled: bool = True,
        notification_timeout: Optional[float] = None,
        status_rule: StatusRule = StatusRule.STRICT,
        auto_provision_rooms: bool = False,
    ):
        self.database = Database(database_url)
        self.repository = MonitoringRepository(self.database)
        self.event_hub = EventHub()
        self.notifier = PushNotifier(ntfy_url, enabled=notifications_enabled, timeout=notification_timeout)
        self.room_store = RoomStateStore(status_rule)
        self.mailbox = CommandMailbox(self.room_store)
        self.alert_deriver = AlertDeriver(self.repository, self.notifier)
        self.coordinator = IngestionCoordinator(
            self.room_store,
            self.repository,
            self.alert_deriver,
            self.event_hub,
            status_rule=status_rule,
            auto_provision=auto_provision_rooms,
        )
        self.connection_manager = ConnectionManager(self.event_hub)
        self.emulator: Optional[DeviceEmulator] = None
        self.serial_bridge: Optional[SerialBridge] = None
        self._tasks: List[asyncio.Task] = []

    async def start_services(
        self,
        emulation: bool = True,
        emulation_interval: float = 2.0,
        serial_port: Optional[str] = None,
        serial_baud: int = 115200,
    ):
        """Initialize storage, load rooms and start the device side.

        A database that cannot be initialized is fatal and the error propagates.
        """
        logger.info("Starting background services...")
        self.event_hub.init(asyncio.get_running_loop())

        await self.database.init()
        await self.seed_rooms()

        if emulation:
            self.emulator = DeviceEmulator(
                self.coordinator, self.mailbox, self.room_store, interval=emulation_interval
            )
            self.emulator.start()

        if serial_port:
            self.serial_bridge = SerialBridge(
                serial_port, self.coordinator, self.mailbox, baudrate=serial_baud
            )
            self._tasks.append(asyncio.get_running_loop().create_task(self.serial_bridge.run()))

        logger.info("Background services started.")

    async def seed_rooms(self):
        """Upsert configured rooms, then load every persisted room into the cache."""
        for room in config_loader.get_rooms():
            await self.repository.upsert_room(
                room.id, room.name, room.location, description=room.description, is_active=room.isActive
            )

        records = await self.repository.get_all_rooms()
        await self.room_store.load(
            RoomState(
                id=record.id,
                name=record.name,
                location=record.location,
                description=record.description,
                is_active=record.is_active,
            )
            for record in records
        )

    async def stop_services(self):
        """Stop background services."""
        tasks = list(self._tasks)
        if self.emulator:
            emulator_task = self.emulator.stop()
            if emulator_task:
                tasks.append(emulator_task)

        if self.serial_bridge:
            self.serial_bridge.stop()

        for task in tasks:
            if not task.done():
                task.cancel()
        # Let an in-flight ingest unwind before the engine is disposed
        await asyncio.gather(*tasks, return_exceptions=True)
        self._tasks.clear()

        self.connection_manager.close()
        await self.notifier.drain()
        await self.event_hub.drain()
        await self.database.dispose()
        logger.info("Background services stopped.")

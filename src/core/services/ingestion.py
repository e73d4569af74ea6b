import logging
from datetime import datetime
from typing import Optional

from core.db.repository import MonitoringRepository
from core.event_hub import ROOMS_UPDATE, SENSOR_UPDATE, EventHub
from core.models.monitor_enum import StatusRule
from core.models.reading import Reading
from core.models.records import SensorLog
from core.models.room_state import RoomState
from core.processing.alert_deriver import AlertDeriver
from core.processing.classifier import Classification, classify
from core.services.room_state_store import RoomStateStore, UnknownRoomError

logger = logging.getLogger(__name__)

# Signal strength stored when the device does not report one
DEFAULT_RSSI = -45


def build_sensor_log(reading: Reading, room: RoomState, classification: Classification) -> SensorLog:
    if reading.timestamp:
        timestamp = datetime.fromtimestamp(reading.timestamp / 1000)
    else:
        timestamp = datetime.now()

    return SensorLog(
        room_id=room.id,
        room_name=room.name,
        location=room.location,
        fire=reading.is_fire,
        flood=reading.is_flood,
        quake=reading.is_quake,
        flood_level=reading.level,
        quake_intensity=reading.intensity,
        temperature=reading.temperature,
        humidity=reading.humidity,
        rssi=reading.rssi if reading.rssi is not None else DEFAULT_RSSI,
        status=classification.status,
        event_type=classification.event_type,
        message=classification.message,
        timestamp=timestamp,
    )


class IngestionCoordinator:
    """
    Runs one inbound reading through the whole pipeline.

    Order: room lookup, classification and cache update, log persistence,
    alerting, fan-out to live subscribers. Persistence failures are logged and
    never stop alerting or the acknowledgement sent back to the device.
    """

    def __init__(
        self,
        room_store: RoomStateStore,
        repository: MonitoringRepository,
        alert_deriver: AlertDeriver,
        event_hub: EventHub,
        status_rule: StatusRule = StatusRule.STRICT,
        auto_provision: bool = False,
    ):
        self.room_store = room_store
        self.repository = repository
        self.alert_deriver = alert_deriver
        self.event_hub = event_hub
        self.status_rule = status_rule
        self.auto_provision = auto_provision

    async def ingest(self, reading: Reading) -> Optional[RoomState]:
        """Process a reading. Returns the updated room, None when the room is unknown."""
        room = await self.room_store.get(reading.room_id)
        if room is None:
            if not self.auto_provision:
                logger.warning(f"Unknown room: {reading.room_id}")
                return None
            room = await self._provision(reading.room_id)

        classification = classify(reading, room.name, self.status_rule)
        try:
            updated = await self.room_store.upsert(reading)
        except UnknownRoomError:
            logger.warning(f"Unknown room: {reading.room_id}")
            return None

        try:
            await self.repository.insert_sensor_log(build_sensor_log(reading, room, classification))
        except Exception as e:
            logger.error(f"Error saving sensor log for room {room.id}: {e}")

        await self.alert_deriver.process(reading, room)

        self.event_hub.send_all_on_topic(SENSOR_UPDATE, reading.to_payload())
        rooms = await self.room_store.list()
        self.event_hub.send_all_on_topic(ROOMS_UPDATE, [r.to_dict() for r in rooms])
        return updated

    async def _provision(self, room_id: str) -> RoomState:
        room = await self.room_store.register(RoomState(id=room_id, name=f"Room {room_id}"))
        logger.info(f"Provisioned new room {room_id}")
        try:
            await self.repository.upsert_room(room.id, room.name, room.location)
        except Exception as e:
            logger.error(f"Error saving provisioned room {room_id}: {e}")
        return room

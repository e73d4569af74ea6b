"""Tests for the ingestion pipeline: cache, logs, alerts and fan-out."""
import pytest

from core.event_hub import ROOMS_UPDATE, SENSOR_UPDATE
from core.models.monitor_enum import RoomStatus
from core.models.reading import Reading
from core.processing.alert_deriver import AlertDeriver
from core.services.ingestion import IngestionCoordinator


@pytest.fixture
def published(event_hub):
    messages = []
    event_hub.subscribe(SENSOR_UPDATE, lambda topic, message: messages.append((topic, message)))
    event_hub.subscribe(ROOMS_UPDATE, lambda topic, message: messages.append((topic, message)))
    return messages


class TestIngestionCoordinator:

    @pytest.mark.asyncio
    async def test_fire_scenario(self, coordinator, repository, notifier, sent_notifications, published):
        room = await coordinator.ingest(Reading(id="1", fire=True, quake=False, flood=False, flood_level=0))
        await notifier.drain()

        assert room.status == RoomStatus.CRITICAL
        logs = await repository.get_sensor_logs()
        assert len(logs) == 1
        assert logs[0].status == "critical"
        assert logs[0].event_type == "critical"
        assert logs[0].message == "FIRE DETECTED in Living Room"

        alerts = await repository.get_active_alerts()
        assert [(a.alert_type, a.value, a.severity) for a in alerts] == [("fire", 1.0, "critical")]
        assert len(sent_notifications) == 1
        assert sent_notifications[0].priority == "urgent"

    @pytest.mark.asyncio
    async def test_low_flood_scenario(self, coordinator, repository, published):
        room = await coordinator.ingest(Reading(id="2", flood=True, flood_level=35))

        assert room.status == RoomStatus.CRITICAL
        logs = await repository.get_sensor_logs()
        assert logs[0].event_type == "warning"
        assert await repository.get_active_alerts() == []

    @pytest.mark.asyncio
    async def test_unknown_room_changes_nothing(self, coordinator, repository, room_store, published):
        before = await room_store.list()

        assert await coordinator.ingest(Reading(id="99", fire=True)) is None

        assert await room_store.list() == before
        assert await repository.get_sensor_logs() == []
        assert await repository.get_active_alerts() == []
        assert published == []

    @pytest.mark.asyncio
    async def test_publishes_reading_and_rooms(self, coordinator, published):
        await coordinator.ingest(Reading(id="3", flood_level=12))

        topics = [topic for topic, _ in published]
        assert topics == [SENSOR_UPDATE, ROOMS_UPDATE]
        assert published[0][1] == {"id": "3", "floodLevel": 12}
        rooms = published[1][1]
        assert [r["id"] for r in rooms] == ["1", "2", "3"]
        assert rooms[2]["floodLevel"] == 12

    @pytest.mark.asyncio
    async def test_log_failure_does_not_block_alerts(
        self, coordinator, repository, notifier, sent_notifications, published, monkeypatch
    ):
        async def broken_insert(log):
            raise RuntimeError("database is locked")

        monkeypatch.setattr(repository, "insert_sensor_log", broken_insert)

        room = await coordinator.ingest(Reading(id="1", fire=True))
        await notifier.drain()

        assert room is not None
        assert len(await repository.get_active_alerts()) == 1
        assert len(sent_notifications) == 1
        assert len(published) == 2

    @pytest.mark.asyncio
    async def test_log_uses_device_timestamp(self, coordinator, repository):
        await coordinator.ingest(Reading(id="1", timestamp=1700000000000))
        logs = await repository.get_sensor_logs()
        assert int(logs[0].timestamp.timestamp()) == 1700000000

    @pytest.mark.asyncio
    async def test_missing_fields_use_log_defaults(self, coordinator, repository):
        await coordinator.ingest(Reading(id="1"))
        log = (await repository.get_sensor_logs())[0]
        assert (log.fire, log.flood, log.quake, log.flood_level, log.quake_intensity, log.rssi) == (
            False, False, False, 0, 0.0, -45
        )

    @pytest.mark.asyncio
    async def test_auto_provision_creates_room(self, room_store, repository, notifier, event_hub):
        coordinator = IngestionCoordinator(
            room_store, repository, AlertDeriver(repository, notifier), event_hub, auto_provision=True
        )

        room = await coordinator.ingest(Reading(id="7", flood_level=5))

        assert room.name == "Room 7"
        assert "7" in await room_store.room_ids()
        assert [r.id for r in await repository.get_all_rooms()] == ["7"]
        assert len(await repository.get_sensor_logs()) == 1

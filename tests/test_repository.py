"""Tests for the SQL table store."""
from datetime import datetime, timedelta

import pytest

from core.db.repository import AlertNotFoundError, LogFilters
from core.models.monitor_enum import AlertType, EventType, RoomStatus, Severity
from core.models.records import AlertEvent, SensorLog

BASE_TIME = datetime(2026, 3, 1, 12, 0, 0)


def make_log(room_id="1", room_name="Living Room", status=RoomStatus.NORMAL,
             event_type=EventType.HEARTBEAT, message=None, minutes=0, location="Ground Floor"):
    return SensorLog(
        room_id=room_id,
        room_name=room_name,
        location=location,
        status=status,
        event_type=event_type,
        message=message or f"Normal reading from {room_name}",
        timestamp=BASE_TIME + timedelta(minutes=minutes),
    )


def make_alert(alert_type=AlertType.FLOOD, severity=Severity.WARNING, value=45.0, minutes=0):
    when = BASE_TIME + timedelta(minutes=minutes)
    return AlertEvent(
        room_id="2",
        room_name="Kitchen",
        alert_type=alert_type,
        severity=severity,
        value=value,
        timestamp=when,
        created_at=when,
    )


class TestSensorLogs:

    @pytest.mark.asyncio
    async def test_insert_and_list_newest_first(self, repository):
        await repository.insert_sensor_log(make_log(minutes=0))
        await repository.insert_sensor_log(make_log(minutes=5))

        logs = await repository.get_sensor_logs()
        assert [log.timestamp for log in logs] == [BASE_TIME + timedelta(minutes=5), BASE_TIME]
        assert logs[0].id is not None

    @pytest.mark.asyncio
    async def test_pagination(self, repository):
        for minute in range(5):
            await repository.insert_sensor_log(make_log(minutes=minute))

        page = await repository.get_sensor_logs(limit=2, offset=2)
        assert [log.timestamp.minute for log in page] == [2, 1]

    @pytest.mark.asyncio
    async def test_logs_by_room(self, repository):
        await repository.insert_sensor_log(make_log(room_id="1"))
        await repository.insert_sensor_log(make_log(room_id="2", room_name="Kitchen"))

        logs = await repository.get_sensor_logs_by_room("2")
        assert [log.room_name for log in logs] == ["Kitchen"]

    @pytest.mark.asyncio
    async def test_logs_by_date_range(self, repository):
        for minute in (0, 10, 20):
            await repository.insert_sensor_log(make_log(minutes=minute))

        logs = await repository.get_sensor_logs_by_date_range(
            BASE_TIME + timedelta(minutes=5), BASE_TIME + timedelta(minutes=20)
        )
        assert [log.timestamp.minute for log in logs] == [20, 10]

    @pytest.mark.asyncio
    async def test_search_matches_name_location_and_message(self, repository):
        await repository.insert_sensor_log(make_log(room_id="1", room_name="Living Room"))
        await repository.insert_sensor_log(make_log(room_id="4", room_name="Basement", location="Basement"))
        await repository.insert_sensor_log(make_log(
            room_id="2", room_name="Kitchen", status=RoomStatus.CRITICAL,
            event_type=EventType.CRITICAL, message="FIRE DETECTED in Kitchen",
        ))

        assert [log.room_id for log in await repository.search_sensor_logs("living")] == ["1"]
        assert [log.room_id for log in await repository.search_sensor_logs("BASEMENT")] == ["4"]
        assert [log.room_id for log in await repository.search_sensor_logs("fire")] == ["2"]
        assert len(await repository.search_sensor_logs("")) == 3

    @pytest.mark.asyncio
    async def test_search_filters(self, repository):
        await repository.insert_sensor_log(make_log(room_id="1", minutes=0))
        await repository.insert_sensor_log(make_log(
            room_id="2", room_name="Kitchen", status=RoomStatus.WARNING,
            event_type=EventType.WARNING, minutes=10,
        ))

        by_status = await repository.search_sensor_logs("", LogFilters(status="warning"))
        assert [log.room_id for log in by_status] == ["2"]

        by_type = await repository.search_sensor_logs("", LogFilters(event_type="heartbeat"))
        assert [log.room_id for log in by_type] == ["1"]

        by_date = await repository.search_sensor_logs("", LogFilters(start_date=BASE_TIME + timedelta(minutes=5)))
        assert [log.room_id for log in by_date] == ["2"]

        by_room = await repository.search_sensor_logs("room", LogFilters(room_id="1"))
        assert [log.room_id for log in by_room] == ["1"]

    @pytest.mark.asyncio
    async def test_stats(self, repository):
        await repository.insert_sensor_log(make_log())
        await repository.insert_sensor_log(make_log())
        await repository.insert_sensor_log(make_log(status=RoomStatus.WARNING))
        await repository.insert_sensor_log(make_log(status=RoomStatus.CRITICAL))

        assert await repository.get_log_stats() == {"total": 4, "critical": 1, "warning": 1, "normal": 2}

    @pytest.mark.asyncio
    async def test_stats_empty(self, repository):
        assert await repository.get_log_stats() == {"total": 0, "critical": 0, "warning": 0, "normal": 0}


class TestRooms:

    @pytest.mark.asyncio
    async def test_upsert_inserts_then_updates(self, repository):
        created = await repository.upsert_room("1", "Living Room", "Ground Floor")
        updated = await repository.upsert_room("1", "Lounge", "Ground Floor", description="Renamed")

        rooms = await repository.get_all_rooms()
        assert len(rooms) == 1
        assert rooms[0].name == "Lounge"
        assert rooms[0].description == "Renamed"
        assert updated.created_at == created.created_at
        assert updated.updated_at >= created.updated_at


class TestAlerts:

    @pytest.mark.asyncio
    async def test_active_and_recent(self, repository):
        first = await repository.insert_alert_event(make_alert(minutes=0))
        await repository.insert_alert_event(make_alert(AlertType.FIRE, Severity.CRITICAL, 1.0, minutes=1))

        await repository.resolve_alert(first.id)

        active = await repository.get_active_alerts()
        assert [a.alert_type for a in active] == ["fire"]
        recent = await repository.get_recent_alerts(limit=10)
        assert [a.alert_type for a in recent] == ["fire", "flood"]

    @pytest.mark.asyncio
    async def test_resolve_sets_flag_and_time(self, repository):
        alert = await repository.insert_alert_event(make_alert())
        assert alert.resolved is False
        assert alert.resolved_at is None

        resolved = await repository.resolve_alert(alert.id)
        assert resolved.resolved is True
        assert resolved.resolved_at is not None

    @pytest.mark.asyncio
    async def test_resolve_unknown_alert(self, repository):
        with pytest.raises(AlertNotFoundError):
            await repository.resolve_alert(12345)

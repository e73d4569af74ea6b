import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, List, Optional

from sqlalchemy import and_, desc, func, or_, select

from core.db.database import Database
from core.db.models import AlertEventRecord, RoomRecord, SensorLogRecord
from core.models.records import AlertEvent, SensorLog

logger = logging.getLogger(__name__)

# Upper bound on rows returned by a search
SEARCH_LIMIT = 500


class AlertNotFoundError(LookupError):
    """Raised when resolving an alert id that does not exist."""


@dataclass
class LogFilters:
    room_id: Optional[str] = None
    event_type: Optional[str] = None
    status: Optional[str] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None


class MonitoringRepository:
    """
    Table store for sensor logs, rooms and alert events.

    Every method opens its own session and commits before returning; errors
    from the database propagate to the caller.
    """

    def __init__(self, database: Database):
        self.database = database

    # Sensor logs

    async def insert_sensor_log(self, log: SensorLog) -> SensorLogRecord:
        record = SensorLogRecord(
            room_id=log.room_id,
            room_name=log.room_name,
            location=log.location,
            fire=log.fire,
            flood=log.flood,
            quake=log.quake,
            flood_level=log.flood_level,
            quake_intensity=log.quake_intensity,
            temperature=log.temperature,
            humidity=log.humidity,
            rssi=log.rssi,
            status=log.status.value,
            event_type=log.event_type.value,
            message=log.message,
            timestamp=log.timestamp,
            created_at=log.created_at,
        )
        async with self.database.session() as session:
            session.add(record)
            await session.commit()
            await session.refresh(record)
        return record

    async def get_sensor_logs(self, limit: int = 100, offset: int = 0) -> List[SensorLogRecord]:
        stmt = (
            select(SensorLogRecord)
            .order_by(desc(SensorLogRecord.timestamp), desc(SensorLogRecord.id))
            .limit(limit)
            .offset(offset)
        )
        async with self.database.session() as session:
            result = await session.execute(stmt)
            return list(result.scalars().all())

    async def get_sensor_logs_by_room(self, room_id: str, limit: int = 50) -> List[SensorLogRecord]:
        stmt = (
            select(SensorLogRecord)
            .where(SensorLogRecord.room_id == room_id)
            .order_by(desc(SensorLogRecord.timestamp), desc(SensorLogRecord.id))
            .limit(limit)
        )
        async with self.database.session() as session:
            result = await session.execute(stmt)
            return list(result.scalars().all())

    async def get_sensor_logs_by_date_range(self, start: datetime, end: datetime) -> List[SensorLogRecord]:
        stmt = (
            select(SensorLogRecord)
            .where(and_(SensorLogRecord.timestamp >= start, SensorLogRecord.timestamp <= end))
            .order_by(desc(SensorLogRecord.timestamp))
        )
        async with self.database.session() as session:
            result = await session.execute(stmt)
            return list(result.scalars().all())

    async def search_sensor_logs(self, search: str = "", filters: Optional[LogFilters] = None) -> List[SensorLogRecord]:
        filters = filters or LogFilters()
        conditions = []

        if search:
            pattern = f"%{search}%"
            conditions.append(or_(
                SensorLogRecord.room_name.ilike(pattern),
                SensorLogRecord.location.ilike(pattern),
                SensorLogRecord.message.ilike(pattern),
            ))
        if filters.room_id:
            conditions.append(SensorLogRecord.room_id == filters.room_id)
        if filters.event_type:
            conditions.append(SensorLogRecord.event_type == filters.event_type)
        if filters.status:
            conditions.append(SensorLogRecord.status == filters.status)
        if filters.start_date:
            conditions.append(SensorLogRecord.timestamp >= filters.start_date)
        if filters.end_date:
            conditions.append(SensorLogRecord.timestamp <= filters.end_date)

        stmt = select(SensorLogRecord)
        if conditions:
            stmt = stmt.where(and_(*conditions))
        stmt = stmt.order_by(desc(SensorLogRecord.timestamp), desc(SensorLogRecord.id)).limit(SEARCH_LIMIT)

        async with self.database.session() as session:
            result = await session.execute(stmt)
            return list(result.scalars().all())

    async def get_log_stats(self) -> Dict[str, int]:
        stmt = select(SensorLogRecord.status, func.count(SensorLogRecord.id)).group_by(SensorLogRecord.status)
        async with self.database.session() as session:
            result = await session.execute(stmt)
            counts = {status: count for status, count in result.all()}

        total = sum(counts.values())
        critical = counts.get("critical", 0)
        warning = counts.get("warning", 0)
        return {
            "total": total,
            "critical": critical,
            "warning": warning,
            "normal": total - critical - warning,
        }

    # Rooms

    async def upsert_room(
        self,
        room_id: str,
        name: str,
        location: str,
        description: Optional[str] = None,
        is_active: bool = True,
    ) -> RoomRecord:
        now = datetime.now()
        async with self.database.session() as session:
            record = await session.get(RoomRecord, room_id)
            if record is None:
                record = RoomRecord(
                    id=room_id,
                    name=name,
                    location=location,
                    description=description,
                    is_active=is_active,
                    created_at=now,
                    updated_at=now,
                )
                session.add(record)
            else:
                record.name = name
                record.location = location
                record.description = description
                record.is_active = is_active
                record.updated_at = now
            await session.commit()
            await session.refresh(record)
        return record

    async def get_all_rooms(self) -> List[RoomRecord]:
        async with self.database.session() as session:
            result = await session.execute(select(RoomRecord).order_by(RoomRecord.id))
            return list(result.scalars().all())

    # Alert events

    async def insert_alert_event(self, alert: AlertEvent) -> AlertEventRecord:
        record = AlertEventRecord(
            room_id=alert.room_id,
            room_name=alert.room_name,
            alert_type=alert.alert_type.value,
            severity=alert.severity.value,
            value=alert.value,
            resolved=alert.resolved,
            resolved_at=alert.resolved_at,
            timestamp=alert.timestamp,
            created_at=alert.created_at,
        )
        async with self.database.session() as session:
            session.add(record)
            await session.commit()
            await session.refresh(record)
        return record

    async def get_active_alerts(self) -> List[AlertEventRecord]:
        stmt = (
            select(AlertEventRecord)
            .where(AlertEventRecord.resolved.is_(False))
            .order_by(desc(AlertEventRecord.timestamp), desc(AlertEventRecord.id))
        )
        async with self.database.session() as session:
            result = await session.execute(stmt)
            return list(result.scalars().all())

    async def get_recent_alerts(self, limit: int = 50) -> List[AlertEventRecord]:
        stmt = (
            select(AlertEventRecord)
            .order_by(desc(AlertEventRecord.timestamp), desc(AlertEventRecord.id))
            .limit(limit)
        )
        async with self.database.session() as session:
            result = await session.execute(stmt)
            return list(result.scalars().all())

    async def resolve_alert(self, alert_id: int) -> AlertEventRecord:
        async with self.database.session() as session:
            record = await session.get(AlertEventRecord, alert_id)
            if record is None:
                raise AlertNotFoundError(f"Alert {alert_id} not found")
            record.resolved = True
            record.resolved_at = datetime.now()
            await session.commit()
            await session.refresh(record)
        logger.info(f"Alert {alert_id} resolved")
        return record

import logging
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from core.db.repository import LogFilters
from core.models.monitor_enum import EventType, RoomStatus
from core.models.records import SensorLog
from core.service_manager import ServiceManager
from routers.deps import get_services
from schemas import LogStats, SensorLogCreate, SensorLogOut

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/logs", tags=["logs"])


@router.get("", response_model=List[SensorLogOut])
async def list_logs(
    limit: int = Query(default=100, ge=1, le=1000),
    offset: int = Query(default=0, ge=0),
    services: ServiceManager = Depends(get_services),
):
    """Sensor logs, newest first."""
    try:
        return await services.repository.get_sensor_logs(limit, offset)
    except Exception as e:
        logger.error(f"Error fetching logs: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch logs")


@router.get("/search", response_model=List[SensorLogOut])
async def search_logs(
    search: str = "",
    room_id: Optional[str] = Query(default=None, alias="roomId"),
    event_type: Optional[EventType] = Query(default=None, alias="eventType"),
    status: Optional[RoomStatus] = None,
    start_date: Optional[datetime] = Query(default=None, alias="startDate"),
    end_date: Optional[datetime] = Query(default=None, alias="endDate"),
    services: ServiceManager = Depends(get_services),
):
    """
    Search logs by room name, location or message (case-insensitive), with
    optional filters. Returns at most 500 entries, newest first.
    """
    filters = LogFilters(
        room_id=room_id,
        event_type=event_type.value if event_type else None,
        status=status.value if status else None,
        start_date=_naive(start_date),
        end_date=_naive(end_date),
    )
    try:
        return await services.repository.search_sensor_logs(search, filters)
    except Exception as e:
        logger.error(f"Error searching logs: {e}")
        raise HTTPException(status_code=500, detail="Failed to search logs")


@router.get("/stats", response_model=LogStats)
async def log_stats(services: ServiceManager = Depends(get_services)) -> LogStats:
    """Number of logs per status."""
    try:
        return LogStats(**await services.repository.get_log_stats())
    except Exception as e:
        logger.error(f"Error fetching stats: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch stats")


@router.get("/room/{room_id}", response_model=List[SensorLogOut])
async def room_logs(
    room_id: str,
    limit: int = Query(default=50, ge=1, le=1000),
    services: ServiceManager = Depends(get_services),
):
    try:
        return await services.repository.get_sensor_logs_by_room(room_id, limit)
    except Exception as e:
        logger.error(f"Error fetching room logs: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch room logs")


@router.post("", response_model=SensorLogOut)
async def create_log(body: SensorLogCreate, services: ServiceManager = Depends(get_services)):
    """Store a log entry written by hand from the dashboard."""
    log = SensorLog(
        room_id=body.room_id,
        room_name=body.room_name,
        location=body.location,
        fire=body.fire,
        flood=body.flood,
        quake=body.quake,
        flood_level=body.flood_level,
        quake_intensity=body.quake_intensity,
        temperature=body.temperature,
        humidity=body.humidity,
        rssi=body.rssi,
        status=body.status,
        event_type=body.event_type,
        message=body.message,
        timestamp=_naive(body.timestamp) or datetime.now(),
    )
    try:
        return await services.repository.insert_sensor_log(log)
    except Exception as e:
        logger.error(f"Error creating log: {e}")
        raise HTTPException(status_code=500, detail="Failed to create log")


def _naive(value: Optional[datetime]) -> Optional[datetime]:
    """Stored timestamps are naive local time; convert aware inputs to match."""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone().replace(tzinfo=None)

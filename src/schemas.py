from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from core.models.monitor_enum import AlertType, EventType, RoomStatus, Severity


class CamelModel(BaseModel):
    """Base for bodies exchanged with the dashboard, which uses camelCase keys."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class AppHealthOK(BaseModel):
    status: str
    app: str


class StatusResponse(BaseModel):
    status: str


class CommandResponse(BaseModel):
    command: Optional[str] = None


class ControlRequest(CamelModel):
    cmd: str = Field(min_length=1)
    room_id: Optional[str] = None


class SensorLogOut(CamelModel):
    id: int
    room_id: str
    room_name: str
    location: str
    fire: bool
    flood: bool
    quake: bool
    flood_level: int
    quake_intensity: float
    temperature: Optional[float] = None
    humidity: Optional[float] = None
    rssi: int
    status: RoomStatus
    event_type: EventType
    message: Optional[str] = None
    timestamp: datetime
    created_at: datetime


class SensorLogCreate(CamelModel):
    """Manual log entry submitted from the dashboard."""
    room_id: str
    room_name: str
    location: str = ""
    fire: bool = False
    flood: bool = False
    quake: bool = False
    flood_level: int = Field(default=0, ge=0, le=100)
    quake_intensity: float = Field(default=0.0, ge=0.0)
    temperature: Optional[float] = None
    humidity: Optional[float] = None
    rssi: int = -45
    status: RoomStatus = RoomStatus.NORMAL
    event_type: EventType = EventType.HEARTBEAT
    message: Optional[str] = None
    timestamp: Optional[datetime] = None


class LogStats(BaseModel):
    total: int
    critical: int
    warning: int
    normal: int


class AlertEventOut(CamelModel):
    id: int
    room_id: str
    room_name: str
    alert_type: AlertType
    severity: Severity
    value: float
    resolved: bool
    resolved_at: Optional[datetime] = None
    timestamp: datetime
    created_at: datetime


class RoomOut(CamelModel):
    id: str
    name: str
    location: str
    description: Optional[str] = None
    is_active: bool
    created_at: datetime
    updated_at: datetime


class RoomStateOut(CamelModel):
    id: str
    name: str
    location: str
    fire: bool
    flood: bool
    quake: bool
    flood_level: int
    quake_intensity: float
    rssi: int
    temperature: Optional[float] = None
    humidity: Optional[float] = None
    last_update: int
    status: RoomStatus
    is_active: bool


class SystemStatusOut(CamelModel):
    """House-wide summary shown on the dashboard overview."""
    fire: bool
    flood: bool
    quake: bool
    flood_level: int
    quake_intensity: float
    rssi: int
    timestamp: int

"""
Durable records produced from ingested readings.
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from core.models.monitor_enum import AlertType, EventType, RoomStatus, Severity


@dataclass
class SensorLog:
    """A classified reading, written once and never modified."""
    room_id: str
    room_name: str
    location: str
    status: RoomStatus
    event_type: EventType
    message: str
    timestamp: datetime
    fire: bool = False
    flood: bool = False
    quake: bool = False
    flood_level: int = 0
    quake_intensity: float = 0.0
    temperature: Optional[float] = None
    humidity: Optional[float] = None
    rssi: int = -45
    created_at: datetime = field(default_factory=datetime.now)


@dataclass
class AlertEvent:
    """A threshold crossing; only ever mutated to become resolved."""
    room_id: str
    room_name: str
    alert_type: AlertType
    severity: Severity
    # Flood level or quake intensity, 1.0 for fire
    value: float
    resolved: bool = False
    resolved_at: Optional[datetime] = None
    timestamp: datetime = field(default_factory=datetime.now)
    created_at: datetime = field(default_factory=datetime.now)


@dataclass
class Notification:
    """Push message for the external notification endpoint."""
    title: str
    body: str
    priority: str = "high"
    tags: str = "warning"

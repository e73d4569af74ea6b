"""
Room state model: the latest known reading of a room plus its derived status.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from core.models.monitor_enum import RoomStatus
from core.models.reading import Reading


@dataclass
class RoomState:
    id: str
    name: str
    location: str = ""
    fire: bool = False
    flood: bool = False
    quake: bool = False
    flood_level: int = 0
    quake_intensity: float = 0.0
    rssi: int = -45
    temperature: Optional[float] = 22.0
    humidity: Optional[float] = 45.0
    timestamp: Optional[int] = None
    status: RoomStatus = RoomStatus.NORMAL
    # Milliseconds since epoch of the last accepted reading
    last_update: int = 0
    is_active: bool = True
    description: Optional[str] = field(default=None, repr=False)

    def as_reading(self) -> Reading:
        """Rebuild a full reading from the cached values."""
        return Reading(
            id=self.id,
            fire=self.fire,
            flood=self.flood,
            quake=self.quake,
            flood_level=self.flood_level,
            quake_intensity=self.quake_intensity,
            temperature=self.temperature,
            humidity=self.humidity,
            rssi=self.rssi,
            timestamp=self.timestamp,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "location": self.location,
            "fire": self.fire,
            "flood": self.flood,
            "quake": self.quake,
            "floodLevel": self.flood_level,
            "quakeIntensity": self.quake_intensity,
            "rssi": self.rssi,
            "temperature": self.temperature,
            "humidity": self.humidity,
            "lastUpdate": self.last_update,
            "status": self.status.value,
            "isActive": self.is_active,
        }


@dataclass
class SystemStatus:
    """House-wide summary over the active rooms."""
    fire: bool = False
    flood: bool = False
    quake: bool = False
    flood_level: int = 0
    quake_intensity: float = 0.0
    # Average over active rooms, floored; 0 when no room is active
    rssi: int = 0
    timestamp: int = 0

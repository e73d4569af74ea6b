"""
Reading model: one raw sample reported by a room device.
"""
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

# Fields that describe the sensors themselves (everything but the room id)
SENSOR_FIELDS = (
    "fire",
    "flood",
    "quake",
    "flood_level",
    "quake_intensity",
    "temperature",
    "humidity",
    "rssi",
    "timestamp",
)


class Reading(BaseModel):
    """
    A single reading as sent by an ESP32 or serial device.

    Every sensor field is optional: a device only reports what it has, and
    missing fields keep their previous value in the room cache. The room is
    identified by ``id`` on the wire.
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    room_id: str = Field(alias="id")
    fire: Optional[bool] = None
    flood: Optional[bool] = None
    quake: Optional[bool] = None
    flood_level: Optional[int] = Field(default=None, ge=0, le=100)
    quake_intensity: Optional[float] = Field(default=None, ge=0.0)
    temperature: Optional[float] = None
    humidity: Optional[float] = None
    rssi: Optional[int] = None
    # Milliseconds since epoch, as produced by the device
    timestamp: Optional[int] = None

    @field_validator("room_id", mode="before")
    @classmethod
    def _stringify_room_id(cls, value: Any) -> Any:
        # Firmware sometimes sends numeric ids
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value

    @property
    def is_fire(self) -> bool:
        return bool(self.fire)

    @property
    def is_flood(self) -> bool:
        return bool(self.flood)

    @property
    def is_quake(self) -> bool:
        return bool(self.quake)

    @property
    def level(self) -> int:
        return self.flood_level or 0

    @property
    def intensity(self) -> float:
        return self.quake_intensity or 0.0

    def reported_fields(self) -> Dict[str, Any]:
        """Sensor fields the device actually sent, keyed by attribute name."""
        return {
            name: getattr(self, name)
            for name in SENSOR_FIELDS
            if getattr(self, name) is not None
        }

    def to_payload(self) -> Dict[str, Any]:
        """Wire representation, as pushed on the ``sensor-update`` channel."""
        return self.model_dump(by_alias=True, exclude_none=True)

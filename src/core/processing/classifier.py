"""
Status and event-type classification of readings.

All functions here are pure: they only look at the reading they are given.
"""
from dataclasses import dataclass

from core.models.monitor_enum import EventType, RoomStatus, StatusRule
from core.models.reading import Reading

# Flood level above which a reading is at least a warning
FLOOD_WARNING_LEVEL = 30
# Flood level above which a raised flood flag is critical (event type, threshold rule)
FLOOD_CRITICAL_LEVEL = 50
# Flood level above which a heartbeat becomes an alert
FLOOD_ALERT_LEVEL = 10


@dataclass(frozen=True)
class Classification:
    status: RoomStatus
    event_type: EventType
    message: str


def derive_status(reading: Reading, rule: StatusRule = StatusRule.STRICT) -> RoomStatus:
    """Map a reading to the room status according to ``rule``."""
    if rule == StatusRule.THRESHOLD:
        critical = reading.is_fire or reading.is_quake or (
            reading.is_flood and reading.level > FLOOD_CRITICAL_LEVEL
        )
        warning = reading.is_flood or reading.level > FLOOD_WARNING_LEVEL
    else:
        critical = reading.is_fire or reading.is_quake or reading.is_flood
        warning = reading.level > FLOOD_WARNING_LEVEL

    if critical:
        return RoomStatus.CRITICAL
    if warning:
        return RoomStatus.WARNING
    return RoomStatus.NORMAL


def derive_event_type(reading: Reading) -> EventType:
    """Event type tag stored with the log. Independent of the status rule."""
    if reading.is_fire or reading.is_quake or (reading.is_flood and reading.level > FLOOD_CRITICAL_LEVEL):
        return EventType.CRITICAL
    if reading.is_flood or reading.level > FLOOD_WARNING_LEVEL:
        return EventType.WARNING
    if reading.level > FLOOD_ALERT_LEVEL:
        return EventType.ALERT
    return EventType.HEARTBEAT


def build_message(reading: Reading, room_name: str) -> str:
    conditions = []
    if reading.is_fire:
        conditions.append("FIRE DETECTED")
    if reading.is_flood:
        conditions.append(f"FLOOD {reading.level}%")
    if reading.is_quake:
        conditions.append(f"QUAKE {reading.intensity:g}")

    if conditions:
        return f"{', '.join(conditions)} in {room_name}"
    return f"Normal reading from {room_name}"


def classify(reading: Reading, room_name: str, rule: StatusRule = StatusRule.STRICT) -> Classification:
    return Classification(
        status=derive_status(reading, rule),
        event_type=derive_event_type(reading),
        message=build_message(reading, room_name),
    )

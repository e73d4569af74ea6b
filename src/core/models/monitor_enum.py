"""Enumerations for statuses, event types and alert categories."""
from enum import Enum


class RoomStatus(str, Enum):
    """Derived health of a room."""
    NORMAL = "normal"
    WARNING = "warning"
    CRITICAL = "critical"


class EventType(str, Enum):
    """Tag stored with every sensor log."""
    HEARTBEAT = "heartbeat"
    ALERT = "alert"
    WARNING = "warning"
    CRITICAL = "critical"


class AlertType(str, Enum):
    FIRE = "fire"
    FLOOD = "flood"
    QUAKE = "quake"


class Severity(str, Enum):
    WARNING = "warning"
    CRITICAL = "critical"


class StatusRule(str, Enum):
    """Which rule is used to derive a room status from a reading.

    STRICT: any raised flag is critical, otherwise floodLevel > 30 is a warning.
    THRESHOLD: flood only becomes critical above 50%, mirroring the event type tiers.
    """
    STRICT = "strict"
    THRESHOLD = "threshold"

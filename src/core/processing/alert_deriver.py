"""
Alert derivation: decides which alert events a reading produces and notifies
about each of them.
"""
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import List

from core.db.repository import MonitoringRepository
from core.models.monitor_enum import AlertType, Severity
from core.models.reading import Reading
from core.models.records import AlertEvent, Notification
from core.models.room_state import RoomState
from core.services.notifier import PushNotifier

logger = logging.getLogger(__name__)

FLOOD_ALERT_LEVEL = 40
FLOOD_CRITICAL_LEVEL = 60
QUAKE_ALERT_INTENSITY = 4.0
QUAKE_CRITICAL_INTENSITY = 6.0
# Stored as the value of fire alerts, which carry no measurement
FIRE_ALERT_VALUE = 1.0


@dataclass
class AlertDecision:
    alert: AlertEvent
    notification: Notification


def _priority(severity: Severity) -> str:
    return "urgent" if severity == Severity.CRITICAL else "high"


def derive_alerts(reading: Reading, room: RoomState) -> List[AlertDecision]:
    """
    Apply the fire, flood and quake rules to a reading.

    The rules are independent, so one reading can yield up to three decisions.
    """
    now = datetime.now()
    decisions: List[AlertDecision] = []

    if reading.is_fire:
        decisions.append(AlertDecision(
            alert=AlertEvent(
                room_id=room.id,
                room_name=room.name,
                alert_type=AlertType.FIRE,
                severity=Severity.CRITICAL,
                value=FIRE_ALERT_VALUE,
                timestamp=now,
                created_at=now,
            ),
            notification=Notification(
                title="FIRE ALERT - CRITICAL",
                body=f"Fire detected in {room.name} ({room.location}). Evacuate immediately!",
                priority="urgent",
                tags="fire,warning,rotating_light",
            ),
        ))

    if reading.is_flood and reading.level > FLOOD_ALERT_LEVEL:
        severity = Severity.CRITICAL if reading.level > FLOOD_CRITICAL_LEVEL else Severity.WARNING
        decisions.append(AlertDecision(
            alert=AlertEvent(
                room_id=room.id,
                room_name=room.name,
                alert_type=AlertType.FLOOD,
                severity=severity,
                value=float(reading.level),
                timestamp=now,
                created_at=now,
            ),
            notification=Notification(
                title=f"FLOOD ALERT - {severity.value.upper()}",
                body=f"Flood detected in {room.name} ({room.location}). Water level: {reading.level}%",
                priority=_priority(severity),
                tags="ocean,warning" if severity == Severity.CRITICAL else "droplet,warning",
            ),
        ))

    if reading.is_quake and reading.intensity > QUAKE_ALERT_INTENSITY:
        severity = Severity.CRITICAL if reading.intensity > QUAKE_CRITICAL_INTENSITY else Severity.WARNING
        decisions.append(AlertDecision(
            alert=AlertEvent(
                room_id=room.id,
                room_name=room.name,
                alert_type=AlertType.QUAKE,
                severity=severity,
                value=reading.intensity,
                timestamp=now,
                created_at=now,
            ),
            notification=Notification(
                title=f"EARTHQUAKE ALERT - {severity.value.upper()}",
                body=f"Earthquake detected in {room.name} ({room.location}). Magnitude: {reading.intensity:g}",
                priority=_priority(severity),
                tags="warning,zap",
            ),
        ))

    return decisions


class AlertDeriver:
    """Persists derived alerts and hands their notifications to the notifier."""

    def __init__(self, repository: MonitoringRepository, notifier: PushNotifier):
        self.repository = repository
        self.notifier = notifier

    async def process(self, reading: Reading, room: RoomState) -> List[AlertEvent]:
        """
        Insert one alert event and dispatch one notification per triggered rule.

        A failed insert is logged and does not stop the notification, and a
        failed notification never touches the stored alert.
        """
        emitted: List[AlertEvent] = []
        for decision in derive_alerts(reading, room):
            alert = decision.alert
            try:
                await self.repository.insert_alert_event(alert)
            except Exception as e:
                logger.error(f"Failed to store {alert.alert_type.value} alert for room {room.id}: {e}")
            else:
                logger.warning(
                    f"{alert.alert_type.value.upper()} alert ({alert.severity.value}) in {room.name}, value={alert.value:g}"
                )
            emitted.append(alert)
            self.notifier.dispatch(decision.notification)
        return emitted

"""
SQLAlchemy tables for sensor logs, rooms and alert events.
"""
from sqlalchemy import Boolean, Column, DateTime, Float, Integer, String, Text
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class SensorLogRecord(Base):
    __tablename__ = "sensor_logs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    room_id = Column(String, index=True, nullable=False)
    room_name = Column(String, nullable=False)
    location = Column(String, nullable=False)

    fire = Column(Boolean, nullable=False, default=False)
    flood = Column(Boolean, nullable=False, default=False)
    quake = Column(Boolean, nullable=False, default=False)

    flood_level = Column(Integer, nullable=False, default=0)
    quake_intensity = Column(Float, nullable=False, default=0.0)
    temperature = Column(Float, nullable=True)
    humidity = Column(Float, nullable=True)
    rssi = Column(Integer, nullable=False)

    status = Column(String, nullable=False, default="normal")  # normal, warning, critical
    event_type = Column(String, index=True, nullable=False)  # heartbeat, alert, warning, critical
    message = Column(Text, nullable=True)

    timestamp = Column(DateTime, index=True, nullable=False)
    created_at = Column(DateTime, nullable=False)


class RoomRecord(Base):
    __tablename__ = "rooms"

    id = Column(String, primary_key=True)
    name = Column(String, nullable=False)
    location = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, nullable=False)
    updated_at = Column(DateTime, nullable=False)


class AlertEventRecord(Base):
    __tablename__ = "alert_events"

    id = Column(Integer, primary_key=True, autoincrement=True)
    room_id = Column(String, index=True, nullable=False)
    room_name = Column(String, nullable=False)
    alert_type = Column(String, nullable=False)  # fire, flood, quake
    severity = Column(String, nullable=False)  # warning, critical
    value = Column(Float, nullable=False)
    resolved = Column(Boolean, index=True, nullable=False, default=False)
    resolved_at = Column(DateTime, nullable=True)
    timestamp = Column(DateTime, index=True, nullable=False)
    created_at = Column(DateTime, nullable=False)

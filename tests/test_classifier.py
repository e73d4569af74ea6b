"""Tests for status, event type and message derivation."""
import pytest

from core.models.monitor_enum import EventType, RoomStatus, StatusRule
from core.models.reading import Reading
from core.processing.classifier import build_message, classify, derive_event_type, derive_status


class TestStatus:
    """Status derivation under both rules."""

    @pytest.mark.parametrize("flags", [
        {"fire": True},
        {"quake": True, "quake_intensity": 2.0},
        {"fire": True, "flood": True, "flood_level": 90},
    ])
    @pytest.mark.parametrize("rule", list(StatusRule))
    def test_fire_or_quake_is_always_critical(self, flags, rule):
        reading = Reading(id="1", **flags)
        assert derive_status(reading, rule) == RoomStatus.CRITICAL

    def test_strict_rule_any_flood_flag_is_critical(self):
        reading = Reading(id="2", flood=True, flood_level=35)
        assert derive_status(reading, StatusRule.STRICT) == RoomStatus.CRITICAL

    def test_threshold_rule_low_flood_is_warning(self):
        reading = Reading(id="2", flood=True, flood_level=35)
        assert derive_status(reading, StatusRule.THRESHOLD) == RoomStatus.WARNING

    @pytest.mark.parametrize("rule", list(StatusRule))
    def test_flood_above_fifty_is_critical(self, rule):
        reading = Reading(id="2", flood=True, flood_level=51)
        assert derive_status(reading, rule) == RoomStatus.CRITICAL

    @pytest.mark.parametrize("rule", list(StatusRule))
    def test_high_water_without_flag_is_warning(self, rule):
        reading = Reading(id="2", flood_level=31)
        assert derive_status(reading, rule) == RoomStatus.WARNING

    @pytest.mark.parametrize("rule", list(StatusRule))
    def test_quiet_reading_is_normal(self, rule):
        reading = Reading(id="2", flood_level=30)
        assert derive_status(reading, rule) == RoomStatus.NORMAL

    def test_default_rule_is_strict(self):
        assert derive_status(Reading(id="2", flood=True)) == RoomStatus.CRITICAL


class TestEventType:

    @pytest.mark.parametrize("fields,expected", [
        ({"fire": True}, EventType.CRITICAL),
        ({"quake": True}, EventType.CRITICAL),
        ({"flood": True, "flood_level": 51}, EventType.CRITICAL),
        ({"flood": True, "flood_level": 50}, EventType.WARNING),
        ({"flood": True, "flood_level": 0}, EventType.WARNING),
        ({"flood_level": 31}, EventType.WARNING),
        ({"flood_level": 30}, EventType.ALERT),
        ({"flood_level": 11}, EventType.ALERT),
        ({"flood_level": 10}, EventType.HEARTBEAT),
        ({}, EventType.HEARTBEAT),
    ])
    def test_event_type(self, fields, expected):
        assert derive_event_type(Reading(id="1", **fields)) == expected


class TestMessage:

    def test_normal_message(self):
        assert build_message(Reading(id="1"), "Kitchen") == "Normal reading from Kitchen"

    def test_fire_message(self):
        assert build_message(Reading(id="1", fire=True), "Kitchen") == "FIRE DETECTED in Kitchen"

    def test_combined_message(self):
        reading = Reading(id="1", fire=True, flood=True, flood_level=45, quake=True, quake_intensity=5.5)
        assert build_message(reading, "Garage") == "FIRE DETECTED, FLOOD 45%, QUAKE 5.5 in Garage"

    def test_whole_intensity_has_no_trailing_zero(self):
        reading = Reading(id="1", quake=True, quake_intensity=5.0)
        assert build_message(reading, "Garage") == "QUAKE 5 in Garage"


def test_classify_fire_scenario():
    reading = Reading(id="1", fire=True, quake=False, flood=False, flood_level=0)
    result = classify(reading, "Living Room")
    assert result.status == RoomStatus.CRITICAL
    assert result.event_type == EventType.CRITICAL
    assert result.message == "FIRE DETECTED in Living Room"


def test_classify_low_flood_scenario():
    reading = Reading(id="2", flood=True, flood_level=35)
    strict = classify(reading, "Kitchen", StatusRule.STRICT)
    threshold = classify(reading, "Kitchen", StatusRule.THRESHOLD)
    assert strict.status == RoomStatus.CRITICAL
    assert threshold.status == RoomStatus.WARNING
    assert strict.event_type == threshold.event_type == EventType.WARNING

"""Pytest configuration and fixtures for test suite."""

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

import main
from core.db.database import Database
from core.db.repository import MonitoringRepository
from core.event_hub import EventHub
from core.models.room_state import RoomState
from core.processing.alert_deriver import AlertDeriver
from core.services.command_mailbox import CommandMailbox
from core.services.ingestion import IngestionCoordinator
from core.services.notifier import PushNotifier
from core.services.room_state_store import RoomStateStore


@pytest.fixture
def sent_notifications(monkeypatch):
    """Replace the HTTP call of the notifier and record what would be sent."""
    sent = []

    def fake_send(self, notification):
        sent.append(notification)
        return True

    monkeypatch.setattr(PushNotifier, "send", fake_send)
    return sent


@pytest.fixture
def client(tmp_path, monkeypatch, sent_notifications):
    """Application client with its own database and no simulated devices."""
    monkeypatch.setattr(main.settings, "database_url", f"sqlite+aiosqlite:///{tmp_path / 'monitoring.db'}")
    monkeypatch.setattr(main.settings, "emulation_mode", False)
    monkeypatch.setattr(main.settings, "serial_port", None)
    monkeypatch.setattr(main.settings, "auto_provision_rooms", False)

    with TestClient(main.app) as test_client:
        yield test_client


@pytest_asyncio.fixture
async def repository(tmp_path):
    database = Database(f"sqlite+aiosqlite:///{tmp_path / 'unit.db'}")
    await database.init()
    yield MonitoringRepository(database)
    await database.dispose()


@pytest_asyncio.fixture
async def room_store():
    store = RoomStateStore()
    await store.load([
        RoomState(id="1", name="Living Room", location="Ground Floor"),
        RoomState(id="2", name="Kitchen", location="Ground Floor"),
        RoomState(id="3", name="Master Bedroom", location="First Floor"),
    ])
    return store


@pytest.fixture
def notifier(sent_notifications):
    return PushNotifier("http://ntfy.invalid/alert")


@pytest.fixture
def event_hub():
    return EventHub()


@pytest.fixture
def coordinator(room_store, repository, notifier, event_hub):
    return IngestionCoordinator(room_store, repository, AlertDeriver(repository, notifier), event_hub)


@pytest.fixture
def mailbox(room_store):
    return CommandMailbox(room_store)

import logging
from typing import Any, List

from fastapi import WebSocket

from core.event_hub import ROOMS_UPDATE, SENSOR_UPDATE, EventHub

logger = logging.getLogger(__name__)


class ConnectionManager:
    """Relays hub updates to every connected dashboard WebSocket."""

    def __init__(self, event_hub: EventHub):
        self.active_connections: List[WebSocket] = []
        self.event_hub = event_hub
        event_hub.subscribe(SENSOR_UPDATE, self._on_update)
        event_hub.subscribe(ROOMS_UPDATE, self._on_update)

    async def connect(self, websocket: WebSocket):
        await websocket.accept()
        self.active_connections.append(websocket)
        logger.info(f"Dashboard connected ({len(self.active_connections)} live)")

    def disconnect(self, websocket: WebSocket):
        if websocket in self.active_connections:
            self.active_connections.remove(websocket)
            logger.info(f"Dashboard disconnected ({len(self.active_connections)} live)")

    async def _on_update(self, topic: str, message: Any):
        await self.broadcast({"event": topic, "data": message})

    async def broadcast(self, payload: dict):
        for websocket in self.active_connections[:]:
            try:
                await websocket.send_json(payload)
            except Exception as e:
                logger.warning(f"Dropping dashboard connection: {e}")
                self.disconnect(websocket)

    def close(self):
        self.event_hub.unsubscribe(SENSOR_UPDATE, self._on_update)
        self.event_hub.unsubscribe(ROOMS_UPDATE, self._on_update)
        self.active_connections.clear()

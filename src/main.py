from fastapi import FastAPI, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware
from pydantic_settings import BaseSettings, SettingsConfigDict
from contextlib import asynccontextmanager
from typing import List, Optional
import logging

from routers.api import router as api_router
from schemas import AppHealthOK
from core.config_loader import config_loader
from core.db.database import DEFAULT_DATABASE_URL
from core.models.monitor_enum import StatusRule
from core.service_manager import ServiceManager
from core.services.notifier import DEFAULT_NTFY_URL

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="MONITOR_", env_file=".env", extra="ignore")

    app_name: str = "Home Sensor Monitor API"
    debug: bool = False
    database_url: str = DEFAULT_DATABASE_URL
    ntfy_url: str = DEFAULT_NTFY_URL
    notifications_enabled: bool = True
    # No timeout by default: the transport default applies
    notification_timeout: Optional[float] = None
    # Simulate the room devices when no hardware is attached
    # Defaults to the config file, can be overridden by environment variable
    emulation_mode: bool = config_loader.get_emulation_mode()
    emulation_interval: float = 2.0
    serial_port: Optional[str] = None
    serial_baud: int = 115200
    status_rule: StatusRule = config_loader.get_status_rule()
    auto_provision_rooms: bool = config_loader.get_auto_provision_rooms()
    cors_origins: List[str] = ["*"]


settings = Settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build the services for this process and tear them down on shutdown."""
    services = ServiceManager(
        database_url=settings.database_url,
        ntfy_url=settings.ntfy_url,
        notifications_enabled=settings.notifications_enabled,
        notification_timeout=settings.notification_timeout,
        status_rule=settings.status_rule,
        auto_provision_rooms=settings.auto_provision_rooms,
    )
    logger.info(
        "Starting background services in %s mode", "emulation" if settings.emulation_mode else "device"
    )
    try:
        await services.start_services(
            emulation=settings.emulation_mode,
            emulation_interval=settings.emulation_interval,
            serial_port=settings.serial_port,
            serial_baud=settings.serial_baud,
        )
    except Exception as e:
        logger.error("Failed to start services: %s", e)
        raise

    app.state.services = services
    try:
        yield
    finally:
        logger.info("Stopping background services")
        await services.stop_services()


app = FastAPI(title=settings.app_name, debug=settings.debug, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/", tags=["meta"])
async def read_root() -> dict[str, str]:
    return {"message": settings.app_name}


@app.get("/health", tags=["meta"], response_model=AppHealthOK)
async def healthcheck() -> AppHealthOK:
    return AppHealthOK(status="ok", app=settings.app_name)


@app.websocket("/ws")
async def live_updates(websocket: WebSocket):
    """Push channel for the dashboard: ``sensor-update`` and ``rooms-update`` events."""
    manager = websocket.app.state.services.connection_manager
    await manager.connect(websocket)
    try:
        while True:
            data = await websocket.receive_text()
            if data == "ping":
                await websocket.send_json({"event": "pong"})
    except WebSocketDisconnect:
        manager.disconnect(websocket)


# mount API router under /api
app.include_router(api_router, prefix="/api")
logging.getLogger("uvicorn.access").setLevel(logging.WARNING)

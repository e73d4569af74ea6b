from fastapi import APIRouter

from routers import alerts, commands, logs, readings, rooms, status

router = APIRouter()

# include sub-routers
router.include_router(readings.router)
router.include_router(commands.router)
router.include_router(logs.router)
router.include_router(alerts.router)
router.include_router(rooms.router)
router.include_router(status.router)

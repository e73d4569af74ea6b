import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException

from core.service_manager import ServiceManager
from routers.deps import get_services
from schemas import RoomOut, RoomStateOut

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/rooms", tags=["rooms"])


@router.get("", response_model=List[RoomOut])
async def list_rooms(services: ServiceManager = Depends(get_services)):
    """Rooms known to the database."""
    try:
        return await services.repository.get_all_rooms()
    except Exception as e:
        logger.error(f"Error fetching rooms: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch rooms")


@router.get("/live", response_model=List[RoomStateOut])
async def live_rooms(services: ServiceManager = Depends(get_services)):
    """Current cached state of every room, as pushed on ``rooms-update``."""
    return await services.room_store.list()

from fastapi import APIRouter, Depends

from core.service_manager import ServiceManager
from routers.deps import get_services
from schemas import SystemStatusOut

router = APIRouter(tags=["rooms"])


@router.get("/status", response_model=SystemStatusOut)
async def system_status(services: ServiceManager = Depends(get_services)):
    """
    Summary over active rooms: any fire, flood or quake flag, the highest
    flood level and quake intensity, and the average signal strength.
    Requested by the dashboard on load.
    """
    return await services.room_store.aggregate()

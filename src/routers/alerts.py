import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query

from core.db.repository import AlertNotFoundError
from core.service_manager import ServiceManager
from routers.deps import get_services
from schemas import AlertEventOut

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/alerts", tags=["alerts"])


@router.get("/active", response_model=List[AlertEventOut])
async def active_alerts(services: ServiceManager = Depends(get_services)):
    """Alerts that have not been resolved yet, newest first."""
    try:
        return await services.repository.get_active_alerts()
    except Exception as e:
        logger.error(f"Error fetching alerts: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch alerts")


@router.get("/recent", response_model=List[AlertEventOut])
async def recent_alerts(
    limit: int = Query(default=50, ge=1, le=1000),
    services: ServiceManager = Depends(get_services),
):
    try:
        return await services.repository.get_recent_alerts(limit)
    except Exception as e:
        logger.error(f"Error fetching alerts: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch alerts")


@router.patch("/{alert_id}/resolve", response_model=AlertEventOut, responses={
    404: {
        "description": "Alert not found.",
        "content": {
            "application/json": {
                "example": {"detail": "Alert 42 not found"}
            }
        }
    }
})
async def resolve_alert(alert_id: int, services: ServiceManager = Depends(get_services)):
    """Mark an alert as resolved and stamp the resolution time."""
    try:
        return await services.repository.resolve_alert(alert_id)
    except AlertNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception as e:
        logger.error(f"Error resolving alert: {e}")
        raise HTTPException(status_code=500, detail="Failed to resolve alert")

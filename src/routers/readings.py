import logging

from fastapi import APIRouter, Depends

from core.models.reading import Reading
from core.service_manager import ServiceManager
from routers.deps import get_services
from schemas import StatusResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["device"])


@router.post("/readings", response_model=StatusResponse)
async def receive_reading(reading: Reading, services: ServiceManager = Depends(get_services)) -> StatusResponse:
    """
    Receive one reading from an ESP32 or serial device.

    The reading is classified, cached, logged, checked for alerts and pushed to
    the dashboard. The device always gets ``success`` once the body is valid:
    unknown rooms and storage failures are only logged server side.
    """
    logger.debug(f"Received from device (Room {reading.room_id}): {reading.to_payload()}")
    await services.coordinator.ingest(reading)
    return StatusResponse(status="success")

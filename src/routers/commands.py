from typing import Optional

from fastapi import APIRouter, Depends, Query

from core.service_manager import ServiceManager
from routers.deps import get_services
from schemas import CommandResponse, ControlRequest, StatusResponse

router = APIRouter(tags=["commands"])


@router.get("/commands", response_model=CommandResponse)
async def poll_command(
    room_id: Optional[str] = Query(default=None, alias="id"),
    services: ServiceManager = Depends(get_services),
) -> CommandResponse:
    """
    Polled by devices. Returns the pending command for the room and removes it,
    so each command is delivered once. ``command`` is null when nothing is pending.
    """
    if not room_id:
        return CommandResponse(command=None)
    command = await services.mailbox.poll(room_id)
    return CommandResponse(command=command)


@router.post("/control", response_model=StatusResponse)
async def queue_command(request: ControlRequest, services: ServiceManager = Depends(get_services)) -> StatusResponse:
    """
    Queue a command from the dashboard.

    Without ``roomId`` the command is written into every known room's slot.
    A pending command for a room is replaced by the newer one.
    """
    await services.mailbox.enqueue(request.cmd, request.room_id)
    return StatusResponse(status="Command Queued")

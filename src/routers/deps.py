from fastapi import Request

from core.service_manager import ServiceManager


def get_services(request: Request) -> ServiceManager:
    """Services built by the application lifespan."""
    return request.app.state.services

"""FastAPI dependencies."""

from fastapi import Request

from luna_ops.services.container import Services


def get_services(request: Request) -> Services:
    """Service container attached to the app in create_app or the lifespan."""
    return request.app.state.services

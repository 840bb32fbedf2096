"""Business services and their wiring."""

from luna_ops.services.container import Services, build_services

__all__ = ["Services", "build_services"]

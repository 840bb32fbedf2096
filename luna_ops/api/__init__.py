"""HTTP API (FastAPI)."""

from luna_ops.api.server import create_app

__all__ = ["create_app"]

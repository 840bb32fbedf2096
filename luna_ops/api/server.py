"""FastAPI application: error mapping, lifespan and route registration."""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from luna_ops.api.attendance_routes import router as attendance_router
from luna_ops.api.catalog_routes import router as catalog_router
from luna_ops.api.checkout_routes import router as checkout_router
from luna_ops.api.manufacturing_routes import router as manufacturing_router
from luna_ops.api.order_routes import router as order_router
from luna_ops.api.partner_routes import router as partner_router
from luna_ops.api.referral_routes import router as referral_router
from luna_ops.api.webhook_routes import router as webhook_router
from luna_ops.exceptions import ExternalServiceError, LunaOpsError
from luna_ops.services.container import Services, build_services
from luna_ops.utils.logger import get_logger
from luna_ops.utils.tracing import init_tracing, shutdown_tracing

logger = get_logger("luna_ops.api.server")


async def _handle_luna_ops_error(request: Request, exc: LunaOpsError) -> JSONResponse:
    """Render service errors as {"error_code", "message"} with the exception's HTTP status."""
    if isinstance(exc, ExternalServiceError):
        logger.error(
            "api.external_service_error",
            path=request.url.path,
            service=exc.service,
            diagnostic=exc.diagnostic,
        )
    elif exc.status_code >= 500:
        logger.error("api.error", path=request.url.path, error_code=exc.error_code, error=str(exc))
    else:
        logger.info("api.rejected", path=request.url.path, error_code=exc.error_code, error=str(exc))
    return JSONResponse(
        status_code=exc.status_code,
        content={"error_code": exc.error_code, "message": str(exc)},
    )


@asynccontextmanager
async def _lifespan(app: FastAPI, build_in_lifespan: bool = True):
    """Build the service container when none was injected; close it on shutdown."""
    init_tracing()
    if build_in_lifespan:
        services = build_services()
        services.db.init()
        app.state.services = services
        logger.info("api.lifespan.services_ready")

    yield

    if build_in_lifespan:
        app.state.services.close()
        logger.info("api.lifespan.services_closed")
    shutdown_tracing()


def create_app(services: Optional[Services] = None) -> FastAPI:
    """
    Create the FastAPI app. If services is passed (tests, embedding), use it as-is and
    leave its lifecycle to the caller. Otherwise the lifespan builds it from config.
    """
    build_in_lifespan = services is None
    app = FastAPI(
        title="Luna Ops",
        version="0.1.0",
        lifespan=lambda app: _lifespan(app, build_in_lifespan=build_in_lifespan),
    )
    if services is not None:
        app.state.services = services

    app.add_exception_handler(LunaOpsError, _handle_luna_ops_error)

    app.include_router(checkout_router)
    app.include_router(order_router)
    app.include_router(catalog_router)
    app.include_router(manufacturing_router)
    app.include_router(referral_router)
    app.include_router(partner_router)
    app.include_router(attendance_router)
    app.include_router(webhook_router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    return app

"""
FastAPI application factory.

* Owns the single ``DispatchService`` instance on ``app.state.dispatch``.
* Registers routes for drivers, riders, rides and admin.
* Optionally seeds the demo fleet on startup via lifespan events.
* Maps domain contract violations to HTTP errors.
* Applies rate-limiting middleware.
* Swagger / OpenAPI UI available at ``/docs``.
"""

from contextlib import asynccontextmanager
import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from src.api.middleware import limiter
from src.api.routes import admin, drivers, riders, rides
from src.config import settings
from src.domain.errors import InvalidConfiguration, InvalidStateTransition
from src.services.dispatch import DispatchService, build_dispatch_service

logging.basicConfig(level=settings.log_level)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Seed the demo fleet on startup when configured."""
    if settings.seed_demo_fleet:
        from seed import seed_fleet

        seed_fleet(app.state.dispatch)
    yield
    dispatch: DispatchService = app.state.dispatch
    logger.info(
        "Dispatch shutting down: %d rides in flight, %d archived",
        len(dispatch.in_flight_rides()),
        len(dispatch.completed_rides()),
    )


async def _invalid_transition_handler(
    request: Request, exc: InvalidStateTransition
) -> JSONResponse:
    return JSONResponse(status_code=409, content={"detail": str(exc)})


async def _invalid_configuration_handler(
    request: Request, exc: InvalidConfiguration
) -> JSONResponse:
    return JSONResponse(status_code=422, content={"detail": str(exc)})


def create_app(dispatch: Optional[DispatchService] = None) -> FastAPI:
    app = FastAPI(
        title="Ride-Hailing Dispatch API",
        description=(
            "Matches riders with nearby or top-rated drivers, tracks each "
            "ride through its lifecycle, and prices completed rides with "
            "surge and rider discounts."
        ),
        version="1.0.0",
        lifespan=lifespan,
    )

    app.state.dispatch = dispatch or build_dispatch_service(settings)

    # Rate limiter
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    # Domain errors
    app.add_exception_handler(InvalidStateTransition, _invalid_transition_handler)
    app.add_exception_handler(InvalidConfiguration, _invalid_configuration_handler)

    # Routers
    app.include_router(drivers.router, prefix="/api/v1")
    app.include_router(riders.router, prefix="/api/v1")
    app.include_router(rides.router, prefix="/api/v1")
    app.include_router(admin.router, prefix="/api/v1")

    return app

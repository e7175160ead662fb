"""
FastAPI application factory.

* Registers routes for sellers, subscriptions, delivery, locations and admin.
* Starts / stops the background subscription sweep via lifespan events.
* Applies rate-limiting middleware and the JSON error envelope.
* Swagger / OpenAPI UI available at ``/docs``.
"""

from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from src.api.errors import add_exception_handlers
from src.api.middleware import limiter
from src.api.routes import admin, delivery, locations, sellers, subscriptions
from src.config import settings
from src.workers import sweeper as _sweeper

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Start the subscription sweep on startup; stop on shutdown."""
    await _sweeper.start_sweep_loop()
    yield
    await _sweeper.stop_sweep_loop()


def create_app() -> FastAPI:
    app = FastAPI(
        title="Maala Local Commerce API",
        description=(
            "Connects buyers with nearby local sellers.  Provides distance "
            "and delivery estimates, seller onboarding and discovery, and "
            "trial / paid subscriptions for sellers and buyers."
        ),
        version="1.0.0",
        lifespan=lifespan,
    )

    # Rate limiter
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    # Error envelope
    add_exception_handlers(app)

    # Routers
    app.include_router(sellers.router, prefix="/api/v1")
    app.include_router(subscriptions.router, prefix="/api/v1")
    app.include_router(delivery.router, prefix="/api/v1")
    app.include_router(locations.router, prefix="/api/v1")
    app.include_router(admin.router, prefix="/api/v1")

    return app

"""
Furnace Backend Application

FastAPI application hosting the thermostat controller and its periodic driver.
"""

import asyncio
import os
import sys
from contextlib import asynccontextmanager

import log_config  # noqa: F401
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger

# Add core to Python path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "core"))

# Import API router
from api import APP_VERSION
from api import router as api_router

from furnace.actuator_client import ActuatorClient
from furnace.controller import ThermostatController
from furnace.exceptions import ConfigurationError
from furnace.ha_client import HAClient, HomeAssistantSensor
from furnace.presentation import StatusBoard
from furnace.service import ThermostatService
from furnace.settings import DEFAULT_OPTIONS_PATH, load_settings

CONFIG_PATH = os.path.join(os.path.dirname(__file__), "..", "config.yaml")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan manager for startup/shutdown."""
    # Startup
    logger.info("Furnace starting")

    try:
        settings = load_settings(
            os.environ.get("FURNACE_OPTIONS_PATH", DEFAULT_OPTIONS_PATH),
            CONFIG_PATH,
        )
    except ConfigurationError as e:
        logger.error(f"Invalid configuration, thermostat disabled: {e}")
        settings = None

    client = None
    ha_client = None
    service = None
    if settings:
        log_config.setup_logging(settings.log_level.upper())

        client = ActuatorClient(settings.actuator_host, timeout=settings.request_timeout)
        board = StatusBoard()
        # Initial actuator probe blocks for up to one request timeout
        controller = await asyncio.to_thread(
            ThermostatController, settings.thermostat, client, board
        )
        board.sync(controller.state, controller.power_w)
        app.state.controller = controller
        app.state.status_board = board

        if settings.temperature_entity and settings.ha_token:
            ha_client = HAClient(settings.ha_url, settings.ha_token, timeout=settings.request_timeout)
            sensor = HomeAssistantSensor(
                ha_client, settings.temperature_entity, settings.humidity_entity
            )
            service = ThermostatService(
                controller, sensor, interval_seconds=settings.poll_interval_seconds
            )
            await service.start()
            app.state.service = service
        else:
            logger.warning("⚠️ No temperature sensor configured, automatic control disabled")

    yield

    # Shutdown
    logger.info("Furnace shutting down")
    if service:
        await service.stop()
    if ha_client:
        ha_client.close()
    if client:
        client.close()


# Create FastAPI application
app = FastAPI(
    title="Furnace API",
    description="Single-zone thermostat driving a remote relay actuator",
    version=APP_VERSION,
    lifespan=lifespan,
)


# Global exception handler
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Handle all unhandled exceptions gracefully."""
    logger.opt(exception=exc).error(f"Unhandled exception on {request.url.path}: {exc}")

    return JSONResponse(
        status_code=500,
        content={
            "detail": str(exc),
            "type": type(exc).__name__,
            "message": "Internal server error",
        },
    )


# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API router
app.include_router(api_router)


# For development
if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8080)

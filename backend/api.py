"""
Furnace API Endpoints
"""

import os
import sys

from fastapi import APIRouter, HTTPException, Query, Request
from loguru import logger
from pydantic import BaseModel

# Add core to Python path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "core"))

from furnace.controller import ThermostatController
from furnace.exceptions import CommandFailedError, ConfigurationError
from furnace.presentation import (
    StatusBoard,
    format_humidity,
    format_target,
    format_temperature,
    status_style,
)

APP_NAME = "Furnace"
APP_VERSION = "0.1.0"

router = APIRouter()


class SetTargetRequest(BaseModel):
    """Request body for setting the target temperature."""
    temperature: float


class OverrideRequest(BaseModel):
    """Request body for a manual relay override."""
    on: bool


class ActuatorHostRequest(BaseModel):
    """Request body for changing the actuator address."""
    host: str


def _get_controller(request: Request) -> ThermostatController:
    controller = getattr(request.app.state, "controller", None)
    if controller is None:
        raise HTTPException(status_code=503, detail="Thermostat controller not initialized")
    return controller


def _get_board(request: Request) -> StatusBoard:
    board = getattr(request.app.state, "status_board", None)
    if board is None:
        raise HTTPException(status_code=503, detail="Status board not initialized")
    return board


@router.get("/api/health")
async def health_check(request: Request):
    """Health check endpoint."""
    controller = getattr(request.app.state, "controller", None)
    return {
        "status": "healthy",
        "app": APP_NAME,
        "version": APP_VERSION,
        "actuator_host": controller.endpoint.host if controller else None,
    }


@router.get("/api/status")
def get_status(request: Request):
    """Current furnace state with display strings."""
    controller = _get_controller(request)
    state = controller.snapshot()
    style = status_style(state.heating_state)

    service = getattr(request.app.state, "service", None)
    reading = service.last_reading if service else None
    humidity = reading.humidity if reading else None
    signal_strength = service.last_signal_strength if service else None

    return {
        "state": state.heating_state.value,
        "label": style.label,
        "color": style.color_hex,
        "target_temp": state.target_temp,
        "current_temp": state.current_temp,
        "humidity": humidity,
        "power_w": state.power_w,
        "signal_strength": signal_strength,
        "actuator": {
            "host": controller.endpoint.host,
            "channel": controller.channel,
        },
        "display": {
            "temperature": format_temperature(state.current_temp),
            "humidity": format_humidity(humidity),
            "target": format_target(state.target_temp),
            "status": f"● {style.label}",
        },
    }


@router.post("/api/target")
def set_target(request: Request, body: SetTargetRequest):
    """Set the target temperature."""
    controller = _get_controller(request)
    if not controller.set_target(body.temperature):
        config = controller.config
        raise HTTPException(
            status_code=422,
            detail=(
                f"Target {body.temperature}°C outside "
                f"[{config.min_target}, {config.max_target}]"
            ),
        )
    return {"target_temp": controller.target_temp}


@router.post("/api/override")
def manual_override(request: Request, body: OverrideRequest):
    """Switch the furnace relay directly, bypassing the thermostat."""
    controller = _get_controller(request)
    try:
        state = controller.manual_override(body.on)
    except CommandFailedError as e:
        logger.error(f"Manual override failed: {e}")
        raise HTTPException(status_code=502, detail=str(e)) from e
    return {"state": state.value, "power_w": controller.power_w}


@router.post("/api/actuator")
def set_actuator_host(request: Request, body: ActuatorHostRequest):
    """Change the actuator address."""
    controller = _get_controller(request)
    try:
        controller.set_actuator_host(body.host)
    except ConfigurationError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e
    logger.info(f"Actuator host set to {controller.endpoint.host}")
    return {"host": controller.endpoint.host, "channel": controller.channel}


@router.get("/api/events")
async def get_events(request: Request, limit: int = Query(50, ge=0, le=100)):
    """Recent heating state transitions."""
    board = _get_board(request)
    return {"events": board.get_events(limit)}

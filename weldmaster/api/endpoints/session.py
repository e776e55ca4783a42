"""
FastAPI endpoints for the live weld session: process selection, electrical
readings, stopwatch and a read-only refresh stream.
"""

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import StreamingResponse
from pydantic import BaseModel, Field
from typing import List, Optional, Union
import json
import logging
import math

from ...config import get_settings
from ...services.weld_engine import PROCESS_CATALOG, ProcessType, SessionState
from ...services.weld_engine.refresh import refresh_snapshots
from ..dependencies import get_session

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/session", tags=["session"])


# --- REQUEST/RESPONSE MODELS ---

class SessionSnapshot(BaseModel):
    """Current readings and derived values"""
    process: ProcessType
    process_label: str
    efficiency: float = Field(..., description="Thermal efficiency (k-factor)")
    voltage: float
    current: float
    length: float
    elapsed_time: float = Field(..., description="Seconds on the stopwatch")
    is_running: bool
    heat_input: Optional[float] = Field(None, description="kJ/mm, null until length and time are positive")
    power: float = Field(..., description="Arc power in W")
    travel_speed: Optional[float] = Field(None, description="mm/s")
    is_analyzing: bool
    last_analysis: Optional[str] = None
    last_analysis_failed: bool = False
    pass_count: int


class ProcessInfo(BaseModel):
    id: ProcessType
    label: str
    efficiency: float


class ProcessUpdate(BaseModel):
    process: ProcessType


class ParameterUpdate(BaseModel):
    """
    Readings as typed by the operator. Text is accepted with ',' or '.' as
    decimal separator; unreadable text counts as 0.
    """
    voltage: Optional[Union[float, str]] = Field(None, description="Arc voltage (V)")
    current: Optional[Union[float, str]] = Field(None, description="Welding current (A)")
    length: Optional[Union[float, str]] = Field(None, description="Weld length (mm)")


class ManualTimeUpdate(BaseModel):
    seconds: float = Field(..., ge=0, description="Corrected elapsed time in seconds")


class TimerResponse(BaseModel):
    is_running: bool
    elapsed_time: float
    changed: bool = Field(..., description="False when the command was a no-op")


# --- HELPERS ---

def parse_reading(value: Union[float, str]) -> float:
    """Turn a typed reading into a float ('12,5' -> 12.5, 'abc' -> 0.0)."""
    if isinstance(value, str):
        try:
            return float(value.strip().replace(",", "."))
        except ValueError:
            return 0.0
    return float(value)


def _timer_response(session: SessionState, changed: bool) -> TimerResponse:
    return TimerResponse(
        is_running=session.is_running,
        elapsed_time=session.elapsed,
        changed=changed,
    )


# --- ENDPOINTS ---

@router.get("", response_model=SessionSnapshot)
async def get_snapshot(session: SessionState = Depends(get_session)):
    return SessionSnapshot(**session.snapshot())


@router.get("/processes", response_model=List[ProcessInfo])
async def list_processes():
    """Welding processes with their display label and k-factor"""
    return [
        ProcessInfo(id=process, label=spec.label, efficiency=spec.efficiency)
        for process, spec in PROCESS_CATALOG.items()
    ]


@router.put("/process", response_model=SessionSnapshot)
async def set_process(request: ProcessUpdate, session: SessionState = Depends(get_session)):
    session.set_process(request.process)
    return SessionSnapshot(**session.snapshot())


@router.patch("/parameters", response_model=SessionSnapshot)
async def update_parameters(request: ParameterUpdate, session: SessionState = Depends(get_session)):
    """
    Update any subset of voltage, current and length.

    Either all given readings are applied or none (422 on a negative value).
    """
    readings = {
        name: parse_reading(raw)
        for name, raw in (
            ("voltage", request.voltage),
            ("current", request.current),
            ("length", request.length),
        )
        if raw is not None
    }

    invalid = [name for name, value in readings.items() if not math.isfinite(value) or value < 0]
    if invalid:
        raise HTTPException(
            status_code=422,
            detail=f"Readings must be non-negative numbers: {', '.join(invalid)}"
        )

    setters = {
        "voltage": session.set_voltage,
        "current": session.set_current,
        "length": session.set_length,
    }
    for name, value in readings.items():
        setters[name](value)

    return SessionSnapshot(**session.snapshot())


@router.post("/timer/start", response_model=TimerResponse)
async def start_timer(session: SessionState = Depends(get_session)):
    return _timer_response(session, session.start_timer())


@router.post("/timer/stop", response_model=TimerResponse)
async def stop_timer(session: SessionState = Depends(get_session)):
    return _timer_response(session, session.stop_timer())


@router.post("/timer/toggle", response_model=TimerResponse)
async def toggle_timer(session: SessionState = Depends(get_session)):
    session.toggle_timer()
    return _timer_response(session, True)


@router.post("/timer/reset", response_model=TimerResponse)
async def reset_timer(session: SessionState = Depends(get_session)):
    session.reset_timer()
    return _timer_response(session, True)


@router.put("/timer", response_model=TimerResponse)
async def correct_time(request: ManualTimeUpdate, session: SessionState = Depends(get_session)):
    """Manual correction of the measured time (only while stopped)"""
    if not session.manual_set_time(request.seconds):
        raise HTTPException(
            status_code=409,
            detail="Stop the timer before correcting the time"
        )
    return _timer_response(session, True)


@router.get("/stream")
async def stream_session(session: SessionState = Depends(get_session)):
    """
    Server-sent events with a snapshot per display frame.

    Ends after the first frame with the timer stopped.
    """
    interval = get_settings().refresh_interval

    async def event_source():
        async for snapshot in refresh_snapshots(session, interval, until_stopped=True):
            yield f"data: {json.dumps(snapshot)}\n\n"

    return StreamingResponse(event_source(), media_type="text/event-stream")

"""
FastAPI endpoints for the committed pass history and its Excel export.
"""

from fastapi import APIRouter, Depends, HTTPException, Response
from pydantic import BaseModel, Field
from typing import List
from datetime import datetime
import logging

from ...services.export import export_passes_xlsx, report_filename
from ...services.weld_engine import ProcessType, SessionState, WeldingPass
from ..dependencies import get_session

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/passes", tags=["passes"])

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


class PassResponse(BaseModel):
    """A committed weld pass"""
    id: str
    created_at: datetime
    process: ProcessType
    process_label: str
    voltage: float
    current: float
    length: float
    elapsed_time: float = Field(..., description="Seconds")
    heat_input: float = Field(..., description="kJ/mm")
    k_factor: float

    @classmethod
    def from_pass(cls, welding_pass: WeldingPass) -> "PassResponse":
        return cls(**welding_pass.to_dict())


@router.get("", response_model=List[PassResponse])
async def list_passes(session: SessionState = Depends(get_session)):
    """Pass history, most recent first"""
    return [PassResponse.from_pass(p) for p in session.passes]


@router.post("", response_model=PassResponse, status_code=201)
async def commit_pass(session: SessionState = Depends(get_session)):
    """Save the current readings and measured time as a new pass"""
    welding_pass = session.commit_pass()
    if welding_pass is None:
        raise HTTPException(
            status_code=409,
            detail="Heat input is undefined: enter a weld length and time the pass first"
        )
    return PassResponse.from_pass(welding_pass)


@router.get("/export")
async def export_passes(session: SessionState = Depends(get_session)):
    """Download the history as an .xlsx report"""
    passes = session.passes
    if not passes:
        raise HTTPException(status_code=404, detail="No passes to export")

    content = export_passes_xlsx(passes)
    return Response(
        content=content,
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{report_filename()}"'},
    )


@router.delete("/{pass_id}", status_code=204)
async def delete_pass(pass_id: str, session: SessionState = Depends(get_session)):
    """Remove a pass; unknown ids are ignored"""
    session.delete_pass(pass_id)
    return Response(status_code=204)

"""
Analysis API endpoint - expert commentary on the current weld pass.

The request only schedules the work; poll GET /api/analysis (or the session
stream) for the result.
"""

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field
from typing import Optional
import logging

from ...config import get_settings
from ...services.weld_engine import (
    AnalysisInFlightError,
    AnalysisStatus,
    MissingCredentialError,
    SessionState,
    UndefinedMetricError,
)
from ..dependencies import get_session

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/analysis", tags=["analysis"])


class AnalysisRequest(BaseModel):
    credential: Optional[str] = Field(
        None,
        description="API key for the text-generation service (defaults to the server's configured key)"
    )


class AnalysisResponse(BaseModel):
    status: AnalysisStatus
    result: Optional[str] = None
    failed: bool = False


def _analysis_response(session: SessionState) -> AnalysisResponse:
    return AnalysisResponse(
        status=session.analysis_status,
        result=session.last_analysis,
        failed=session.last_analysis_failed,
    )


@router.post("", response_model=AnalysisResponse, status_code=202)
async def request_analysis(
    request: Optional[AnalysisRequest] = None,
    session: SessionState = Depends(get_session),
):
    """
    Ask the AI service for a short expert opinion on the current pass.

    Returns immediately with status in_flight.
    """
    credential = (request.credential if request else None) or get_settings().credential

    try:
        session.request_analysis(credential)
    except MissingCredentialError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except (AnalysisInFlightError, UndefinedMetricError) as e:
        logger.warning(f"Analysis request rejected: {e}")
        raise HTTPException(status_code=409, detail=str(e))

    return _analysis_response(session)


@router.get("", response_model=AnalysisResponse)
async def get_analysis(session: SessionState = Depends(get_session)):
    return _analysis_response(session)

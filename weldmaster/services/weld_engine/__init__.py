"""
Weld session engine - stopwatch, heat input and pass history.
"""

from .errors import (
    AnalysisInFlightError,
    InvalidParameterError,
    MissingCredentialError,
    UndefinedMetricError,
    WeldEngineError,
)
from .heat_input import HeatInputCalculator
from .history import PassHistory
from .models import DerivedMetrics, Parameters, WeldingPass
from .processes import PROCESS_CATALOG, ProcessType
from .session_state import AnalysisStatus, SessionState
from .timer import TimerEngine

__all__ = [
    "AnalysisInFlightError",
    "AnalysisStatus",
    "DerivedMetrics",
    "HeatInputCalculator",
    "InvalidParameterError",
    "MissingCredentialError",
    "Parameters",
    "PassHistory",
    "PROCESS_CATALOG",
    "ProcessType",
    "SessionState",
    "TimerEngine",
    "UndefinedMetricError",
    "WeldEngineError",
    "WeldingPass",
]

"""
Process-wide session shared by all endpoints.
"""

from ..config import get_settings
from ..services.weld_engine import SessionState

# One operator, one session (singleton)
session = SessionState(analysis_timeout=get_settings().analysis_timeout)


def get_session() -> SessionState:
    return session

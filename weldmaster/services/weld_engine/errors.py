"""
Precondition errors raised by the session state engine.
"""


class WeldEngineError(Exception):
    """Base class for refused session operations."""


class InvalidParameterError(WeldEngineError, ValueError):
    """A reading is negative or not a finite number."""


class UndefinedMetricError(WeldEngineError):
    """Heat input is undefined (length or elapsed time is zero)."""


class MissingCredentialError(WeldEngineError):
    """Analysis requested without a credential."""


class AnalysisInFlightError(WeldEngineError):
    """Analysis requested while another one is still running."""

"""
Wall-clock-anchored stopwatch for timing a weld pass.

Elapsed time is always derived from the clock at read time:
    elapsed = accumulated + (now - anchor)   while running
    elapsed = accumulated                    while stopped

Nothing here counts ticks. A display loop may poll elapsed() as often as it
likes (or not at all) without changing the measured value.
"""

import logging
import math
import time
from typing import Callable, Optional

from .errors import InvalidParameterError

logger = logging.getLogger(__name__)

Clock = Callable[[], float]


class TimerEngine:
    """
    Start/stop stopwatch with reset and manual correction.

    Two states only: Running (anchor set) and Stopped (anchor unset).
    Invalid transitions are no-ops and report False.
    """

    def __init__(self, clock: Clock = time.monotonic):
        self._clock = clock
        self._accumulated = 0.0
        self._anchor: Optional[float] = None

    @property
    def is_running(self) -> bool:
        return self._anchor is not None

    @property
    def accumulated(self) -> float:
        return self._accumulated

    def elapsed(self) -> float:
        """Elapsed seconds, computed from the clock at call time."""
        if self._anchor is None:
            return self._accumulated
        # Never below accumulated, even if the clock steps back
        return self._accumulated + max(0.0, self._clock() - self._anchor)

    def start(self) -> bool:
        if self.is_running:
            logger.debug("start() ignored: timer already running")
            return False
        self._anchor = self._clock()
        logger.debug(f"Timer started at {self._accumulated:.3f}s")
        return True

    def stop(self) -> bool:
        if not self.is_running:
            logger.debug("stop() ignored: timer already stopped")
            return False
        self._accumulated = self.elapsed()
        self._anchor = None
        logger.debug(f"Timer stopped at {self._accumulated:.3f}s")
        return True

    def toggle(self) -> bool:
        """Start when stopped, stop when running. Returns True if now running."""
        if self.is_running:
            self.stop()
        else:
            self.start()
        return self.is_running

    def reset(self) -> None:
        if self.is_running:
            self.stop()
        self._accumulated = 0.0

    def manual_set(self, value: float) -> bool:
        """
        Overwrite the accumulated time while stopped.

        Returns False and leaves the timer untouched while a measurement is
        running.

        Raises:
            InvalidParameterError: If value is negative or not finite
        """
        value = float(value)
        if not math.isfinite(value) or value < 0:
            raise InvalidParameterError(f"Elapsed time must be a non-negative number, got {value}")
        if self.is_running:
            logger.warning("Manual time correction rejected while the timer is running")
            return False
        self._accumulated = value
        return True

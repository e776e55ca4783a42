"""
Session coordinator - sole owner of the parameters, stopwatch, pass history
and analysis state of a welding session.

Every mutation goes through a method on SessionState and, once it has
changed something, notifies subscribers exactly once. Refused operations
change nothing and stay silent.

Single owner, single event loop: there is no locking. The only async piece
is the analysis request, which runs as an asyncio task guarded by an
IDLE / IN_FLIGHT flag.
"""

import asyncio
import logging
import math
from dataclasses import replace
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, List, Optional, Tuple

from ..ai_orchestrator import analyze_with_llm, build_analysis_prompt
from .errors import (
    AnalysisInFlightError,
    InvalidParameterError,
    MissingCredentialError,
    UndefinedMetricError,
)
from .heat_input import HeatInputCalculator
from .history import PassHistory
from .models import DerivedMetrics, Parameters, WeldingPass
from .processes import ProcessType
from .timer import Clock, TimerEngine

logger = logging.getLogger(__name__)

Observer = Callable[["SessionState"], None]
Analyzer = Callable[[str, str, str], Awaitable[str]]

ANALYSIS_ERROR_PREFIX = "AI error: "


class AnalysisStatus(str, Enum):
    IDLE = "idle"
    IN_FLIGHT = "in_flight"


class SessionState:
    """
    Composes ProcessCatalog selection, TimerEngine, HeatInputCalculator and
    PassHistory behind one mutation surface.

    Observers are plain callables taking the session. They are called after
    each completed mutation and must only read from it.
    """

    def __init__(
        self,
        clock: Optional[Clock] = None,
        analyzer: Optional[Analyzer] = None,
        analysis_timeout: Optional[float] = None,
    ):
        """
        Args:
            clock: Time source for the stopwatch (time.monotonic if None)
            analyzer: async (system_prompt, user_prompt, credential) -> text
            analysis_timeout: Seconds before a pending analysis is recorded as
                failed; None waits indefinitely
        """
        self._params = Parameters()
        self._timer = TimerEngine(clock) if clock is not None else TimerEngine()
        self._calculator = HeatInputCalculator()
        self._history = PassHistory()

        self._analyzer: Analyzer = analyzer or analyze_with_llm
        self._analysis_timeout = analysis_timeout
        self._analysis_status = AnalysisStatus.IDLE
        self._analysis_task: Optional["asyncio.Task[None]"] = None
        self._last_analysis: Optional[str] = None
        self._last_analysis_failed = False

        self._observers: List[Observer] = []

    # --- OBSERVERS ---

    def subscribe(self, observer: Observer) -> Callable[[], None]:
        """Register an observer. Returns a function that unsubscribes it."""
        self._observers.append(observer)

        def unsubscribe() -> None:
            if observer in self._observers:
                self._observers.remove(observer)

        return unsubscribe

    def _notify(self) -> None:
        for observer in list(self._observers):
            try:
                observer(self)
            except Exception:
                logger.exception("Session observer failed")

    # --- READS ---

    @property
    def parameters(self) -> Parameters:
        return replace(self._params)

    @property
    def process(self) -> ProcessType:
        return self._params.process

    @property
    def voltage(self) -> float:
        return self._params.voltage

    @property
    def current(self) -> float:
        return self._params.current

    @property
    def length(self) -> float:
        return self._params.length

    @property
    def is_running(self) -> bool:
        return self._timer.is_running

    @property
    def elapsed(self) -> float:
        return self._timer.elapsed()

    @property
    def heat_input(self) -> Optional[float]:
        return self._calculator.heat_input(self._params, self._timer.elapsed())

    @property
    def power(self) -> float:
        return self._calculator.power(self._params)

    @property
    def travel_speed(self) -> Optional[float]:
        return self._calculator.travel_speed(self._params, self._timer.elapsed())

    def metrics(self) -> DerivedMetrics:
        """All derived values from a single elapsed-time reading."""
        return self._calculator.metrics(self._params, self._timer.elapsed())

    @property
    def passes(self) -> Tuple[WeldingPass, ...]:
        return self._history.all()

    @property
    def analysis_status(self) -> AnalysisStatus:
        return self._analysis_status

    @property
    def is_analyzing(self) -> bool:
        return self._analysis_status is AnalysisStatus.IN_FLIGHT

    @property
    def last_analysis(self) -> Optional[str]:
        return self._last_analysis

    @property
    def last_analysis_failed(self) -> bool:
        return self._last_analysis_failed

    def snapshot(self) -> Dict[str, Any]:
        metrics = self.metrics()
        return {
            "process": self._params.process.value,
            "process_label": self._params.process.label,
            "efficiency": self._params.process.efficiency,
            "voltage": self._params.voltage,
            "current": self._params.current,
            "length": self._params.length,
            "elapsed_time": metrics.elapsed_time,
            "is_running": self._timer.is_running,
            "heat_input": metrics.heat_input,
            "power": metrics.power,
            "travel_speed": metrics.travel_speed,
            "is_analyzing": self.is_analyzing,
            "last_analysis": self._last_analysis,
            "last_analysis_failed": self._last_analysis_failed,
            "pass_count": len(self._history),
        }

    # --- PARAMETER SETTERS ---

    def set_process(self, process: ProcessType) -> None:
        self._params.process = ProcessType(process)
        logger.info(f"Process set to {self._params.process.label}")
        self._notify()

    def set_voltage(self, value: float) -> None:
        self._params.voltage = _reading("voltage", value)
        self._notify()

    def set_current(self, value: float) -> None:
        self._params.current = _reading("current", value)
        self._notify()

    def set_length(self, value: float) -> None:
        self._params.length = _reading("length", value)
        self._notify()

    # --- TIMER COMMANDS ---

    def start_timer(self) -> bool:
        if not self._timer.start():
            return False
        logger.info("Weld timer started")
        self._notify()
        return True

    def stop_timer(self) -> bool:
        if not self._timer.stop():
            return False
        logger.info(f"Weld timer stopped at {self._timer.elapsed():.1f}s")
        self._notify()
        return True

    def toggle_timer(self) -> bool:
        """Start or stop the timer. Returns True if it is now running."""
        running = self._timer.toggle()
        logger.info(f"Weld timer {'started' if running else 'stopped'}")
        self._notify()
        return running

    def reset_timer(self) -> None:
        self._timer.reset()
        logger.info("Weld timer reset")
        self._notify()

    def manual_set_time(self, seconds: float) -> bool:
        if not self._timer.manual_set(seconds):
            return False
        logger.info(f"Weld time corrected manually to {seconds:.1f}s")
        self._notify()
        return True

    # --- HISTORY ---

    def commit_pass(self) -> Optional[WeldingPass]:
        """Record the current pass. Returns None while heat input is undefined."""
        elapsed_time = self._timer.elapsed()
        heat_input = self._calculator.heat_input(self._params, elapsed_time)
        if heat_input is None:
            logger.warning("Pass not committed: heat input undefined (length or time is zero)")
            return None

        welding_pass = self._history.commit(self._params, elapsed_time, heat_input)
        self._notify()
        return welding_pass

    def delete_pass(self, pass_id: str) -> bool:
        if not self._history.remove(pass_id):
            return False
        self._notify()
        return True

    # --- ANALYSIS ---

    def analysis_prompt(self) -> Tuple[str, str]:
        """
        Raises:
            UndefinedMetricError: If heat input is undefined
        """
        metrics = self.metrics()
        if metrics.heat_input is None:
            raise UndefinedMetricError("Heat input is undefined; nothing to analyze")
        return build_analysis_prompt(
            process_label=self._params.process.label,
            voltage=self._params.voltage,
            current=self._params.current,
            length=self._params.length,
            elapsed_time=metrics.elapsed_time,
            heat_input=metrics.heat_input,
        )

    def request_analysis(self, credential: Optional[str]) -> "asyncio.Task[None]":
        """
        Start an expert analysis of the current pass without waiting for it.

        Must be called from a running event loop. The returned task never
        raises; its outcome lands in last_analysis and observers are
        notified when it completes.

        Raises:
            UndefinedMetricError: If heat input is undefined
            AnalysisInFlightError: If an analysis is already pending
            MissingCredentialError: If credential is empty
        """
        if self.heat_input is None:
            raise UndefinedMetricError("Heat input is undefined; nothing to analyze")
        if self.is_analyzing:
            raise AnalysisInFlightError("An analysis is already in progress")
        if not credential or not credential.strip():
            raise MissingCredentialError("An API credential is required for analysis")

        loop = asyncio.get_running_loop()
        system_prompt, user_prompt = self.analysis_prompt()

        self._analysis_status = AnalysisStatus.IN_FLIGHT
        self._last_analysis = None
        self._last_analysis_failed = False
        logger.info("Weld analysis requested")
        self._notify()

        self._analysis_task = loop.create_task(
            self._run_analysis(system_prompt, user_prompt, credential)
        )
        return self._analysis_task

    async def _run_analysis(self, system_prompt: str, user_prompt: str, credential: str) -> None:
        try:
            call = self._analyzer(system_prompt, user_prompt, credential)
            if self._analysis_timeout is not None:
                text = await asyncio.wait_for(call, timeout=self._analysis_timeout)
            else:
                text = await call
            self._last_analysis = text
            self._last_analysis_failed = False
            logger.info("Weld analysis completed")
        except asyncio.TimeoutError:
            logger.error(f"Weld analysis timed out after {self._analysis_timeout}s")
            self._last_analysis = f"{ANALYSIS_ERROR_PREFIX}no response after {self._analysis_timeout}s"
            self._last_analysis_failed = True
        except Exception as e:
            logger.error(f"Weld analysis failed: {e}")
            self._last_analysis = f"{ANALYSIS_ERROR_PREFIX}{e}"
            self._last_analysis_failed = True
        finally:
            self._analysis_status = AnalysisStatus.IDLE
            self._analysis_task = None
            self._notify()


def _reading(name: str, value: float) -> float:
    value = float(value)
    if not math.isfinite(value) or value < 0:
        raise InvalidParameterError(f"{name} must be a non-negative number, got {value}")
    return value

"""Shared fixtures for the weld session tests.

Also puts the project root on sys.path so ``import weldmaster`` works when
tests are run from a checkout without installing the package.
"""

import os
import sys

import pytest

PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))

if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from weldmaster.services.weld_engine import ProcessType, SessionState  # noqa: E402


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def session(clock):
    return SessionState(clock=clock)


@pytest.fixture
def ready_session(session, clock):
    """MIG/MAG, 20 V, 150 A, 100 mm, 10 s on the stopwatch."""
    session.set_process(ProcessType.MIG_MAG)
    session.set_voltage(20)
    session.set_current(150)
    session.set_length(100)
    session.start_timer()
    clock.advance(10)
    session.stop_timer()
    return session

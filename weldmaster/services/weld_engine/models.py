from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional
import uuid

from .processes import DEFAULT_PROCESS, ProcessType


@dataclass
class Parameters:
    """
    Operator readings for the pass being measured.
    Mutated only through SessionState setters.
    """
    process: ProcessType = DEFAULT_PROCESS
    voltage: float = 0.0   # V
    current: float = 0.0   # A
    length: float = 0.0    # mm


@dataclass(frozen=True)
class DerivedMetrics:
    """Values computed on read from Parameters and elapsed time."""
    elapsed_time: float
    power: float
    heat_input: Optional[float] = None     # kJ/mm
    travel_speed: Optional[float] = None   # mm/s


@dataclass(frozen=True)
class WeldingPass:
    """
    A committed weld measurement. Never mutated once created.
    """
    process: ProcessType
    current: float
    voltage: float
    length: float
    elapsed_time: float
    heat_input: float
    k_factor: float

    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    created_at: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "created_at": self.created_at.isoformat(),
            "process": self.process.value,
            "process_label": self.process.label,
            "current": self.current,
            "voltage": self.voltage,
            "length": self.length,
            "elapsed_time": self.elapsed_time,
            "heat_input": self.heat_input,
            "k_factor": self.k_factor,
        }

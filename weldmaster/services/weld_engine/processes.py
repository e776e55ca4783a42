from dataclasses import dataclass
from enum import Enum
from typing import Dict


class ProcessType(str, Enum):
    MMA = "MMA"
    MIG_MAG = "MIG_MAG"
    TIG = "TIG"
    SAW = "SAW"
    FCAW = "FCAW"

    @property
    def label(self) -> str:
        return PROCESS_CATALOG[self].label

    @property
    def efficiency(self) -> float:
        return PROCESS_CATALOG[self].efficiency


@dataclass(frozen=True)
class ProcessSpec:
    """Display label and thermal efficiency (k-factor) of a welding process."""
    label: str
    efficiency: float


# ISO 4063 reference numbers in the labels
PROCESS_CATALOG: Dict[ProcessType, ProcessSpec] = {
    ProcessType.MMA: ProcessSpec("MMA (111)", 0.8),
    ProcessType.MIG_MAG: ProcessSpec("MIG/MAG (131/135)", 0.8),
    ProcessType.TIG: ProcessSpec("TIG (141)", 0.6),
    ProcessType.SAW: ProcessSpec("SAW (121)", 1.0),
    ProcessType.FCAW: ProcessSpec("FCAW (136)", 0.8),
}

DEFAULT_PROCESS = ProcessType.MIG_MAG

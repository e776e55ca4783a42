"""
Append-only, most-recent-first history of committed weld passes.
"""

import logging
import uuid
from dataclasses import replace
from typing import Iterator, List, Optional, Tuple

from .errors import UndefinedMetricError
from .models import Parameters, WeldingPass

logger = logging.getLogger(__name__)


class PassHistory:
    """
    Ordered collection of WeldingPass records.

    Invariants:
    - newest pass first
    - ids are unique
    - remove() drops at most one entry and keeps the order of the rest
    """

    def __init__(self):
        self._passes: List[WeldingPass] = []

    def commit(
        self,
        params: Parameters,
        elapsed_time: float,
        heat_input: Optional[float],
    ) -> WeldingPass:
        """
        Snapshot the parameters into a new pass at the head of the history.

        Raises:
            UndefinedMetricError: If heat_input is None
        """
        if heat_input is None:
            raise UndefinedMetricError("Cannot commit a pass without a defined heat input")

        welding_pass = WeldingPass(
            process=params.process,
            current=params.current,
            voltage=params.voltage,
            length=params.length,
            elapsed_time=elapsed_time,
            heat_input=heat_input,
            k_factor=params.process.efficiency,
        )
        while self.get(welding_pass.id) is not None:
            welding_pass = replace(welding_pass, id=str(uuid.uuid4()))

        self._passes.insert(0, welding_pass)
        logger.info(
            f"Pass {welding_pass.id} committed: {welding_pass.heat_input:.3f} kJ/mm "
            f"({welding_pass.process.label})"
        )
        return welding_pass

    def remove(self, pass_id: str) -> bool:
        for index, welding_pass in enumerate(self._passes):
            if welding_pass.id == pass_id:
                del self._passes[index]
                logger.info(f"Pass {pass_id} removed")
                return True
        logger.debug(f"remove() ignored: unknown pass id {pass_id}")
        return False

    def get(self, pass_id: str) -> Optional[WeldingPass]:
        return next((p for p in self._passes if p.id == pass_id), None)

    def all(self) -> Tuple[WeldingPass, ...]:
        return tuple(self._passes)

    def __len__(self) -> int:
        return len(self._passes)

    def __iter__(self) -> Iterator[WeldingPass]:
        return iter(tuple(self._passes))

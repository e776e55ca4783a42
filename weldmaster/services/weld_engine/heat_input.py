from typing import Optional

from .models import DerivedMetrics, Parameters


class HeatInputCalculator:
    """
    Arc energy per unit length, corrected by the process thermal efficiency.

        Q [kJ/mm] = k * U [V] * I [A] * t [s] / (L [mm] * 1000)

    Heat input and travel speed are None ("not ready") until both the weld
    length and the elapsed time are positive. Callers must not treat None as
    zero.
    """

    J_PER_KJ = 1000.0

    def heat_input(self, params: Parameters, elapsed_time: float) -> Optional[float]:
        if elapsed_time <= 0 or params.length <= 0:
            return None
        energy_j = params.process.efficiency * params.voltage * params.current * elapsed_time
        return energy_j / (params.length * self.J_PER_KJ)

    def power(self, params: Parameters) -> float:
        """Arc power in watts."""
        return params.voltage * params.current

    def travel_speed(self, params: Parameters, elapsed_time: float) -> Optional[float]:
        """Weld length per second (mm/s)."""
        if elapsed_time <= 0:
            return None
        return params.length / elapsed_time

    def metrics(self, params: Parameters, elapsed_time: float) -> DerivedMetrics:
        return DerivedMetrics(
            elapsed_time=elapsed_time,
            power=self.power(params),
            heat_input=self.heat_input(params, elapsed_time),
            travel_speed=self.travel_speed(params, elapsed_time),
        )

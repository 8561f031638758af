import logging
import numpy as np
from typing import List, Optional

from data_model import (
    CalculationReport,
    CalculationResults,
    ChartDataPoint,
    FuelCellInputs,
    FuelCellType,
    PEMInputs,
    PEMResults,
)
from model import Model
from parameters import Parameters
from pem_geometry import StackGeometry
from validation import validate_fuel_cell_inputs, validate_pem_inputs

logger = logging.getLogger(__name__)


class Solver:
    """
    The Solver class orchestrates one calculation: it composes the Model's
    partial results into CalculationResults, runs the PEM stack geometry when
    the chemistry is PEM, and samples the voltage-current-power curve.

    Every method is a pure function of its arguments; the Solver holds only
    read-only configuration and can be shared between callers.
    """

    def __init__(self, model: Optional[Model] = None, params: Optional[Parameters] = None,
                 validate: bool = False):
        """
        Initializes the Solver.

        Args:
            model: The electrochemical Model. Built from params when omitted.
            params: Constants and curve settings. Taken from the model, or the
                    built-in defaults, when omitted.
            validate: When True, inputs are checked before computing and
                      InvalidInputError is raised instead of returning inf/nan.
        """
        if params is None:
            params = model.params if model is not None else Parameters()
        self.params = params
        self.model = model if model is not None else Model(params)
        self.geometry = StackGeometry()
        self.validate = validate

        self.num_steps: int = int(self.params.get_value('num_steps'))

    def compute_core(self, inputs: FuelCellInputs) -> CalculationResults:
        """
        Runs the four electrochemical calculations and combines them.

        total_power = power_density * active_area * number_of_cells (W).
        """
        if self.validate:
            validate_fuel_cell_inputs(inputs)

        densities = self.model.calculate_densities(inputs)
        efficiencies = self.model.calculate_efficiencies(inputs)
        losses = self.model.calculate_losses(inputs)
        nernst_voltage = self.model.calculate_nernst_voltage(inputs)

        with np.errstate(invalid='ignore'):
            total_power = float(
                np.float64(densities['power_density']) * inputs.active_area * inputs.number_of_cells
            )

        results = CalculationResults(
            current_density=densities['current_density'],
            power_density=densities['power_density'],
            electrical_efficiency=efficiencies['electrical'],
            fuel_utilization=efficiencies['fuel_utilization'],
            activation_loss=losses['activation'],
            ohmic_loss=losses['ohmic'],
            concentration_loss=losses['concentration'],
            nernst_voltage=nernst_voltage,
            total_power=total_power,
        )
        logger.debug("Core results for %s: %s", inputs.fuel_cell_type.value, results)
        return results

    def compute_pem(self, inputs: PEMInputs, stack_power: float) -> PEMResults:
        """Stack geometry for a PEM stack delivering stack_power (W)."""
        if self.validate:
            validate_pem_inputs(inputs)
        return self.geometry.calculate_pem_specifics(inputs, stack_power)

    def generate_curve(self, inputs: FuelCellInputs, results: CalculationResults) -> List[ChartDataPoint]:
        """
        Samples the linearized performance curve.

        Logic:
        - The voltage fraction runs over [0, 1] as step / num_steps with an integer
          step counter, giving num_steps + 1 points (11 by default) without
          floating-point accumulation.
        - voltage = fraction * E_nernst
        - current = (E_nernst - voltage) / (activation_loss + ohmic_loss); the
          concentration loss is left out of this curve.
        - power = voltage * current

        Args:
            inputs (FuelCellInputs): Operating conditions (kept for signature symmetry
                                     with the core calculation).
            results (CalculationResults): Output of compute_core.

        Returns:
            List[ChartDataPoint]: Points ordered by increasing voltage.
        """
        nernst = np.float64(results.nernst_voltage)
        linear_loss = np.float64(results.activation_loss) + np.float64(results.ohmic_loss)

        curve: List[ChartDataPoint] = []
        with np.errstate(divide='ignore', invalid='ignore'):
            for step in range(self.num_steps + 1):
                fraction = step / self.num_steps
                voltage = fraction * nernst
                current = (nernst - voltage) / linear_loss
                curve.append(ChartDataPoint(
                    voltage=float(voltage),
                    current=float(current),
                    power=float(voltage * current),
                ))
        return curve

    def calculate(self, inputs: FuelCellInputs, pem_inputs: Optional[PEMInputs] = None) -> CalculationReport:
        """
        Full calculation: core results, PEM stack geometry when the chemistry is PEM,
        and the performance curve.

        Args:
            inputs: Operating conditions.
            pem_inputs: Stack construction parameters. For a PEM cell the
                        configured default stack is used when omitted; ignored
                        for other chemistries.
        """
        results = self.compute_core(inputs)

        pem_results = None
        if inputs.fuel_cell_type is FuelCellType.PEM:
            if pem_inputs is None:
                pem_inputs = PEMInputs.from_dict(self.params.get_section('default_pem_inputs'))
            pem_results = self.compute_pem(pem_inputs, results.total_power)
        elif pem_inputs is not None:
            logger.info("Stack geometry is only modelled for PEM cells; ignoring PEM inputs for %s",
                        inputs.fuel_cell_type.value)

        curve = self.generate_curve(inputs, results)
        return CalculationReport(inputs=inputs, results=results, curve=tuple(curve), pem_results=pem_results)


_default_solver: Optional[Solver] = None


def _get_default_solver() -> Solver:
    global _default_solver
    if _default_solver is None:
        _default_solver = Solver()
    return _default_solver


def compute_core(inputs: FuelCellInputs) -> CalculationResults:
    """Electrochemical core with the built-in constants."""
    return _get_default_solver().compute_core(inputs)


def compute_pem(inputs: PEMInputs, stack_power: float) -> PEMResults:
    """PEM stack geometry; the caller decides whether the chemistry warrants it."""
    return _get_default_solver().compute_pem(inputs, stack_power)


def generate_curve(inputs: FuelCellInputs, results: CalculationResults) -> List[ChartDataPoint]:
    """Eleven-point voltage-current-power curve with the built-in settings."""
    return _get_default_solver().generate_curve(inputs, results)

"""
Optional input validation run before any computation.

The calculation functions never raise on degenerate inputs; they return
inf/nan instead. Callers that prefer a descriptive rejection call these
validators first (or construct the Solver with validate=True).
"""

import math
from typing import Optional

from data_model import FuelCellInputs, PEMInputs, gas_fraction
from pem_geometry import StackGeometry


class InvalidInputError(ValueError):
    """Raised when an input would make the calculation degenerate."""

    def __init__(self, field: str, message: str):
        super().__init__(f"{field}: {message}")
        self.field = field
        self.message = message


def _require_positive(field: str, value: float, unit: Optional[str] = None) -> None:
    if not math.isfinite(value) or value <= 0:
        suffix = f" {unit}" if unit else ""
        raise InvalidInputError(field, f"must be a positive number, got {value}{suffix}")


def validate_fuel_cell_inputs(inputs: FuelCellInputs) -> None:
    """
    Rejects operating conditions for which the densities, fuel utilization or
    Nernst voltage would not be finite.

    Raises:
        InvalidInputError: Naming the first offending field.
    """
    _require_positive('active_area', inputs.active_area, 'cm^2')
    _require_positive('anode_pressure', inputs.anode_pressure, 'atm')
    _require_positive('cathode_pressure', inputs.cathode_pressure, 'atm')
    _require_positive('anode_flow', inputs.anode_flow, 'L/min')

    if gas_fraction(inputs.anode_composition, 'H2') <= 0:
        raise InvalidInputError('anode_composition', "hydrogen share must be greater than 0 %")
    if gas_fraction(inputs.cathode_composition, 'O2') <= 0:
        raise InvalidInputError('cathode_composition', "oxygen share must be greater than 0 %")
    if inputs.number_of_cells < 1:
        raise InvalidInputError('number_of_cells', f"must be at least 1, got {inputs.number_of_cells}")


def validate_pem_inputs(inputs: PEMInputs) -> None:
    """
    Rejects stack parameters that would give a zero or negative stack volume.

    Raises:
        InvalidInputError: Naming the first offending field.
    """
    _require_positive('active_area', inputs.active_area, 'cm^2')
    _require_positive('active_cell_percentage', inputs.active_cell_percentage, '%')
    if inputs.number_of_cells < 1:
        raise InvalidInputError('number_of_cells', f"must be at least 1, got {inputs.number_of_cells}")

    for name in ('metal_plate_thickness', 'carbon_plate_thickness', 'mea_thickness',
                 'anode_collector_thickness', 'cathode_collector_thickness',
                 'anode_isolation_thickness', 'cathode_isolation_thickness',
                 'anode_end_plate_thickness', 'cathode_end_plate_thickness'):
        value = getattr(inputs, name)
        if value < 0:
            raise InvalidInputError(name, f"thickness cannot be negative, got {value} mm")

    geometry = StackGeometry()
    for material, plate in (('metal', inputs.metal_plate_thickness), ('carbon', inputs.carbon_plate_thickness)):
        height = geometry.calculate_stack_height(inputs, plate)
        if height <= 0:
            raise InvalidInputError('stack_height', f"{material}-plate stack height must be positive, got {height} mm")

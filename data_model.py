import re
from dataclasses import dataclass, field, fields, asdict
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple


class FuelCellType(str, Enum):
    """Fuel-cell chemistries accepted by the calculator. Only PEM has a geometry model."""

    PEM = 'PEM'
    SOFC = 'SOFC'
    AFC = 'AFC'
    MCFC = 'MCFC'
    PAFC = 'PAFC'

    @classmethod
    def parse(cls, value: Any) -> "FuelCellType":
        """
        Converts a string such as 'pem' or 'SOFC' into a FuelCellType.

        Raises:
            ValueError: If the value does not name a supported chemistry.
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().upper())
        except ValueError:
            allowed = ", ".join(member.value for member in cls)
            raise ValueError(f"Unknown fuel cell type '{value}'. Expected one of: {allowed}.")


_CAMEL_BOUNDARY = re.compile(r'(?<=[a-z0-9])([A-Z])')


def to_snake_case(name: str) -> str:
    """Converts calculator field names like 'activeCellPercentage' to 'active_cell_percentage'."""
    return _CAMEL_BOUNDARY.sub(r'_\1', name).lower()


def gas_fraction(composition: Mapping[str, float], gas: str) -> float:
    """
    Returns the share of a gas as a fraction (percentage / 100).

    Compositions are open mappings that are not normalized; a missing gas counts as 0.
    """
    return float(composition.get(gas, 0.0)) / 100.0


def _freeze(composition: Mapping[str, float]) -> Mapping[str, float]:
    return MappingProxyType({str(gas): float(value) for gas, value in composition.items()})


def _cell_count(value: Any) -> int:
    # whole cells only; 3.0 read from a CSV is accepted
    count = float(value)
    if not count.is_integer():
        raise ValueError(f"number_of_cells must be a whole number, got {value}")
    return int(count)


def _normalize_keys(values: Mapping[str, Any]) -> Dict[str, Any]:
    return {to_snake_case(key): value for key, value in values.items()}


_REQUIRED_OPERATING_FIELDS = (
    'voltage', 'current', 'active_area', 'temperature',
    'anode_pressure', 'cathode_pressure', 'anode_flow', 'cathode_flow',
)


@dataclass(frozen=True)
class FuelCellInputs:
    """
    Operating-condition snapshot for one calculation.

    Units: voltage V, current A, active_area cm^2, temperature degC,
    pressures atm, flows L/min, compositions in percent by gas symbol.
    """

    voltage: float
    current: float
    active_area: float
    temperature: float
    anode_pressure: float
    cathode_pressure: float
    anode_flow: float
    cathode_flow: float
    anode_composition: Mapping[str, float] = field(default_factory=dict)
    cathode_composition: Mapping[str, float] = field(default_factory=dict)
    fuel_cell_type: FuelCellType = FuelCellType.PEM
    number_of_cells: int = 1

    def __post_init__(self):
        object.__setattr__(self, 'anode_composition', _freeze(self.anode_composition))
        object.__setattr__(self, 'cathode_composition', _freeze(self.cathode_composition))
        object.__setattr__(self, 'fuel_cell_type', FuelCellType.parse(self.fuel_cell_type))
        object.__setattr__(self, 'number_of_cells', _cell_count(self.number_of_cells))

    @classmethod
    def from_dict(cls, values: Mapping[str, Any]) -> "FuelCellInputs":
        """
        Builds inputs from a mapping keyed by snake_case or camelCase field names.

        Raises:
            ValueError: If a required field is missing.
        """
        normalized = _normalize_keys(values)
        names = {f.name for f in fields(cls)}
        missing = [name for name in _REQUIRED_OPERATING_FIELDS if name not in normalized]
        if missing:
            raise ValueError(f"Missing operating condition(s): {', '.join(missing)}")
        return cls(**{key: value for key, value in normalized.items() if key in names})

    def to_dict(self) -> Dict[str, Any]:
        # asdict() would try to deep-copy the read-only composition views
        data = {f.name: getattr(self, f.name) for f in fields(self)}
        data['anode_composition'] = dict(self.anode_composition)
        data['cathode_composition'] = dict(self.cathode_composition)
        data['fuel_cell_type'] = self.fuel_cell_type.value
        return data


@dataclass(frozen=True)
class PEMInputs:
    """
    PEM stack construction parameters.

    Thicknesses are in mm, active_area in cm^2 and active_cell_percentage in percent.
    Channel depths, coolant channel height and the additional layer are carried
    for completeness but do not enter the stack-height model.
    """

    active_area: float
    number_of_cells: int
    anode_channel_depth: float
    cathode_channel_depth: float
    coolant_channel_height: float
    active_cell_percentage: float
    metal_plate_thickness: float
    carbon_plate_thickness: float
    additional_layer_thickness: float
    mea_thickness: float
    anode_collector_thickness: float
    cathode_collector_thickness: float
    anode_isolation_thickness: float
    cathode_isolation_thickness: float
    anode_end_plate_thickness: float
    cathode_end_plate_thickness: float

    @classmethod
    def from_dict(cls, values: Mapping[str, Any]) -> "PEMInputs":
        normalized = _normalize_keys(values)
        names = [f.name for f in fields(cls)]
        missing = [name for name in names if name not in normalized]
        if missing:
            raise ValueError(f"Missing PEM input(s): {', '.join(missing)}")
        return cls(**{name: normalized[name] for name in names})

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class CalculationResults:
    """Electrochemical core outputs: A/cm^2, W/cm^2, fractions, V and W."""

    current_density: float
    power_density: float
    electrical_efficiency: float
    fuel_utilization: float
    activation_loss: float
    ohmic_loss: float
    concentration_loss: float
    nernst_voltage: float
    total_power: float

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)


@dataclass(frozen=True)
class PEMResults:
    """Stack geometry for metal and carbon bipolar plates: mm, cm^2, L and kW/L."""

    metal_stack_height: float
    carbon_stack_height: float
    stack_base_area: float
    metal_stack_volume: float
    carbon_stack_volume: float
    metal_stack_power_density: float
    carbon_stack_power_density: float

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)


@dataclass(frozen=True)
class ChartDataPoint:
    voltage: float
    current: float
    power: float


@dataclass(frozen=True)
class CalculationReport:
    """Everything one press of 'calculate' produces."""

    inputs: FuelCellInputs
    results: CalculationResults
    curve: Tuple[ChartDataPoint, ...]
    pem_results: Optional[PEMResults] = None

"""
Pytest configuration and fixtures for the fuel cell calculator tests.
"""

import matplotlib

matplotlib.use("Agg")

import pytest

from data_model import FuelCellInputs, PEMInputs
from parameters import Parameters


BASE_OPERATING_POINT = {
    'voltage': 0.7,
    'current': 10.0,
    'active_area': 100.0,
    'temperature': 80.0,
    'anode_pressure': 1.0,
    'cathode_pressure': 1.0,
    'anode_flow': 1.0,
    'cathode_flow': 2.0,
    'anode_composition': {'H2': 100.0, 'CO': 0.0, 'CO2': 0.0, 'CH4': 0.0, 'N2': 0.0},
    'cathode_composition': {'O2': 21.0, 'N2': 79.0},
    'fuel_cell_type': 'PEM',
    'number_of_cells': 1,
}

ZERO_STACK = {
    'active_area': 100.0,
    'number_of_cells': 1,
    'anode_channel_depth': 0.0,
    'cathode_channel_depth': 0.0,
    'coolant_channel_height': 0.0,
    'active_cell_percentage': 100.0,
    'metal_plate_thickness': 0.0,
    'carbon_plate_thickness': 0.0,
    'additional_layer_thickness': 0.0,
    'mea_thickness': 0.0,
    'anode_collector_thickness': 0.0,
    'cathode_collector_thickness': 0.0,
    'anode_isolation_thickness': 0.0,
    'cathode_isolation_thickness': 0.0,
    'anode_end_plate_thickness': 0.0,
    'cathode_end_plate_thickness': 0.0,
}


@pytest.fixture
def make_inputs():
    """Factory for operating points: the calculator's default form values plus overrides."""
    def _make(**overrides):
        values = dict(BASE_OPERATING_POINT)
        values.update(overrides)
        return FuelCellInputs(**values)
    return _make


@pytest.fixture
def make_stack():
    """Factory for PEM stacks with every thickness at zero unless overridden."""
    def _make(**overrides):
        values = dict(ZERO_STACK)
        values.update(overrides)
        return PEMInputs(**values)
    return _make


@pytest.fixture
def default_inputs(make_inputs):
    return make_inputs()


@pytest.fixture
def default_pem_inputs():
    return PEMInputs.from_dict(Parameters().get_section('default_pem_inputs'))


@pytest.fixture
def standard_inputs(make_inputs):
    """Pure H2 and pure O2 at 1 atm and 25 C."""
    return make_inputs(
        temperature=25.0,
        anode_composition={'H2': 100.0},
        cathode_composition={'O2': 100.0},
    )

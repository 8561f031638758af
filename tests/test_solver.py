import math

import pytest

import solver
from data_model import CalculationResults, ChartDataPoint, FuelCellType
from parameters import Parameters
from solver import Solver
from validation import InvalidInputError

SOLVER = Solver()


def test_reference_scenario(make_inputs):
    results = SOLVER.compute_core(make_inputs(voltage=0.7, current=10.0, active_area=100.0, number_of_cells=1))
    assert results.current_density == pytest.approx(0.1, rel=1e-9)
    assert results.power_density == pytest.approx(0.07, rel=1e-9)
    assert results.total_power == pytest.approx(7.0, rel=1e-9)


@pytest.mark.parametrize("cells", [1, 4, 37])
def test_total_power_composition(make_inputs, cells):
    inputs = make_inputs(number_of_cells=cells, active_area=250.0, current=80.0, voltage=0.66)
    results = SOLVER.compute_core(inputs)
    assert results.total_power == pytest.approx(results.power_density * 250.0 * cells, rel=1e-9)
    assert results.total_power == pytest.approx(0.66 * 80.0 * cells, rel=1e-9)


def test_core_results_match_model(default_inputs):
    results = SOLVER.compute_core(default_inputs)
    losses = SOLVER.model.calculate_losses(default_inputs)
    assert isinstance(results, CalculationResults)
    assert results.activation_loss == losses['activation']
    assert results.ohmic_loss == losses['ohmic']
    assert results.concentration_loss == losses['concentration']
    assert results.nernst_voltage == SOLVER.model.calculate_nernst_voltage(default_inputs)
    assert results.electrical_efficiency == pytest.approx(0.7 / 1.23)


def test_zero_active_area_propagates_without_raising(make_inputs):
    results = SOLVER.compute_core(make_inputs(active_area=0.0))
    assert math.isinf(results.current_density)
    assert math.isinf(results.power_density)
    assert not math.isfinite(results.total_power)


def test_compute_core_is_idempotent(default_inputs):
    assert SOLVER.compute_core(default_inputs) == SOLVER.compute_core(default_inputs)


def test_curve_has_eleven_points(default_inputs):
    results = SOLVER.compute_core(default_inputs)
    curve = SOLVER.generate_curve(default_inputs, results)

    assert len(curve) == 11
    assert all(isinstance(point, ChartDataPoint) for point in curve)
    assert curve[0].voltage == 0.0
    assert curve[-1].voltage == results.nernst_voltage


def test_curve_points(default_inputs):
    results = SOLVER.compute_core(default_inputs)
    curve = SOLVER.generate_curve(default_inputs, results)
    linear_loss = results.activation_loss + results.ohmic_loss

    assert curve[0].current == pytest.approx(results.nernst_voltage / linear_loss)
    assert curve[0].power == 0.0
    assert curve[-1].current == 0.0
    assert curve[-1].power == 0.0
    for step, point in enumerate(curve):
        assert point.voltage == pytest.approx(step / 10 * results.nernst_voltage)
        assert point.current == pytest.approx((results.nernst_voltage - point.voltage) / linear_loss)
        assert point.power == pytest.approx(point.voltage * point.current)


def test_curve_ignores_concentration_loss(default_inputs):
    results = SOLVER.compute_core(default_inputs)
    altered = CalculationResults(**{**results.to_dict(), 'concentration_loss': 99.0})
    assert SOLVER.generate_curve(default_inputs, altered) == SOLVER.generate_curve(default_inputs, results)


def test_curve_steps_are_configurable(tmp_path, default_inputs):
    config = tmp_path / "config.yaml"
    config.write_text("curve_parameters:\n  num_steps: 4\n")
    custom = Solver(params=Parameters(str(config)))
    curve = custom.generate_curve(default_inputs, custom.compute_core(default_inputs))
    assert [point.voltage for point in curve] == pytest.approx(
        [fraction * curve[-1].voltage for fraction in (0.0, 0.25, 0.5, 0.75, 1.0)])


def test_calculate_pem_uses_default_stack(default_inputs):
    report = SOLVER.calculate(default_inputs)
    assert report.pem_results is not None
    assert report.pem_results.metal_stack_height == pytest.approx(25.7)
    assert report.pem_results.metal_stack_power_density == pytest.approx(
        report.results.total_power / report.pem_results.metal_stack_volume / 1000)
    assert len(report.curve) == 11


def test_calculate_uses_given_stack(default_inputs, make_stack):
    stack = make_stack(anode_end_plate_thickness=10.0, cathode_end_plate_thickness=10.0)
    report = SOLVER.calculate(default_inputs, stack)
    assert report.pem_results.carbon_stack_height == 20.0


@pytest.mark.parametrize("chemistry", ["SOFC", "AFC", "MCFC", "PAFC"])
def test_calculate_non_pem_has_no_stack_geometry(make_inputs, default_pem_inputs, chemistry):
    inputs = make_inputs(fuel_cell_type=chemistry)
    report = SOLVER.calculate(inputs, default_pem_inputs)
    assert inputs.fuel_cell_type is FuelCellType(chemistry)
    assert report.pem_results is None
    assert report.results == SOLVER.compute_core(make_inputs())


def test_validating_solver_rejects_zero_area(make_inputs):
    with pytest.raises(InvalidInputError) as excinfo:
        Solver(validate=True).compute_core(make_inputs(active_area=0.0))
    assert excinfo.value.field == 'active_area'


def test_validating_solver_rejects_zero_active_percentage(make_stack):
    with pytest.raises(InvalidInputError):
        Solver(validate=True).compute_pem(make_stack(active_cell_percentage=0.0), 7.0)


def test_validation_does_not_change_results(default_inputs):
    assert Solver(validate=True).compute_core(default_inputs) == SOLVER.compute_core(default_inputs)


def test_module_level_entry_points(default_inputs, default_pem_inputs):
    results = solver.compute_core(default_inputs)
    assert results == SOLVER.compute_core(default_inputs)
    assert len(solver.generate_curve(default_inputs, results)) == 11
    pem = solver.compute_pem(default_pem_inputs, results.total_power)
    assert pem.stack_base_area == pytest.approx(125.0)

import pytest

from data_loader import DataLoader
from data_model import FuelCellType

LOADER = DataLoader()


def test_load_case_with_camel_case_keys(tmp_path):
    case = tmp_path / "case.yaml"
    case.write_text(
        "operating_conditions:\n"
        "  voltage: 0.65\n"
        "  activeArea: 150.0\n"
        "  numberOfCells: 20\n"
        "  anodeComposition: {H2: 80.0, CO2: 20.0}\n"
        "pem_inputs:\n"
        "  activeCellPercentage: 75.0\n"
        "  meaThickness: 0.45\n"
    )
    inputs, pem_inputs = LOADER.load_case(str(case))

    assert inputs.voltage == 0.65
    assert inputs.active_area == 150.0
    assert inputs.number_of_cells == 20
    assert dict(inputs.anode_composition) == {'H2': 80.0, 'CO2': 20.0}
    # unspecified values come from the default operating point
    assert inputs.current == 10.0
    assert dict(inputs.cathode_composition) == {'O2': 21.0, 'N2': 79.0}
    assert inputs.fuel_cell_type is FuelCellType.PEM

    assert pem_inputs.active_cell_percentage == 75.0
    assert pem_inputs.mea_thickness == 0.45
    assert pem_inputs.anode_end_plate_thickness == 10.0


def test_load_case_non_pem_without_stack(tmp_path):
    case = tmp_path / "case.yaml"
    case.write_text("operating_conditions:\n  fuel_cell_type: sofc\n  temperature: 750\n")
    inputs, pem_inputs = LOADER.load_case(str(case))
    assert inputs.fuel_cell_type is FuelCellType.SOFC
    assert pem_inputs is None


def test_load_case_unknown_chemistry(tmp_path):
    case = tmp_path / "case.yaml"
    case.write_text("operating_conditions:\n  fuel_cell_type: DMFC\n")
    with pytest.raises(ValueError, match="Unknown fuel cell type"):
        LOADER.load_case(str(case))


def test_load_case_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        LOADER.load_case(str(tmp_path / "missing.yaml"))


def test_load_case_malformed_section(tmp_path):
    case = tmp_path / "case.yaml"
    case.write_text("operating_conditions: [1, 2]\n")
    with pytest.raises(ValueError):
        LOADER.load_case(str(case))


def test_load_operating_points(tmp_path):
    batch = tmp_path / "points.csv"
    batch.write_text(
        "voltage,current,active_area,anode_H2,cathode_O2,fuel_cell_type\n"
        "0.85,5,100,100,21,PEM\n"
        "0.80,20,50,60,100,SOFC\n"
    )
    points = LOADER.load_operating_points(str(batch))

    assert len(points) == 2
    assert points[0].voltage == 0.85
    assert points[0].anode_pressure == 1.0
    assert points[1].active_area == 50.0
    assert points[1].anode_composition['H2'] == 60.0
    assert points[1].anode_composition['CO'] == 0.0
    assert points[1].cathode_composition['O2'] == 100.0
    assert points[1].fuel_cell_type is FuelCellType.SOFC


def test_load_operating_points_drops_invalid_rows(tmp_path, caplog):
    batch = tmp_path / "points.csv"
    batch.write_text("voltage,current\n0.7,10\nabc,10\n0.6,\n")
    points = LOADER.load_operating_points(str(batch))
    assert [point.voltage for point in points] == [0.7]
    assert "Dropped 2 row(s)" in caplog.text


def test_load_operating_points_all_invalid(tmp_path):
    batch = tmp_path / "points.csv"
    batch.write_text("voltage,current\nabc,xyz\n")
    with pytest.raises(ValueError, match="All rows were dropped"):
        LOADER.load_operating_points(str(batch))


def test_load_operating_points_unrecognised_columns(tmp_path):
    batch = tmp_path / "points.csv"
    batch.write_text("foo,bar\n1,2\n")
    with pytest.raises(ValueError, match="No recognised"):
        LOADER.load_operating_points(str(batch))


def test_load_operating_points_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        LOADER.load_operating_points(str(tmp_path / "missing.csv"))


def test_blank_fuel_cell_type_uses_default(tmp_path):
    batch = tmp_path / "points.csv"
    batch.write_text("voltage,current,fuel_cell_type\n0.7,10,\n0.6,12,SOFC\n")
    points = LOADER.load_operating_points(str(batch))
    assert [point.fuel_cell_type for point in points] == [FuelCellType.PEM, FuelCellType.SOFC]


def test_fractional_cell_count_in_batch(tmp_path):
    batch = tmp_path / "points.csv"
    batch.write_text("voltage,current,number_of_cells\n0.7,10,4\n0.6,12,2.5\n")
    with pytest.raises(ValueError, match="whole number"):
        LOADER.load_operating_points(str(batch))

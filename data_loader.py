import logging
import os
import re
import pandas as pd
import yaml
from typing import Any, Dict, List, Optional, Tuple

from data_model import FuelCellInputs, FuelCellType, PEMInputs, to_snake_case
from parameters import Parameters

logger = logging.getLogger(__name__)

# Composition columns in a batch file: anode_H2, cathode_O2, ...
_COMPOSITION_COLUMN = re.compile(r'^(anode|cathode)_([A-Z][A-Za-z0-9]*)$')

_NUMERIC_FIELDS = (
    'voltage', 'current', 'active_area', 'temperature',
    'anode_pressure', 'cathode_pressure', 'anode_flow', 'cathode_flow',
    'number_of_cells',
)


class DataLoader:
    """
    Loads calculator inputs from files: a single YAML calculation case, or a
    CSV batch of operating points. Any value not present in the file falls
    back to the default operating point held by Parameters.
    """

    def __init__(self, params: Optional[Parameters] = None):
        """
        Args:
            params (Parameters): Source of the default operating point and PEM
                                 stack. The built-in defaults are used when omitted.
        """
        self.params = params if params is not None else Parameters()

    def _merge_operating_conditions(self, overrides: Dict[str, Any]) -> Dict[str, Any]:
        values = self.params.get_section('default_operating_conditions')
        for key, value in overrides.items():
            key = to_snake_case(key)
            if key in ('anode_composition', 'cathode_composition'):
                if not isinstance(value, dict):
                    raise ValueError(f"'{key}' must be a mapping of gas symbol to percentage.")
                # a composition given in the file replaces the default one completely
                values[key] = {str(gas): float(share) for gas, share in value.items()}
            else:
                values[key] = value
        return values

    def load_case(self, filepath: str) -> Tuple[FuelCellInputs, Optional[PEMInputs]]:
        """
        Loads one calculation case from a YAML file.

        The file may contain an 'operating_conditions' section and a
        'pem_inputs' section; keys can be snake_case or camelCase.

        Args:
            filepath (str): Path to the YAML case file.

        Returns:
            Tuple[FuelCellInputs, Optional[PEMInputs]]: The operating point, and the
            PEM stack parameters when the cell is PEM (defaults if the section is absent).

        Raises:
            FileNotFoundError: If the file does not exist.
            ValueError: If the file is not valid YAML or has a malformed section.
        """
        if not os.path.exists(filepath):
            raise FileNotFoundError(f"Case file not found: {filepath}")

        try:
            with open(filepath, 'r', encoding='utf-8') as f:
                case = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Error parsing YAML case file '{filepath}': {e}")

        if not isinstance(case, dict):
            raise ValueError(f"Case file '{filepath}' must contain a mapping at top level.")

        operating = case.get('operating_conditions', {}) or {}
        if not isinstance(operating, dict):
            raise ValueError(f"'operating_conditions' in '{filepath}' must be a mapping.")

        inputs = FuelCellInputs.from_dict(self._merge_operating_conditions(operating))

        pem_inputs: Optional[PEMInputs] = None
        pem_section = case.get('pem_inputs')
        if pem_section is not None and not isinstance(pem_section, dict):
            raise ValueError(f"'pem_inputs' in '{filepath}' must be a mapping.")
        if inputs.fuel_cell_type is FuelCellType.PEM or pem_section:
            pem_values = self.params.get_section('default_pem_inputs')
            pem_values.update({to_snake_case(key): value for key, value in (pem_section or {}).items()})
            pem_inputs = PEMInputs.from_dict(pem_values)

        logger.debug("Loaded case %s (%s, %d cell(s))", filepath, inputs.fuel_cell_type.value,
                     inputs.number_of_cells)
        return inputs, pem_inputs

    def load_operating_points(self, filepath: str) -> List[FuelCellInputs]:
        """
        Loads a batch of operating points from a CSV file.

        Each row overrides fields of the default operating point. Scalar columns use
        the field names ('voltage', 'active_area', ...); composition columns are
        named 'anode_<GAS>' or 'cathode_<GAS>', and 'fuel_cell_type' is optional.

        Args:
            filepath (str): Path to the CSV file.

        Returns:
            List[FuelCellInputs]: One entry per valid row, in file order.

        Raises:
            FileNotFoundError: If the file does not exist.
            ValueError: If the file is empty, has no recognised columns, or no
                        row survives cleaning.
        """
        # 1. File Existence Check
        if not os.path.exists(filepath):
            raise FileNotFoundError(f"Operating point file not found: {filepath}")

        # 2. CSV Reading
        try:
            df = pd.read_csv(filepath)
        except pd.errors.EmptyDataError:
            raise ValueError(f"The operating point file '{filepath}' is empty.")
        except pd.errors.ParserError as e:
            raise ValueError(f"Error reading CSV file '{filepath}': {e}")

        if df.empty:
            raise ValueError(f"The operating point file '{filepath}' is empty.")

        # 3. Column Identification
        composition_columns: Dict[str, Tuple[str, str]] = {}
        scalar_columns: Dict[str, str] = {}
        for column in df.columns:
            name = str(column).strip()
            match = _COMPOSITION_COLUMN.match(name)
            if match:
                composition_columns[column] = (f"{match.group(1)}_composition", match.group(2))
            elif to_snake_case(name) in _NUMERIC_FIELDS or to_snake_case(name) == 'fuel_cell_type':
                scalar_columns[column] = to_snake_case(name)

        if not composition_columns and not scalar_columns:
            raise ValueError(f"No recognised operating point columns in '{filepath}'.")

        # 4. Numeric Conversion and Missing Value Handling
        numeric_columns = [c for c, field in scalar_columns.items() if field != 'fuel_cell_type']
        numeric_columns += list(composition_columns)
        for column in numeric_columns:
            df[column] = pd.to_numeric(df[column], errors='coerce')

        # a blank chemistry cell means the default chemistry
        for column, field in scalar_columns.items():
            if field == 'fuel_cell_type':
                default_type = self.params.get_section('default_operating_conditions')['fuel_cell_type']
                df[column] = df[column].fillna(default_type)

        initial_rows = len(df)
        df = df.dropna(subset=numeric_columns)
        dropped_rows = initial_rows - len(df)
        if dropped_rows > 0:
            logger.warning("Dropped %d row(s) with non-numeric or missing values in '%s'.",
                           dropped_rows, filepath)

        if df.empty:
            raise ValueError(f"All rows were dropped from '{filepath}' due to missing or invalid values.")

        # 5. Row Conversion
        points: List[FuelCellInputs] = []
        for _, row in df.iterrows():
            values = self.params.get_section('default_operating_conditions')
            for column, field in scalar_columns.items():
                values[field] = row[column] if field == 'fuel_cell_type' else float(row[column])
            for column, (composition, gas) in composition_columns.items():
                values[composition][gas] = float(row[column])
            points.append(FuelCellInputs.from_dict(values))

        logger.debug("Loaded %d operating point(s) from %s", len(points), filepath)
        return points

import copy
import yaml
from typing import Any, Dict, Optional

# Built-in defaults. A config.yaml passed to Parameters overlays these section by section.
DEFAULT_CONFIG: Dict[str, Any] = {
    'physical_constants': {
        'F': 96485.0,               # C/mol
        'R': 8.314,                 # J/(mol K)
        'E0': 1.23,                 # V, standard cell potential at 25 C
        'molar_volume': 22.4,       # L/mol, ideal gas at STP
        'kelvin_offset': 273.15,
        'electrons_per_h2': 2,
    },
    'loss_model': {
        'activation_coefficient': 0.05,
        'ohmic_coefficient': 0.02,
        'concentration_coefficient': 0.05,
        'concentration_reference_density': 0.5,
    },
    'curve_parameters': {
        'num_steps': 10,
    },
    'default_operating_conditions': {
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
    },
    'default_pem_inputs': {
        'active_area': 100.0,
        'number_of_cells': 1,
        'anode_channel_depth': 0.5,
        'cathode_channel_depth': 0.5,
        'coolant_channel_height': 1.0,
        'active_cell_percentage': 80.0,
        'metal_plate_thickness': 0.1,
        'carbon_plate_thickness': 1.0,
        'additional_layer_thickness': 0.0,
        'mea_thickness': 0.5,
        'anode_collector_thickness': 2.0,
        'cathode_collector_thickness': 2.0,
        'anode_isolation_thickness': 0.5,
        'cathode_isolation_thickness': 0.5,
        'anode_end_plate_thickness': 10.0,
        'cathode_end_plate_thickness': 10.0,
    },
}

# Sections whose keys are flattened into the parameter lookup table.
_CONSTANT_SECTIONS = ('physical_constants', 'loss_model', 'curve_parameters')


class Parameters:
    """
    Centralized class for managing the electrochemical constants, loss-model
    coefficients, curve sampling settings and default calculator inputs.

    Values start from the built-in defaults and are optionally overlaid by a
    YAML configuration file, so an empty or partial config.yaml is valid.
    """

    def __init__(self, config_path: Optional[str] = None):
        """
        Initializes the Parameters object from the built-in defaults and, when
        given, the specified YAML configuration file.

        Args:
            config_path: The file path to a config.yaml file, or None to use
                         the built-in defaults only.
        """
        self.config_path = config_path
        self._config: Dict[str, Any] = copy.deepcopy(DEFAULT_CONFIG)
        self._parameters: Dict[str, Any] = {}

        if config_path is not None:
            try:
                with open(config_path, 'r', encoding='utf-8') as f:
                    config = yaml.safe_load(f) or {}
            except FileNotFoundError:
                raise FileNotFoundError(f"Configuration file not found at: {config_path}")
            except yaml.YAMLError as e:
                raise ValueError(f"Error parsing YAML configuration file: {e}")

            if not isinstance(config, dict):
                raise ValueError(f"Configuration file must contain a mapping at top level: {config_path}")

            for section, values in config.items():
                if section in DEFAULT_CONFIG and not isinstance(values, dict):
                    raise ValueError(f"Section '{section}' in {config_path} must be a mapping, "
                                     f"got {type(values).__name__}")
                if isinstance(values, dict) and isinstance(self._config.get(section), dict):
                    self._merge_section(self._config[section], values)
                else:
                    self._config[section] = values

        for section in _CONSTANT_SECTIONS:
            self._parameters.update(self._config.get(section, {}))

    @staticmethod
    def _merge_section(target: Dict[str, Any], overrides: Dict[str, Any]) -> None:
        # composition maps are replaced as a whole, not merged gas by gas
        for key, value in overrides.items():
            target[key] = copy.deepcopy(value)

    def get_value(self, param_name: str) -> Any:
        """
        Retrieves the value of a specific parameter.

        Args:
            param_name: The name of the parameter to retrieve.

        Returns:
            The value of the parameter.

        Raises:
            KeyError: If the parameter name is not found.
        """
        if param_name not in self._parameters:
            raise KeyError(f"Parameter '{param_name}' not found in the loaded configuration.")
        return self._parameters[param_name]

    def get_all(self) -> Dict[str, Any]:
        """
        Returns a copy of all loaded and processed parameters.

        Returns:
            A dictionary containing all parameters.
        """
        return self._parameters.copy()

    def get_section(self, section: str) -> Dict[str, Any]:
        """Returns a deep copy of a whole configuration section, e.g. 'default_pem_inputs'."""
        if section not in self._config:
            raise KeyError(f"Configuration section '{section}' not found.")
        return copy.deepcopy(self._config[section])

import logging
import numpy as np
from typing import Dict, Optional

from data_model import FuelCellInputs, gas_fraction
from parameters import Parameters

logger = logging.getLogger(__name__)


class Model:
    """
    Electrochemical core of the fuel cell calculator. Each quantity (densities,
    efficiencies, overpotential losses, Nernst voltage) is implemented as a
    dedicated method taking the operating-condition snapshot.

    Degenerate inputs (zero area, zero hydrogen flow, zero partial pressure)
    are not rejected here: the arithmetic runs on float64 with divide/invalid
    warnings silenced, so the results come back as inf or nan.
    """

    def __init__(self, params: Optional[Parameters] = None):
        """
        Initializes the Model with a Parameters object.

        Args:
            params (Parameters): Constants and loss coefficients. The built-in
                                 defaults are used when omitted.
        """
        self.params = params if params is not None else Parameters()

        self.SECONDS_PER_MINUTE = 60.0
        self.PERCENT = 100.0

    def _get_param(self, name: str) -> float:
        """Helper method to fetch parameter values from the Parameters object."""
        return self.params.get_value(name)

    def calculate_current_density(self, inputs: FuelCellInputs) -> float:
        """Current per unit active area (A/cm^2)."""
        with np.errstate(divide='ignore', invalid='ignore'):
            return float(np.float64(inputs.current) / np.float64(inputs.active_area))

    def calculate_densities(self, inputs: FuelCellInputs) -> Dict[str, float]:
        """
        Calculates current density and power density.

        Logic:
        - current_density = current / active_area (A/cm^2).
        - power_density = voltage * current_density (W/cm^2).
        - A zero active area yields an infinite current density rather than an error.

        Args:
            inputs (FuelCellInputs): Operating conditions.

        Returns:
            Dict[str, float]: 'current_density' and 'power_density'.
        """
        current_density = self.calculate_current_density(inputs)
        with np.errstate(invalid='ignore'):
            power_density = float(np.float64(inputs.voltage) * current_density)
        return {'current_density': current_density, 'power_density': power_density}

    def calculate_hydrogen_flow(self, inputs: FuelCellInputs) -> float:
        """
        Converts the anode volumetric flow into a hydrogen molar flow (mol/s).

        The hydrogen share is read from the anode composition (missing H2 counts as 0 %)
        and L/min is converted with the ideal-gas molar volume.
        """
        h2_percent = inputs.anode_composition.get('H2', 0.0)
        molar_volume = self._get_param('molar_volume')
        return float(np.float64(inputs.anode_flow) * h2_percent
                     / self.PERCENT / self.SECONDS_PER_MINUTE / molar_volume)

    def calculate_efficiencies(self, inputs: FuelCellInputs) -> Dict[str, float]:
        """
        Calculates electrical efficiency and fuel utilization.

        Logic:
        - electrical = voltage / E0, the ratio to the standard thermodynamic potential.
        - fuel_utilization = current / (n * F * hydrogen_flow) with n = 2 electrons per H2.
        - Zero hydrogen flow gives an infinite (or nan for zero current) utilization.

        Args:
            inputs (FuelCellInputs): Operating conditions.

        Returns:
            Dict[str, float]: 'electrical' and 'fuel_utilization' as fractions.
        """
        F = self._get_param('F')
        E0 = self._get_param('E0')
        n_electrons = self._get_param('electrons_per_h2')

        hydrogen_flow = self.calculate_hydrogen_flow(inputs)

        with np.errstate(divide='ignore', invalid='ignore'):
            electrical = float(np.float64(inputs.voltage) / E0)
            fuel_utilization = float(np.float64(inputs.current) / (n_electrons * F * np.float64(hydrogen_flow)))

        return {'electrical': electrical, 'fuel_utilization': fuel_utilization}

    def calculate_losses(self, inputs: FuelCellInputs) -> Dict[str, float]:
        """
        Calculates the activation, ohmic and concentration overpotentials (V).

        Logic:
        - activation = a * ln(j + 1)
        - ohmic = b * j
        - concentration = c * exp(j / j_ref)
        - j is the current density in A/cm^2. The coefficients are fixed empirical
          placeholders shared by every chemistry, not calibrated per cell type.

        Args:
            inputs (FuelCellInputs): Operating conditions.

        Returns:
            Dict[str, float]: 'activation', 'ohmic' and 'concentration'.
        """
        a = self._get_param('activation_coefficient')
        b = self._get_param('ohmic_coefficient')
        c = self._get_param('concentration_coefficient')
        j_ref = self._get_param('concentration_reference_density')

        j = np.float64(self.calculate_current_density(inputs))

        with np.errstate(divide='ignore', invalid='ignore', over='ignore'):
            activation = float(a * np.log(j + 1))
            ohmic = float(b * j)
            concentration = float(c * np.exp(j / j_ref))

        return {'activation': activation, 'ohmic': ohmic, 'concentration': concentration}

    def calculate_nernst_voltage(self, inputs: FuelCellInputs) -> float:
        """
        Calculates the Nernst (open-circuit) voltage of the H2/O2 cell.

        Logic:
        - T = temperature + 273.15 (K).
        - p_H2 = x_H2 * anode_pressure and p_O2 = x_O2 * cathode_pressure (atm),
          with the mole fractions taken from the composition maps.
        - E = E0 - (R T / 4F) * ln(1 / (p_H2 * sqrt(p_O2))).
        - At 25 C with pure H2 and pure O2 at 1 atm the log term is ln(1) = 0 and E = E0.
        - p_H2 = 0 makes the log term infinite; the result is -inf, not an error.

        Args:
            inputs (FuelCellInputs): Operating conditions.

        Returns:
            float: Nernst voltage (V).
        """
        R = self._get_param('R')
        F = self._get_param('F')
        E0 = self._get_param('E0')

        T = inputs.temperature + self._get_param('kelvin_offset')

        p_h2 = np.float64(gas_fraction(inputs.anode_composition, 'H2') * inputs.anode_pressure)
        p_o2 = np.float64(gas_fraction(inputs.cathode_composition, 'O2') * inputs.cathode_pressure)

        with np.errstate(divide='ignore', invalid='ignore'):
            log_term = np.log(1 / (p_h2 * np.sqrt(p_o2)))
            nernst = float(E0 - (R * T / (4 * F)) * log_term)

        if not np.isfinite(nernst):
            logger.warning("Nernst voltage is not finite (p_H2=%s atm, p_O2=%s atm)", p_h2, p_o2)
        return nernst

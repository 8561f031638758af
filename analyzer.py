import math
import numpy as np
import pandas as pd
from typing import Dict, List, Optional, Sequence, Tuple, Union

from data_model import CalculationResults, ChartDataPoint, PEMResults

SummaryRow = Tuple[str, str, str]


class Analyzer:
    """
    The Analyzer class post-processes calculation results: it formats them
    with display units, turns the performance curve into a DataFrame, locates
    the peak-power point and compares the metal and carbon stack variants.
    """

    def summarize_results(self, results: CalculationResults) -> List[SummaryRow]:
        """
        Formats the core results as (label, value, unit) rows.

        Efficiency and fuel utilization are shown as percentages; the remaining
        values keep their calculation units with four decimals.

        Args:
            results (CalculationResults): Output of the core calculation.

        Returns:
            List[SummaryRow]: Rows in display order.
        """
        return [
            ("Current Density", f"{results.current_density:.4f}", "A/cm²"),
            ("Power Density", f"{results.power_density:.4f}", "W/cm²"),
            ("Electrical Efficiency", f"{results.electrical_efficiency * 100:.2f}", "%"),
            ("Fuel Utilization", f"{results.fuel_utilization * 100:.2f}", "%"),
            ("Activation Loss", f"{results.activation_loss:.4f}", "V"),
            ("Ohmic Loss", f"{results.ohmic_loss:.4f}", "V"),
            ("Concentration Loss", f"{results.concentration_loss:.4f}", "V"),
            ("Nernst Voltage", f"{results.nernst_voltage:.4f}", "V"),
            ("Total Power", f"{results.total_power:.4f}", "W"),
        ]

    def summarize_pem(self, pem_results: PEMResults) -> List[SummaryRow]:
        """Formats the PEM stack results as (label, value, unit) rows with two decimals."""
        return [
            ("Metal Stack Height", f"{pem_results.metal_stack_height:.2f}", "mm"),
            ("Carbon Stack Height", f"{pem_results.carbon_stack_height:.2f}", "mm"),
            ("Stack Base Area", f"{pem_results.stack_base_area:.2f}", "cm²"),
            ("Metal Stack Volume", f"{pem_results.metal_stack_volume:.2f}", "L"),
            ("Carbon Stack Volume", f"{pem_results.carbon_stack_volume:.2f}", "L"),
            ("Metal Stack Power Density", f"{pem_results.metal_stack_power_density:.2f}", "kW/L"),
            ("Carbon Stack Power Density", f"{pem_results.carbon_stack_power_density:.2f}", "kW/L"),
        ]

    def total_loss(self, results: CalculationResults) -> float:
        """Sum of activation, ohmic and concentration overpotentials (V)."""
        return results.activation_loss + results.ohmic_loss + results.concentration_loss

    def curve_to_frame(self, curve: Sequence[ChartDataPoint]) -> pd.DataFrame:
        """
        Converts a performance curve into a DataFrame with 'voltage', 'current'
        and 'power' columns, one row per sample.
        """
        return pd.DataFrame(
            {
                'voltage': [point.voltage for point in curve],
                'current': [point.current for point in curve],
                'power': [point.power for point in curve],
            },
            columns=['voltage', 'current', 'power'],
        )

    def peak_power_point(self, curve: Sequence[ChartDataPoint]) -> Optional[ChartDataPoint]:
        """
        Returns the sample with the highest power.

        Non-finite powers are skipped; None is returned if no sample is finite.
        """
        powers = np.array([point.power for point in curve], dtype=float)
        finite = np.isfinite(powers)
        if not np.any(finite):
            return None
        candidates = np.where(finite, powers, -np.inf)
        return curve[int(np.argmax(candidates))]

    def compare_plate_materials(self, pem_results: PEMResults) -> Dict[str, Union[float, str, None]]:
        """
        Compares the carbon-plate stack against the metal-plate stack.

        Returns:
            Dict with 'height_difference_mm', 'volume_difference_l' and
            'power_density_difference_kw_l' (carbon minus metal), plus
            'denser_material' ('metal', 'carbon', or None for a tie or non-finite values).
        """
        metal = pem_results.metal_stack_power_density
        carbon = pem_results.carbon_stack_power_density

        denser: Optional[str] = None
        if math.isfinite(metal) and math.isfinite(carbon) and metal != carbon:
            denser = 'metal' if metal > carbon else 'carbon'

        return {
            'height_difference_mm': pem_results.carbon_stack_height - pem_results.metal_stack_height,
            'volume_difference_l': pem_results.carbon_stack_volume - pem_results.metal_stack_volume,
            'power_density_difference_kw_l': carbon - metal,
            'denser_material': denser,
        }

import logging
import numpy as np

from data_model import PEMInputs, PEMResults

logger = logging.getLogger(__name__)


class StackGeometry:
    """
    Physical stack dimensions and volumetric power density for a PEM stack.

    Two stack-height models run side by side, one with metal bipolar plates
    and one with carbon plates, so the plate materials can be compared.
    Lengths are in mm, areas in cm^2, volumes in L and power densities in kW/L.
    """

    def calculate_cell_thickness(self, plate_thickness: float, mea_thickness: float) -> float:
        """One repeating unit: two bipolar plates around an MEA (mm)."""
        return plate_thickness * 2 + mea_thickness

    def calculate_stack_height(self, inputs: PEMInputs, plate_thickness: float) -> float:
        """
        Calculates the stack height for a given bipolar plate thickness.

        Logic:
        - cell_thickness = 2 * plate_thickness + mea_thickness.
        - height = cells * cell_thickness plus both current collectors, both
          isolation layers and both end plates.

        Args:
            inputs (PEMInputs): Stack construction parameters (mm).
            plate_thickness (float): Bipolar plate thickness (mm).

        Returns:
            float: Stack height (mm).
        """
        cell_thickness = self.calculate_cell_thickness(plate_thickness, inputs.mea_thickness)
        return (
            inputs.number_of_cells * cell_thickness
            + inputs.anode_collector_thickness
            + inputs.cathode_collector_thickness
            + inputs.anode_isolation_thickness
            + inputs.cathode_isolation_thickness
            + inputs.anode_end_plate_thickness
            + inputs.cathode_end_plate_thickness
        )

    def calculate_base_area(self, inputs: PEMInputs) -> float:
        """
        Inflates the active area to the full plate footprint (cm^2) given the
        percentage of the cell that is electrochemically active.
        """
        with np.errstate(divide='ignore', invalid='ignore'):
            return float(np.float64(inputs.active_area) / (np.float64(inputs.active_cell_percentage) / 100))

    def calculate_volume(self, height_mm: float, base_area_cm2: float) -> float:
        """Stack volume in litres: (height mm / 10) * (area cm^2 / 100)."""
        with np.errstate(invalid='ignore'):
            return float((np.float64(height_mm) / 10) * (np.float64(base_area_cm2) / 100))

    def calculate_power_density(self, stack_power: float, volume_l: float) -> float:
        """Volumetric power density in kW/L; a zero volume gives inf (or nan at zero power)."""
        with np.errstate(divide='ignore', invalid='ignore'):
            return float(np.float64(stack_power) / np.float64(volume_l) / 1000)

    def calculate_pem_specifics(self, inputs: PEMInputs, stack_power: float) -> PEMResults:
        """
        Derives heights, footprint, volumes and power densities for both plate materials.

        Args:
            inputs (PEMInputs): Stack construction parameters.
            stack_power (float): Total electrical stack power (W) from the core calculation.

        Returns:
            PEMResults: Metal and carbon variants side by side.
        """
        metal_height = self.calculate_stack_height(inputs, inputs.metal_plate_thickness)
        carbon_height = self.calculate_stack_height(inputs, inputs.carbon_plate_thickness)

        base_area = self.calculate_base_area(inputs)

        metal_volume = self.calculate_volume(metal_height, base_area)
        carbon_volume = self.calculate_volume(carbon_height, base_area)

        logger.debug(
            "PEM stack: metal %.3f mm / %.4f L, carbon %.3f mm / %.4f L, footprint %.3f cm^2",
            metal_height, metal_volume, carbon_height, carbon_volume, base_area,
        )

        return PEMResults(
            metal_stack_height=float(metal_height),
            carbon_stack_height=float(carbon_height),
            stack_base_area=base_area,
            metal_stack_volume=metal_volume,
            carbon_stack_volume=carbon_volume,
            metal_stack_power_density=self.calculate_power_density(stack_power, metal_volume),
            carbon_stack_power_density=self.calculate_power_density(stack_power, carbon_volume),
        )

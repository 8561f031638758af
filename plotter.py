import matplotlib.pyplot as plt
import numpy as np
import os
from typing import Sequence

from data_model import ChartDataPoint, PEMResults


class Plotter:
    """
    The Plotter class handles all data visualization: the voltage-current-power
    performance curve and the metal versus carbon stack comparison.
    """

    def __init__(self, output_dir: str = "results/plots"):
        """
        Initializes the Plotter instance, setting up the output directory
        for saving figures and configuring default matplotlib parameters.

        Args:
            output_dir (str): The directory where generated plots will be saved.
                              Defaults to "results/plots".
        """
        self.output_dir: str = output_dir
        os.makedirs(self.output_dir, exist_ok=True)

        plt.rcParams.update({
            'font.size': 12,
            'axes.labelsize': 14,
            'axes.titlesize': 16,
            'xtick.labelsize': 12,
            'ytick.labelsize': 12,
            'legend.fontsize': 10,
            'figure.figsize': (8, 6),
            'lines.linewidth': 2,
            'axes.grid': True,
            'grid.alpha': 0.75
        })

    def plot_performance_curve(
        self,
        curve: Sequence[ChartDataPoint],
        title: str,
        filename: str
    ) -> str:
        """
        Plots current (left axis) and power (right axis) against cell voltage.

        Args:
            curve (Sequence[ChartDataPoint]): Samples from the curve generator.
            title (str): The title for the plot.
            filename (str): The filename (e.g., "performance_curve.png") to save the plot.

        Returns:
            str: Path of the saved figure.
        """
        voltage = np.array([point.voltage for point in curve], dtype=float)
        current = np.array([point.current for point in curve], dtype=float)
        power = np.array([point.power for point in curve], dtype=float)

        fig, ax_current = plt.subplots()
        ax_power = ax_current.twinx()

        line_current, = ax_current.plot(voltage, current, color='#4F46E5', label="Current")
        line_power, = ax_power.plot(voltage, power, color='#10B981', label="Power")

        ax_current.set_xlabel("Voltage (V)")
        ax_current.set_ylabel("Current (A)")
        ax_power.set_ylabel("Power (W)")
        ax_power.grid(False)
        ax_current.set_title(title)
        ax_current.legend(handles=[line_current, line_power], loc='best')

        fig.tight_layout()
        path = os.path.join(self.output_dir, filename)
        fig.savefig(path)
        plt.close(fig)
        return path

    def plot_stack_comparison(
        self,
        pem_results: PEMResults,
        title: str,
        filename: str
    ) -> str:
        """
        Bar charts of stack height, volume and power density for metal and carbon plates.

        Args:
            pem_results (PEMResults): Output of the PEM stack geometry.
            title (str): The overall title for the figure.
            filename (str): The filename to save the plot.

        Returns:
            str: Path of the saved figure.
        """
        panels = [
            ("Stack height (mm)", pem_results.metal_stack_height, pem_results.carbon_stack_height),
            ("Stack volume (L)", pem_results.metal_stack_volume, pem_results.carbon_stack_volume),
            ("Power density (kW/L)", pem_results.metal_stack_power_density,
             pem_results.carbon_stack_power_density),
        ]

        fig, axes = plt.subplots(1, len(panels), figsize=(12, 4))
        for ax, (ylabel, metal, carbon) in zip(axes, panels):
            ax.bar(["Metal", "Carbon"], [metal, carbon], color=['#6B7280', '#111827'])
            ax.set_ylabel(ylabel)

        fig.suptitle(title)
        fig.tight_layout()
        path = os.path.join(self.output_dir, filename)
        fig.savefig(path)
        plt.close(fig)
        return path

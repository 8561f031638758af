import argparse
import logging
import sys
import pandas as pd
from typing import List, Optional, Sequence

from analyzer import Analyzer
from data_loader import DataLoader
from data_model import CalculationReport, FuelCellInputs, PEMInputs
from parameters import Parameters
from plotter import Plotter
from solver import Solver
from validation import InvalidInputError

logger = logging.getLogger(__name__)


class Main:
    """
    The main execution script `main.py` serves as the entry point and orchestrator
    of the fuel cell calculator. It loads configuration and inputs, runs the
    calculation, prints the results and optionally saves the charts.
    """

    def __init__(self, config_path: Optional[str] = None, validate: bool = False,
                 plot_dir: Optional[str] = None):
        """
        Initializes the Main orchestrator by loading configuration and setting up
        all necessary calculation components.

        Args:
            config_path (str): Path to a YAML configuration file, or None for the built-in defaults.
            validate (bool): Reject degenerate inputs instead of reporting inf/nan.
            plot_dir (str): Directory for charts; no charts are drawn when None.
        """
        self.params = Parameters(config_path)
        self.solver = Solver(params=self.params, validate=validate)
        self.data_loader = DataLoader(self.params)
        self.analyzer = Analyzer()
        self.plotter: Optional[Plotter] = Plotter(plot_dir) if plot_dir else None

    def default_inputs(self) -> FuelCellInputs:
        return FuelCellInputs.from_dict(self.params.get_section('default_operating_conditions'))

    def run_case(self, inputs: FuelCellInputs, pem_inputs: Optional[PEMInputs] = None) -> CalculationReport:
        """
        Runs one calculation and prints the results, the PEM stack results when
        present, the performance curve and its peak-power point.
        """
        report = self.solver.calculate(inputs, pem_inputs)

        print(f"--- Calculation Results ({inputs.fuel_cell_type.value}, {inputs.number_of_cells} cell(s)) ---")
        self._print_rows(self.analyzer.summarize_results(report.results))
        print(f"  Total Loss: {self.analyzer.total_loss(report.results):.4f} V")

        if report.pem_results is not None:
            print("\n--- PEM Specific Results ---")
            self._print_rows(self.analyzer.summarize_pem(report.pem_results))
            comparison = self.analyzer.compare_plate_materials(report.pem_results)
            if comparison['denser_material'] is not None:
                print(f"  Higher power density: {comparison['denser_material']} plates "
                      f"({abs(comparison['power_density_difference_kw_l']):.2f} kW/L difference)")

        print("\n--- Performance Curve ---")
        print(self.analyzer.curve_to_frame(report.curve).to_string(index=False, float_format=lambda v: f"{v:.4f}"))
        peak = self.analyzer.peak_power_point(report.curve)
        if peak is not None:
            print(f"  Peak power: {peak.power:.4f} W at {peak.voltage:.4f} V, {peak.current:.4f} A")

        if self.plotter is not None:
            path = self.plotter.plot_performance_curve(report.curve, "Performance Curves", "performance_curve.png")
            print(f"\n  Plot saved: {path}")
            if report.pem_results is not None:
                path = self.plotter.plot_stack_comparison(report.pem_results, "PEM Stack: Metal vs Carbon Plates",
                                                          "stack_comparison.png")
                print(f"  Plot saved: {path}")

        return report

    def run_batch(self, points: Sequence[FuelCellInputs]) -> pd.DataFrame:
        """Computes the core results for each operating point and prints one row per point."""
        rows = []
        for inputs in points:
            results = self.solver.compute_core(inputs)
            row = {'voltage': inputs.voltage, 'current': inputs.current, 'active_area': inputs.active_area,
                   'fuel_cell_type': inputs.fuel_cell_type.value}
            row.update(results.to_dict())
            rows.append(row)

        table = pd.DataFrame(rows)
        print(f"--- Batch Results ({len(table)} operating point(s)) ---")
        print(table.to_string(index=False))
        return table

    @staticmethod
    def _print_rows(rows) -> None:
        for label, value, unit in rows:
            print(f"  {label}: {value} {unit}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Steady-state fuel cell performance calculator")
    parser.add_argument("-c", "--config", help="YAML file overriding constants and defaults")
    parser.add_argument("--case", help="YAML calculation case (operating_conditions, pem_inputs)")
    parser.add_argument("--batch", help="CSV file of operating points")
    parser.add_argument("--plot-dir", help="Directory to save charts to")
    parser.add_argument("--validate", action="store_true",
                        help="Reject degenerate inputs instead of reporting inf/nan")
    parser.add_argument("--log-level", default="WARNING", type=str.upper,
                        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
                        help="Logging level (default: %(default)s)")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=args.log_level, format="%(levelname)s %(name)s: %(message)s")

    try:
        app = Main(config_path=args.config, validate=args.validate, plot_dir=args.plot_dir)
        if args.batch:
            app.run_batch(app.data_loader.load_operating_points(args.batch))
        elif args.case:
            inputs, pem_inputs = app.data_loader.load_case(args.case)
            app.run_case(inputs, pem_inputs)
        else:
            app.run_case(app.default_inputs())
    except InvalidInputError as e:
        print(f"Error: invalid input {e}")
        return 1
    except (FileNotFoundError, ValueError) as e:
        print(f"Error: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())

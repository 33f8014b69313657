"""
Result export module for the Tabu VRP solver.
Exports convergence history, routes and run summaries for analysis.
"""

import json
import logging
import os
from datetime import datetime
from typing import List, Dict, Optional

import pandas as pd

from tabu_vrp.models.solution import Solution
from tabu_vrp.models.vrp_model import VRPProblem

logger = logging.getLogger(__name__)


class ResultExporter:
    """Exports tabu search results in various formats."""

    def __init__(self, output_dir: str = "results"):
        """
        Initialize result exporter.

        Args:
            output_dir: Output directory for results
        """
        self.output_dir = output_dir
        self.timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        os.makedirs(self.output_dir, exist_ok=True)

    def export_history(self, history: List[Dict], filename: Optional[str] = None) -> str:
        """
        Export per-iteration search history to CSV.

        Args:
            history: Iteration records produced by TabuSearch
            filename: Output filename (auto-generated if None)

        Returns:
            Path to exported file
        """
        if filename is None:
            filename = f"convergence_{self.timestamp}.csv"

        filepath = os.path.join(self.output_dir, filename)
        columns = ['iteration', 'best_cost', 'candidate_cost', 'generated',
                   'filtered', 'tabu_size', 'improved']
        df = pd.DataFrame(history)
        if df.empty:
            df = pd.DataFrame(columns=columns)
        df.to_csv(filepath, index=False)

        logger.info(f"Convergence history exported to: {filepath}")
        return filepath

    def export_routes(self, solution: Solution, problem: VRPProblem,
                      filename: Optional[str] = None) -> str:
        """
        Export routes to a human-readable text file.

        Args:
            solution: Solution to export
            problem: VRP problem instance
            filename: Output filename (auto-generated if None)

        Returns:
            Path to exported file
        """
        if filename is None:
            filename = f"routes_{self.timestamp}.txt"

        filepath = os.path.join(self.output_dir, filename)
        depot = problem.depot_id

        lines = [
            f"Instance: {problem.name}",
            f"Vehicle capacity: {problem.vehicle_capacity}",
            f"Total distance: {solution.global_cost:.2f}",
            f"Routes used: {solution.n_routes_used()}",
            "",
        ]
        route_number = 0
        for route in solution.routes:
            if route.is_empty():
                continue
            route_number += 1
            path = " -> ".join(str(c) for c in [depot] + route.customers + [depot])
            lines.append(
                f"Route {route_number}: {path} "
                f"(distance={route.total_length:.2f}, load={route.load}/{route.vehicle.capacity:g})"
            )

        with open(filepath, 'w', encoding='utf-8') as f:
            f.write("\n".join(lines) + "\n")

        logger.info(f"Routes exported to: {filepath}")
        return filepath

    def export_summary(self, solution: Solution, problem: VRPProblem,
                       statistics: Dict, config: Dict,
                       initial: Optional[Solution] = None,
                       filename: Optional[str] = None) -> str:
        """
        Export run summary (problem, parameters, statistics, solution) to JSON.

        Returns:
            Path to exported file
        """
        if filename is None:
            filename = f"summary_{self.timestamp}.json"

        filepath = os.path.join(self.output_dir, filename)
        summary = {
            'timestamp': self.timestamp,
            'problem': problem.get_problem_info(),
            'config': {k: _jsonable(v) for k, v in config.items()},
            'statistics': {k: _jsonable(v) for k, v in statistics.items()},
            'solution': solution.to_dict(),
        }
        if initial is not None:
            summary['initial_cost'] = float(initial.global_cost)
            if initial.global_cost > 0:
                summary['improvement_percent'] = float(
                    (initial.global_cost - solution.global_cost) / initial.global_cost * 100
                )

        with open(filepath, 'w', encoding='utf-8') as f:
            json.dump(summary, f, indent=2)

        logger.info(f"Summary exported to: {filepath}")
        return filepath

    def export_comparison(self, solutions: Dict[str, Solution],
                          filename: Optional[str] = None) -> str:
        """
        Export a KPI table comparing several solutions to CSV.

        Args:
            solutions: Label -> solution
            filename: Output filename (auto-generated if None)

        Returns:
            Path to exported file
        """
        if filename is None:
            filename = f"comparison_{self.timestamp}.csv"

        filepath = os.path.join(self.output_dir, filename)
        rows = []
        for label, solution in solutions.items():
            lengths = [r.total_length for r in solution.routes if not r.is_empty()]
            rows.append({
                'solution': label,
                'total_distance': solution.global_cost,
                'num_routes': solution.n_routes_used(),
                'avg_route_length': sum(lengths) / len(lengths) if lengths else 0.0,
                'is_feasible': solution.is_feasible(),
            })

        pd.DataFrame(rows).to_csv(filepath, index=False)
        logger.info(f"Comparison exported to: {filepath}")
        return filepath


def _jsonable(value):
    """Convert enums and numpy scalars to plain JSON values."""
    if hasattr(value, 'value') and not isinstance(value, (int, float, str, bool)):
        return value.value
    if hasattr(value, 'item'):
        return value.item()
    if isinstance(value, tuple):
        return list(value)
    return value

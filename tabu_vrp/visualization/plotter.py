"""
Plotting utilities for tabu search analysis.
Creates route maps and convergence plots.
"""

import matplotlib.pyplot as plt
import seaborn as sns
import numpy as np
from typing import List, Dict, Optional

from tabu_vrp.models.solution import Solution
from tabu_vrp.models.vrp_model import VRPProblem
from tabu_vrp.config import VIZ_CONFIG


class Plotter:
    """Creates plots for tabu search results."""

    def __init__(self, config: Optional[Dict] = None):
        """
        Initialize plotter.

        Args:
            config: Visualization configuration
        """
        self.config = config or VIZ_CONFIG.copy()

        plt.style.use('default')
        sns.set_palette("husl")

        self.fig_size = self.config['figure_size']
        self.dpi = self.config['dpi']
        self.font_size = self.config['font_size']
        self.marker_size = self.config['marker_size']
        self.line_width = self.config['line_width']

    def plot_routes(self, solution: Solution, problem: VRPProblem,
                    title: str = "Tabu Search Routes",
                    save_path: Optional[str] = None) -> plt.Figure:
        """
        Draw every non-empty route as a closed tour through the depot.

        Args:
            solution: Solution to draw
            problem: VRP problem instance (coordinates)
            title: Plot title
            save_path: Optional path to save plot

        Returns:
            Matplotlib figure
        """
        fig, ax = plt.subplots(figsize=self.fig_size)
        depot = problem.depot
        routes = [r for r in solution.routes if not r.is_empty()]
        colors = sns.color_palette("husl", max(len(routes), 1))

        for index, route in enumerate(routes):
            points = [(depot.x, depot.y)]
            for customer_id in route.customers:
                customer = problem.get_customer_by_id(customer_id)
                points.append((customer.x, customer.y))
            points.append((depot.x, depot.y))

            xs, ys = zip(*points)
            ax.plot(xs, ys, '-', color=colors[index], linewidth=self.line_width,
                    label=f"Route {index + 1} ({route.total_length:.1f})")
            ax.scatter(xs[1:-1], ys[1:-1], color=colors[index], s=self.marker_size, zorder=3)

        ax.scatter([depot.x], [depot.y], marker='s', color='black',
                   s=self.marker_size * 2, zorder=4, label='Depot')

        ax.set_title(f"{title} - distance {solution.global_cost:.2f}", fontsize=self.font_size)
        ax.set_xlabel('X', fontsize=self.font_size)
        ax.set_ylabel('Y', fontsize=self.font_size)
        if len(routes) <= 12:
            ax.legend(fontsize=self.font_size - 2, loc='best')
        ax.grid(True, alpha=0.3)

        plt.tight_layout()

        if save_path:
            plt.savefig(save_path, dpi=self.dpi, bbox_inches='tight')

        return fig

    def plot_convergence(self, history: List[Dict],
                         title: str = "Tabu Search Convergence",
                         save_path: Optional[str] = None) -> plt.Figure:
        """
        Plot best and selected candidate cost per iteration, plus tabu size.

        Args:
            history: Iteration records produced by TabuSearch
            title: Plot title
            save_path: Optional path to save plot

        Returns:
            Matplotlib figure
        """
        iterations = [h['iteration'] for h in history]
        best_cost = [h['best_cost'] for h in history]
        # Skipped iterations have no selected candidate
        candidate_cost = [
            np.nan if h['candidate_cost'] is None else h['candidate_cost'] for h in history
        ]
        tabu_size = [h['tabu_size'] for h in history]

        fig, (ax1, ax2) = plt.subplots(2, 1, figsize=self.fig_size, sharex=True)

        ax1.plot(iterations, candidate_cost, '.', color='gray', alpha=0.5,
                 label='Selected candidate')
        ax1.plot(iterations, best_cost, 'b-', linewidth=2, label='Best')
        ax1.set_ylabel('Total distance', fontsize=self.font_size)
        ax1.set_title(title, fontsize=self.font_size)
        ax1.legend()
        ax1.grid(True, alpha=0.3)

        ax2.plot(iterations, tabu_size, 'r-', linewidth=1.5)
        ax2.set_xlabel('Iteration', fontsize=self.font_size)
        ax2.set_ylabel('Tabu size', fontsize=self.font_size)
        ax2.grid(True, alpha=0.3)

        plt.tight_layout()

        if save_path:
            plt.savefig(save_path, dpi=self.dpi, bbox_inches='tight')

        return fig

    def close(self, fig: plt.Figure):
        plt.close(fig)

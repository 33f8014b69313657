"""
Tabu search on a single giant route.
The route is optimized without capacity, split under the real capacity,
and optionally optimized again as a multi-route solution.
"""

import logging
from typing import Dict, List, Optional

from tabu_vrp.algorithms.types import Transformation, NeighborhoodKind
from tabu_vrp.algorithms.tabu_search import TabuSearch
from tabu_vrp.algorithms.split import SplitAlgorithm
from tabu_vrp.core.exceptions import InvalidSingleRouteInputError
from tabu_vrp.models.solution import Solution

logger = logging.getLogger(__name__)


class SingleRouteTabuSearch:
    """Relax, search, split and optionally search again."""

    def __init__(self, config: Optional[Dict] = None, seed: Optional[int] = None):
        """
        Initialize single-route search.

        Args:
            config: Tabu parameters overriding TABU_CONFIG (double_pass included)
            seed: Random seed
        """
        self.searcher = TabuSearch(config, seed=seed)
        self.double_pass = bool(self.searcher.config.get('double_pass', False))
        self.relaxed_solution: Optional[Solution] = None
        self.split_solution: Optional[Solution] = None
        self.best_solution: Optional[Solution] = None
        self.pass_histories: List[List[Dict]] = []
        self.pass_statistics: List[Dict] = []

    def run(self, initial: Solution) -> Solution:
        """
        Run the search on a solution made of exactly one route.

        Args:
            initial: Single-route solution (not modified)

        Returns:
            Capacity-feasible solution

        Raises:
            InvalidSingleRouteInputError: Input does not hold exactly one route
            SubdivisionFailedError: The optimized route cannot be split
        """
        if len(initial.routes) != 1:
            raise InvalidSingleRouteInputError(len(initial.routes))

        route = initial.routes[0]
        vehicle = route.vehicle.restricted()

        relaxed = initial.copy()
        relaxed.routes[0].vehicle = vehicle.relaxed()
        relaxed.recompute_global_cost()

        self.pass_histories = []
        self.pass_statistics = []
        logger.info("Single-route search: optimizing relaxed giant route")
        self.relaxed_solution = self.searcher.run(relaxed)
        self.pass_histories.append(list(self.searcher.history))
        self.pass_statistics.append(self.searcher.get_statistics())

        splitter = SplitAlgorithm(route.problem)
        self.split_solution = splitter.subdivide(self.relaxed_solution, vehicle)
        logger.info(
            f"Giant route split into {self.split_solution.n_routes_used()} routes, "
            f"cost={self.split_solution.global_cost:.2f}"
        )

        if not self.double_pass:
            self.best_solution = self.split_solution
            return self.split_solution

        logger.info("Single-route search: second pass on split solution")
        self.best_solution = self.searcher.run(self.split_solution)
        self.pass_histories.append(list(self.searcher.history))
        self.pass_statistics.append(self.searcher.get_statistics())
        return self.best_solution

    def combined_history(self) -> List[Dict]:
        """History of all passes, tagged with the pass number."""
        combined = []
        for pass_number, history in enumerate(self.pass_histories, start=1):
            for entry in history:
                combined.append(dict(entry, **{'pass': pass_number}))
        return combined

    def get_statistics(self) -> Dict:
        """
        Statistics of all passes combined.

        Counters and execution time are summed. `initial_cost` comes from the
        first pass and `best_cost` is the cost of the returned solution;
        iteration numbers count across passes.
        """
        if not self.pass_statistics:
            return {}

        stats = {
            'passes': len(self.pass_statistics),
            'initial_cost': self.pass_statistics[0]['initial_cost'],
            'best_cost': self.best_solution.global_cost,
            'tabu_size': self.pass_statistics[-1]['tabu_size'],
            'last_improvement_iteration': None,
        }
        if self.split_solution is not None:
            stats['split_cost'] = self.split_solution.global_cost

        offset = 0
        for pass_stats in self.pass_statistics:
            for key in ('iterations', 'improvements', 'skipped_iterations',
                        'candidates_generated', 'candidates_filtered', 'execution_time'):
                stats[key] = stats.get(key, 0) + pass_stats[key]
            if pass_stats['last_improvement_iteration'] is not None:
                stats['last_improvement_iteration'] = offset + pass_stats['last_improvement_iteration']
            offset += pass_stats['iterations']
        return stats


def tabu_single_route(initial: Solution,
                      tabu_capacity: int,
                      max_iterations: int,
                      neighborhood_size: int,
                      transformation: Transformation = Transformation.SWAP,
                      kind: NeighborhoodKind = NeighborhoodKind.BASIC,
                      double_pass: bool = False,
                      seed: Optional[int] = None,
                      **options) -> Solution:
    """
    Convenience function to run the single-route search.

    Args:
        initial: Solution holding exactly one route
        tabu_capacity: Maximum tabu memory size (T)
        max_iterations: Iterations per pass (M)
        neighborhood_size: Candidates per iteration (N)
        transformation: Route transformation
        kind: Neighborhood kind
        double_pass: Run a second tabu pass after the split
        seed: Random seed
        **options: Other TABU_CONFIG overrides

    Returns:
        Best solution found
    """
    config = dict(options)
    config.update({
        'tabu_capacity': tabu_capacity,
        'max_iterations': max_iterations,
        'neighborhood_size': neighborhood_size,
        'transformation': transformation,
        'neighborhood_kind': kind,
        'double_pass': double_pass,
    })
    return SingleRouteTabuSearch(config, seed=seed).run(initial)

"""
Neighborhood generation for the tabu search.
Builds basic (per-route) and complex (cross-route) candidate lists.
"""

import logging
import random
from typing import List, Optional

from tabu_vrp.algorithms.types import Transformation, NeighborhoodKind
from tabu_vrp.algorithms.route_transformer import RouteTransformer
from tabu_vrp.algorithms.cross_route import CrossRouteTransformer
from tabu_vrp.core.exceptions import UnhandledTransformationError, UnhandledNeighborhoodKindError
from tabu_vrp.models.solution import Solution, Route

logger = logging.getLogger(__name__)


class NeighborhoodBuilder:
    """Generates candidate solutions around a current solution."""

    def __init__(self, rng: Optional[random.Random] = None,
                 meta_exchange_attempts: int = 40,
                 meta_exchange_probability: float = 0.5):
        """
        Initialize neighborhood builder.

        Args:
            rng: Random generator shared by both transformers
            meta_exchange_attempts: Exchanges tried per route pair (complex neighborhood)
            meta_exchange_probability: Chance of meta-exchange instead of 2-opt per route
        """
        self.rng = rng or random.Random()
        self.route_transformer = RouteTransformer(self.rng)
        self.cross_transformer = CrossRouteTransformer(self.rng)
        self.meta_exchange_attempts = meta_exchange_attempts
        self.meta_exchange_probability = meta_exchange_probability

    def neighborhood(self, current: Solution, transformation: Transformation,
                     kind: NeighborhoodKind, size: int,
                     previous_best: Optional[Solution] = None) -> List[Solution]:
        """
        Generate `size` candidate solutions, in generation order.

        Args:
            current: Solution to explore around (never modified)
            transformation: Transformation applied to the routes
            kind: Basic or complex neighborhood
            size: Number of candidates
            previous_best: Copy of the last improving solution (complex only)

        Returns:
            List of deep-copied candidate solutions

        Raises:
            UnhandledNeighborhoodKindError: Unknown kind
            UnhandledTransformationError: Unknown transformation, or complex with non-swap
        """
        kind = NeighborhoodKind.parse(kind)
        transformation = Transformation.parse(transformation)

        if kind is NeighborhoodKind.BASIC:
            return self.basic_neighborhood(current, transformation, size)
        if kind is NeighborhoodKind.COMPLEX:
            return self.complex_neighborhood(current, transformation, size, previous_best)
        raise UnhandledNeighborhoodKindError(kind)

    def basic_neighborhood(self, current: Solution, transformation: Transformation,
                           size: int) -> List[Solution]:
        """Apply the transformation once to every route of a fresh copy, `size` times."""
        minimum = RouteTransformer.minimum_size(transformation)
        neighbors = []

        for _ in range(size):
            neighbor = current.copy()
            for index, route in enumerate(neighbor.routes):
                if len(route) < minimum:
                    continue
                neighbor.routes[index] = self.route_transformer.apply(route, transformation)
            neighbor.recompute_global_cost()
            neighbors.append(neighbor)

        return neighbors

    def complex_neighborhood(self, current: Solution, transformation: Transformation,
                             size: int, previous_best: Optional[Solution]) -> List[Solution]:
        """
        Mix cross-route exchanges guided by `previous_best` with 2-opt.

        For each route, with probability `meta_exchange_probability` (and only
        when a previous best exists) every route of the previous best picks the
        sibling route of the candidate that shares most customers with it, and
        customers are exchanged with that sibling. Otherwise, or when no sibling
        exists (single-route solutions), the route is replaced by its 2-opt
        improvement with swap as fallback.
        """
        if transformation is not Transformation.SWAP:
            raise UnhandledTransformationError(
                transformation, NeighborhoodKind.COMPLEX,
                reason="complex neighborhood only supports swap"
            )

        two_opt_minimum = RouteTransformer.minimum_size(Transformation.TWO_OPT)
        has_partner = previous_best is not None and len(previous_best.routes) > 0
        neighbors = []

        for _ in range(size):
            neighbor = current.copy()
            for index in range(len(neighbor.routes)):
                route = neighbor.routes[index]
                exchanged = False
                if self.rng.random() < self.meta_exchange_probability and has_partner:
                    for partner_route in previous_best.routes:
                        sibling = self._corresponding_route(neighbor, route, partner_route)
                        if sibling is not None:
                            self.cross_transformer.meta_exchange(
                                route, sibling, self.meta_exchange_attempts
                            )
                            exchanged = True
                if not exchanged and len(route) >= two_opt_minimum:
                    neighbor.routes[index] = self.route_transformer.two_opt(
                        route, fallback=Transformation.SWAP
                    )
            neighbor.recompute_global_cost()
            neighbors.append(neighbor)

        return neighbors

    @staticmethod
    def _corresponding_route(solution: Solution, route: Route,
                             partner_route: Route) -> Optional[Route]:
        """Route of `solution` (other than `route`) sharing most customers with `partner_route`."""
        partner_customers = set(partner_route.customers)
        best_route = None
        best_overlap = 0
        for other in solution.routes:
            if other is route:
                continue
            overlap = len(partner_customers.intersection(other.customers))
            if overlap > best_overlap:
                best_route = other
                best_overlap = overlap
        return best_route

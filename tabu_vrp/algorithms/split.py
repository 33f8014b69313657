"""
Optimal Split Algorithm for giant tours.
Implements the Prins (2004) split to subdivide a single route under capacity.
"""

import logging
from typing import List, Tuple, Optional

from tabu_vrp.core.exceptions import SubdivisionFailedError
from tabu_vrp.models.vrp_model import VRPProblem, Vehicle
from tabu_vrp.models.solution import Solution

logger = logging.getLogger(__name__)


class SplitAlgorithm:
    """
    Optimal split algorithm for giant tour (Prins 2004).

    Uses dynamic programming over the tour positions to cut the giant tour
    into consecutive, capacity-feasible routes of minimum total length.
    The visiting order is never changed.
    """

    def __init__(self, problem: VRPProblem):
        """
        Initialize split algorithm.

        Args:
            problem: VRP problem instance
        """
        self.problem = problem

    def split(self, giant_tour: List[int],
              capacity: Optional[float] = None) -> Tuple[List[List[int]], float]:
        """
        Split giant tour into optimal routes (Bellman recursion).

        Args:
            giant_tour: Customer IDs, depot excluded
            capacity: Capacity per route (problem capacity if None)

        Returns:
            Tuple of (routes, total_cost)

        Raises:
            SubdivisionFailedError: A single customer exceeds the capacity
        """
        if not giant_tour:
            return [], 0.0

        capacity = self.problem.vehicle_capacity if capacity is None else capacity
        depot = self.problem.depot_id
        n = len(giant_tour)

        for customer_id in giant_tour:
            if self.problem.get_demand(customer_id) > capacity:
                raise SubdivisionFailedError(
                    reason=f"customer {customer_id} demand exceeds capacity {capacity}",
                    customer_id=customer_id
                )

        # V[j] = cost of the best split of the first j customers
        V = [0.0] + [float('inf')] * n
        pred = [0] * (n + 1)

        for i in range(n):
            load = 0
            route_cost = 0.0
            prev_customer = depot

            for j in range(i + 1, n + 1):
                customer_id = giant_tour[j - 1]
                load += self.problem.get_demand(customer_id)
                if load > capacity:
                    break

                if j == i + 1:
                    route_cost = (self.problem.get_distance(depot, customer_id)
                                  + self.problem.get_distance(customer_id, depot))
                else:
                    route_cost += (self.problem.get_distance(prev_customer, customer_id)
                                   + self.problem.get_distance(customer_id, depot)
                                   - self.problem.get_distance(prev_customer, depot))
                prev_customer = customer_id

                if V[i] + route_cost < V[j]:
                    V[j] = V[i] + route_cost
                    pred[j] = i

        routes = []
        j = n
        while j > 0:
            i = pred[j]
            routes.append(giant_tour[i:j])
            j = i
        routes.reverse()

        return routes, V[n]

    def subdivide(self, solution: Solution, vehicle: Optional[Vehicle] = None) -> Solution:
        """
        Subdivide a single-route solution into capacity-feasible routes.

        Args:
            solution: Solution holding exactly one route
            vehicle: Capacitated vehicle for the new routes (problem default if None)

        Returns:
            New solution whose routes carry `vehicle`

        Raises:
            SubdivisionFailedError: Input is not a single route or cannot be split
        """
        if len(solution.routes) != 1:
            raise SubdivisionFailedError(
                reason=f"expected a single route, got {len(solution.routes)}"
            )

        vehicle = (vehicle or self.problem.default_vehicle()).restricted()
        routes, cost = self.split(solution.routes[0].customers, vehicle.capacity)
        logger.debug(f"Split giant route into {len(routes)} routes, cost={cost:.2f}")

        return Solution.from_sequences(self.problem, routes, vehicle)

"""
Initial solution construction for the tabu search.
Provides random, nearest-neighbor and single giant route starting points.
"""

import logging
import random
from typing import List, Optional

from tabu_vrp.algorithms.types import GenerationMethod
from tabu_vrp.models.vrp_model import VRPProblem
from tabu_vrp.models.solution import Solution

logger = logging.getLogger(__name__)


class InitialSolutionBuilder:
    """Builds starting solutions for a VRP problem."""

    def __init__(self, problem: VRPProblem, rng: Optional[random.Random] = None):
        """
        Initialize builder.

        Args:
            problem: VRP problem instance
            rng: Random generator (new one if None)
        """
        self.problem = problem
        self.rng = rng or random.Random()

    def build(self, method: GenerationMethod = GenerationMethod.RANDOM) -> Solution:
        """
        Build an initial solution.

        Args:
            method: random, greedy or random_single

        Returns:
            New solution covering every customer exactly once
        """
        method = GenerationMethod.parse(method)

        if method is GenerationMethod.RANDOM:
            solution = self.random_solution()
        elif method is GenerationMethod.GREEDY:
            solution = self.nearest_neighbor_solution()
        else:
            solution = self.single_route_solution()

        logger.info(f"Initial solution ({method.value}): {solution.summary()}")
        return solution

    def random_solution(self) -> Solution:
        """Shuffle the customers and cut a new route whenever capacity would be exceeded."""
        order = self.problem.customer_ids()
        self.rng.shuffle(order)
        return Solution.from_sequences(self.problem, self._cut_by_capacity(order))

    def nearest_neighbor_solution(self) -> Solution:
        """
        Build routes using Nearest Neighbor.

        Each route starts at the depot and repeatedly visits the closest
        unvisited customer that still fits; a new route is opened when none fits.
        """
        depot = self.problem.depot_id
        capacity = self.problem.vehicle_capacity
        unvisited = self.problem.customer_ids()
        routes = []

        while unvisited:
            route = []
            current_load = 0
            current_location = depot

            while unvisited:
                nearest_customer = None
                nearest_distance = float('inf')

                for customer_id in unvisited:
                    demand = self.problem.get_demand(customer_id)
                    if current_load + demand <= capacity:
                        distance = self.problem.get_distance(current_location, customer_id)
                        if distance < nearest_distance:
                            nearest_distance = distance
                            nearest_customer = customer_id

                if nearest_customer is None:
                    break  # No more customers fit

                route.append(nearest_customer)
                current_load += self.problem.get_demand(nearest_customer)
                current_location = nearest_customer
                unvisited.remove(nearest_customer)

            routes.append(route)

        return Solution.from_sequences(self.problem, routes)

    def single_route_solution(self) -> Solution:
        """All customers in random order on one uncapacitated route."""
        order = self.problem.customer_ids()
        self.rng.shuffle(order)
        vehicle = self.problem.default_vehicle().relaxed()
        return Solution.from_sequences(self.problem, [order], vehicle)

    def _cut_by_capacity(self, order: List[int]) -> List[List[int]]:
        routes = []
        current: List[int] = []
        load = 0
        for customer_id in order:
            demand = self.problem.get_demand(customer_id)
            if current and load + demand > self.problem.vehicle_capacity:
                routes.append(current)
                current = []
                load = 0
            current.append(customer_id)
            load += demand
        if current:
            routes.append(current)
        return routes

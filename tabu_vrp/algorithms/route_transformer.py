"""
Intra-route transformations: swap, shift-insert, inversion and 2-opt.
Swap, shift-insert and inversion mutate the route in place; 2-opt returns a new route.
Every transformation rejects a result that overloads a capacitated vehicle.
"""

import random
from typing import List, Optional

import numpy as np

from tabu_vrp.algorithms.types import Transformation
from tabu_vrp.core.exceptions import (
    RouteTooSmallError, CapacityExceededError, EmptyClientListError, UnhandledTransformationError
)
from tabu_vrp.models.solution import Route


# Minimum number of customers each transformation needs
MINIMUM_SIZES = {
    Transformation.SWAP: 2,
    Transformation.SHIFT_INSERT: 1,
    Transformation.INVERSION: 2,
    Transformation.TWO_OPT: 4,
}

# A 2-opt move must beat the current tour by more than this to count as improving
IMPROVEMENT_EPSILON = 1e-9


class RouteTransformer:
    """Applies local transformations to a single route."""

    def __init__(self, rng: Optional[random.Random] = None):
        """
        Initialize transformer.

        Args:
            rng: Random generator shared with the caller (new one if None)
        """
        self.rng = rng or random.Random()

    @staticmethod
    def minimum_size(transformation: Transformation) -> int:
        """Minimum route size accepted by a transformation."""
        return MINIMUM_SIZES[Transformation.parse(transformation)]

    def _require_size(self, route: Route, transformation: Transformation):
        minimum = MINIMUM_SIZES[transformation]
        if len(route) < minimum:
            raise RouteTooSmallError(transformation.value, len(route), minimum)

    @staticmethod
    def _require_capacity(route: Route, transformation: Transformation):
        if not route.is_feasible():
            raise CapacityExceededError(route.load, route.vehicle.capacity, transformation.value)

    def apply(self, route: Route, transformation: Transformation) -> Route:
        """
        Apply one transformation to a route.

        Args:
            route: Route to transform
            transformation: Transformation to apply

        Returns:
            The transformed route (the same object except for 2-opt)
        """
        transformation = Transformation.parse(transformation)
        if transformation is Transformation.SWAP:
            return self.swap(route)
        if transformation is Transformation.SHIFT_INSERT:
            return self.shift_insert(route)
        if transformation is Transformation.INVERSION:
            return self.inversion(route)
        if transformation is Transformation.TWO_OPT:
            return self.two_opt(route)
        raise UnhandledTransformationError(transformation)

    def swap(self, route: Route, i: Optional[int] = None, j: Optional[int] = None) -> Route:
        """
        Exchange the customers at two distinct positions.

        Args:
            route: Route to modify in place
            i, j: Positions to exchange (drawn uniformly if omitted)

        Returns:
            The modified route

        Raises:
            RouteTooSmallError: Route has fewer than 2 customers
            CapacityExceededError: Route load exceeds a capacitated vehicle
        """
        self._require_size(route, Transformation.SWAP)
        if i is None or j is None:
            i, j = self.rng.sample(range(len(route)), 2)
        if i == j:
            raise ValueError("Swap positions must be distinct")

        customers = route.customers
        customers[i], customers[j] = customers[j], customers[i]
        route.recompute()
        self._require_capacity(route, Transformation.SWAP)
        return route

    def shift_insert(self, route: Route, i: Optional[int] = None, j: Optional[int] = None) -> Route:
        """
        Remove the customer at position i and reinsert it at position j.

        j ranges over [0, n-1] of the shortened list, so i == j is a no-op.
        """
        self._require_size(route, Transformation.SHIFT_INSERT)
        n = len(route)
        if i is None:
            i = self.rng.randrange(n)
        customer = route.customers.pop(i)
        if j is None:
            j = self.rng.randrange(n)
        route.customers.insert(j, customer)
        route.recompute()
        self._require_capacity(route, Transformation.SHIFT_INSERT)
        return route

    def inversion(self, route: Route, i: Optional[int] = None, j: Optional[int] = None) -> Route:
        """Reverse the sub-sequence [i..j] (i < j)."""
        self._require_size(route, Transformation.INVERSION)
        if i is None or j is None:
            i, j = sorted(self.rng.sample(range(len(route)), 2))
        if i >= j:
            raise ValueError("Inversion requires i < j")

        route.customers[i:j + 1] = route.customers[i:j + 1][::-1]
        route.recompute()
        self._require_capacity(route, Transformation.INVERSION)
        return route

    def two_opt(self, route: Route,
                fallback: Transformation = Transformation.SWAP) -> Route:
        """
        Apply the best improving 2-opt move, or the fallback transformation.

        The tour depot, c1..cn, depot is scanned for every edge pair
        (i, i+1), (j, j+1) with i + 1 < j. Reversing positions i+1..j changes
        the two outer edges and flips the inner ones, which matters for
        asymmetric distances. Ties keep the smallest (i, j).

        Args:
            route: Route to improve (left untouched)
            fallback: Transformation applied once when no improving move exists

        Returns:
            New route

        Raises:
            RouteTooSmallError: Route has fewer than 4 customers
            EmptyClientListError: A move produced an empty visit list
            CapacityExceededError: No feasible move and the fallback is infeasible
        """
        self._require_size(route, Transformation.TWO_OPT)
        fallback = Transformation.parse(fallback)
        if fallback is Transformation.TWO_OPT:
            raise UnhandledTransformationError(fallback, reason="2-opt cannot be its own fallback")

        problem = route.problem
        customers = route.customers
        depot = problem.depot_id
        tour = [depot] + customers + [depot]
        m = len(tour)

        forward = np.array([problem.get_distance(tour[k], tour[k + 1]) for k in range(m - 1)])
        backward = np.array([problem.get_distance(tour[k + 1], tour[k]) for k in range(m - 1)])
        # flip_gain[k] - flip_gain[l] is the cost change of reversing edges l..k-1
        flip_gain = np.concatenate(([0.0], np.cumsum(backward - forward)))

        best_delta = -IMPROVEMENT_EPSILON
        best_customers: Optional[List[int]] = None

        for i in range(m - 3):
            for j in range(i + 2, m - 1):
                delta = (
                    problem.get_distance(tour[i], tour[j])
                    + problem.get_distance(tour[i + 1], tour[j + 1])
                    - forward[i] - forward[j]
                    + (flip_gain[j] - flip_gain[i + 1])
                )
                if delta < best_delta:
                    candidate = customers[:i] + customers[i:j][::-1] + customers[j:]
                    if not candidate:
                        raise EmptyClientListError("two_opt")
                    if not route.vehicle.can_carry(problem.route_load(candidate)):
                        continue
                    best_delta = float(delta)
                    best_customers = candidate

        if best_customers is not None:
            return route.with_customers(best_customers)

        # The fallback raises CapacityExceededError on an overloaded route
        result = route.copy()
        self.apply(result, fallback)
        return result

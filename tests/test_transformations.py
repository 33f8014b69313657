"""
Unit tests for intra-route and cross-route transformations.
"""

import math
import random
import unittest
from collections import Counter

import numpy as np

from tabu_vrp.algorithms.types import Transformation
from tabu_vrp.algorithms.route_transformer import RouteTransformer
from tabu_vrp.algorithms.cross_route import CrossRouteTransformer
from tabu_vrp.core.exceptions import (
    RouteTooSmallError, CapacityExceededError, UnhandledTransformationError
)
from tabu_vrp.models.vrp_model import Customer, Depot, VRPProblem
from tabu_vrp.models.solution import Route

NE, SW, NW, SE = 1, 2, 3, 4


def square_problem(capacity=10, demand=1):
    """Depot at the origin, one customer on each corner of a 2x2 square."""
    customers = [
        Customer(NE, 1, 1, demand),
        Customer(SW, -1, -1, demand),
        Customer(NW, -1, 1, demand),
        Customer(SE, 1, -1, demand),
    ]
    return VRPProblem(customers, Depot(0, 0, 0), capacity)


class TestRouteTransformer(unittest.TestCase):
    """Test swap, shift-insert, inversion and 2-opt."""

    def setUp(self):
        self.problem = square_problem()
        self.transformer = RouteTransformer(random.Random(7))

    def test_swap_reversibility(self):
        """Swapping the same positions twice restores the route."""
        route = Route(self.problem, [NE, SW, NW, SE])
        original_length = route.total_length

        self.transformer.swap(route, 0, 3)
        self.assertEqual(route.customers, [SE, SW, NW, NE])

        self.transformer.swap(route, 0, 3)
        self.assertEqual(route.customers, [NE, SW, NW, SE])
        self.assertAlmostEqual(route.total_length, original_length)

    def test_inversion_twice_restores(self):
        route = Route(self.problem, [NE, SW, NW, SE])
        self.transformer.inversion(route, 1, 3)
        self.assertEqual(route.customers, [NE, SE, NW, SW])
        self.transformer.inversion(route, 1, 3)
        self.assertEqual(route.customers, [NE, SW, NW, SE])

    def test_shift_insert(self):
        route = Route(self.problem, [NE, SW, NW, SE])
        self.transformer.shift_insert(route, 0, 2)
        self.assertEqual(route.customers, [SW, NW, NE, SE])

        self.transformer.shift_insert(route, 1, 1)
        self.assertEqual(route.customers, [SW, NW, NE, SE])

    def test_random_moves_preserve_customers(self):
        for transformation in (Transformation.SWAP, Transformation.SHIFT_INSERT,
                               Transformation.INVERSION):
            route = Route(self.problem, [NE, SW, NW, SE])
            for _ in range(20):
                self.transformer.apply(route, transformation)
                self.assertEqual(sorted(route.customers), [NE, SW, NW, SE])
                self.assertAlmostEqual(
                    route.total_length, self.problem.route_length(route.customers)
                )

    def test_route_too_small(self):
        single = Route(self.problem, [NE])
        with self.assertRaises(RouteTooSmallError):
            self.transformer.swap(single)
        with self.assertRaises(RouteTooSmallError):
            self.transformer.inversion(single)

        three = Route(self.problem, [NE, SW, NW])
        with self.assertRaises(RouteTooSmallError):
            self.transformer.two_opt(three)

    def test_two_opt_uncrosses_tour(self):
        """The crossed tour NE, SW, NW, SE becomes NE, NW, SW, SE."""
        route = Route(self.problem, [NE, SW, NW, SE])
        self.assertAlmostEqual(route.total_length, 6 * math.sqrt(2) + 2)

        improved = self.transformer.two_opt(route)

        self.assertEqual(improved.customers, [NE, NW, SW, SE])
        self.assertAlmostEqual(improved.total_length, 6 + 2 * math.sqrt(2))
        self.assertLess(improved.total_length, route.total_length)
        # Input route is left untouched
        self.assertEqual(route.customers, [NE, SW, NW, SE])

    def test_two_opt_falls_back_to_swap(self):
        """Without an improving move the fallback is applied to a copy."""
        route = Route(self.problem, [NE, NW, SW, SE])
        result = self.transformer.two_opt(route, fallback=Transformation.SWAP)

        self.assertIsNot(result, route)
        self.assertEqual(route.customers, [NE, NW, SW, SE])
        self.assertEqual(sorted(result.customers), [NE, SW, NW, SE])
        self.assertNotEqual(result.customers, route.customers)

    def test_two_opt_asymmetric_distances(self):
        """Reversing a segment accounts for the reversed inner edges."""
        matrix = np.array([
            [0, 1, 9, 9, 9],
            [9, 0, 1, 9, 9],
            [9, 9, 0, 1, 9],
            [9, 9, 9, 0, 1],
            [1, 9, 9, 9, 0],
        ], dtype=float)
        customers = [Customer(i, 0, 0, 1) for i in range(1, 5)]
        problem = VRPProblem(customers, Depot(0, 0, 0), 10, distance_matrix=matrix)

        # 0 -> 1 -> 3 -> 2 -> 4 -> 0 only becomes optimal as 1, 2, 3, 4
        route = Route(problem, [1, 3, 2, 4])
        improved = RouteTransformer(random.Random(0)).two_opt(route)
        self.assertEqual(improved.customers, [1, 2, 3, 4])
        self.assertAlmostEqual(improved.total_length, 5.0)

    def test_two_opt_capacity_exceeded(self):
        problem = square_problem(capacity=10, demand=3)
        route = Route(problem, [NE, SW, NW, SE])
        with self.assertRaises(CapacityExceededError):
            self.transformer.two_opt(route)

    def test_in_place_moves_reject_overloaded_route(self):
        problem = square_problem(capacity=10, demand=3)
        for transformation in (Transformation.SWAP, Transformation.SHIFT_INSERT,
                               Transformation.INVERSION):
            route = Route(problem, [NE, SW, NW, SE])
            with self.assertRaises(CapacityExceededError):
                self.transformer.apply(route, transformation)

    def test_in_place_moves_ignore_capacity_when_relaxed(self):
        problem = square_problem(capacity=10, demand=3)
        vehicle = problem.default_vehicle().relaxed()
        for transformation in (Transformation.SWAP, Transformation.SHIFT_INSERT,
                               Transformation.INVERSION):
            route = Route(problem, [NE, SW, NW, SE], vehicle)
            self.transformer.apply(route, transformation)
            self.assertEqual(route.load, 12)
            self.assertEqual(sorted(route.customers), [NE, SW, NW, SE])

    def test_two_opt_rejects_itself_as_fallback(self):
        route = Route(self.problem, [NE, NW, SW, SE])
        with self.assertRaises(UnhandledTransformationError):
            self.transformer.two_opt(route, fallback=Transformation.TWO_OPT)


class TestCrossRouteTransformer(unittest.TestCase):
    """Test meta-exchange between routes."""

    def setUp(self):
        rng = np.random.default_rng(3)
        coords = rng.uniform(0, 100, size=(12, 2))
        customers = [
            Customer(i + 1, float(coords[i, 0]), float(coords[i, 1]), int(d))
            for i, d in enumerate(rng.integers(1, 10, size=12))
        ]
        self.problem = VRPProblem(customers, Depot(0, 50, 50), 60)
        self.transformer = CrossRouteTransformer(random.Random(11))

    def test_meta_exchange_invariants(self):
        route_a = Route(self.problem, [1, 2, 3, 4, 5, 6])
        route_b = Route(self.problem, [7, 8, 9, 10, 11, 12])
        before = Counter(route_a.customers + route_b.customers)
        length_before = route_a.total_length + route_b.total_length

        accepted = self.transformer.meta_exchange(route_a, route_b, attempts=200)

        self.assertGreaterEqual(accepted, 0)
        self.assertEqual(Counter(route_a.customers + route_b.customers), before)
        self.assertLessEqual(route_a.total_length + route_b.total_length, length_before + 1e-9)
        self.assertTrue(route_a.is_feasible())
        self.assertTrue(route_b.is_feasible())
        self.assertAlmostEqual(route_a.total_length,
                               self.problem.route_length(route_a.customers))

    def test_meta_exchange_with_empty_route(self):
        route_a = Route(self.problem, [1, 2])
        route_b = Route(self.problem, [])
        self.assertEqual(self.transformer.meta_exchange(route_a, route_b), 0)
        self.assertEqual(route_a.customers, [1, 2])

    def test_meta_exchange_never_duplicates(self):
        route_a = Route(self.problem, [1, 2, 3])
        route_b = Route(self.problem, [1, 4])
        self.transformer.meta_exchange(route_a, route_b, attempts=100)
        self.assertEqual(len(set(route_a.customers)), len(route_a.customers))
        self.assertEqual(len(set(route_b.customers)), len(route_b.customers))

    def test_meta_exchange_requires_distinct_routes(self):
        route = Route(self.problem, [1, 2])
        with self.assertRaises(ValueError):
            self.transformer.meta_exchange(route, route)


if __name__ == '__main__':
    unittest.main()

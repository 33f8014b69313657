"""
Unit tests for neighborhood generation.
"""

import random
import unittest

from tabu_vrp.algorithms.types import Transformation, NeighborhoodKind
from tabu_vrp.algorithms.neighborhood import NeighborhoodBuilder
from tabu_vrp.core.exceptions import UnhandledTransformationError, UnhandledNeighborhoodKindError
from tabu_vrp.data_processing.generator import InstanceGenerator
from tabu_vrp.models.vrp_model import Customer, Depot, VRPProblem, create_vrp_problem_from_dict
from tabu_vrp.models.solution import Solution


class TestNeighborhoodBuilder(unittest.TestCase):
    """Test basic and complex neighborhoods."""

    def setUp(self):
        data = InstanceGenerator({'n_customers': 20, 'seed': 5}).generate(vehicle_capacity=200)
        self.problem = create_vrp_problem_from_dict(data)
        self.current = Solution.from_sequences(
            self.problem, [[1, 2, 3, 4, 5], [6, 7, 8, 9, 10, 11], [12, 13, 14], [15, 16, 17, 18, 19, 20]]
        )
        self.builder = NeighborhoodBuilder(random.Random(42))

    def _assert_consistent(self, candidate):
        self.assertEqual(candidate.customer_multiset(), self.current.customer_multiset())
        expected = sum(self.problem.route_length(r.customers) for r in candidate.routes)
        self.assertAlmostEqual(candidate.global_cost, expected)

    def test_basic_neighborhood_size_and_invariants(self):
        for transformation in Transformation:
            candidates = self.builder.neighborhood(
                self.current, transformation, NeighborhoodKind.BASIC, 8
            )
            self.assertEqual(len(candidates), 8)
            for candidate in candidates:
                self._assert_consistent(candidate)

    def test_empty_neighborhood(self):
        candidates = self.builder.neighborhood(
            self.current, Transformation.SWAP, NeighborhoodKind.BASIC, 0
        )
        self.assertEqual(candidates, [])

    def test_candidates_do_not_alias_current(self):
        snapshot = self.current.copy()
        candidates = self.builder.neighborhood(
            self.current, Transformation.INVERSION, NeighborhoodKind.BASIC, 3
        )
        candidates[0].routes[0].customers.reverse()
        candidates[0].routes[0].recompute()
        self.assertEqual(self.current, snapshot)
        self.assertIsNot(candidates[0].routes[0], self.current.routes[0])

    def test_small_routes_left_unchanged(self):
        """Routes below the transformation's minimum size are skipped."""
        current = Solution.from_sequences(self.problem, [[1], [2, 3, 4, 5, 6, 7]])
        candidates = self.builder.neighborhood(
            current, Transformation.TWO_OPT, NeighborhoodKind.BASIC, 5
        )
        for candidate in candidates:
            self.assertEqual(candidate.routes[0].customers, [1])

    def test_complex_neighborhood_preserves_customers(self):
        partner = self.current.copy()
        partner.routes[0].customers.reverse()
        partner.routes[0].recompute()
        partner.recompute_global_cost()

        builder = NeighborhoodBuilder(random.Random(3), meta_exchange_probability=1.0)
        candidates = builder.neighborhood(
            self.current, Transformation.SWAP, NeighborhoodKind.COMPLEX, 10, partner
        )
        self.assertEqual(len(candidates), 10)
        for candidate in candidates:
            self._assert_consistent(candidate)
            self.assertTrue(candidate.is_feasible())
        # Partner solution is never modified
        self.assertEqual(partner.routes[0].customers, [5, 4, 3, 2, 1])

    def test_complex_neighborhood_without_partner_uses_two_opt(self):
        builder = NeighborhoodBuilder(random.Random(3), meta_exchange_probability=1.0)
        candidates = builder.neighborhood(
            self.current, Transformation.SWAP, NeighborhoodKind.COMPLEX, 4, None
        )
        for candidate in candidates:
            self._assert_consistent(candidate)
            # Route of three customers is too short for 2-opt
            self.assertEqual(candidate.routes[2].customers, [12, 13, 14])

    def test_complex_single_route_always_transformed(self):
        """Without a sibling route to exchange with, the route still gets 2-opt."""
        current = Solution.from_sequences(
            self.problem, [list(range(1, 11))], self.problem.default_vehicle().relaxed()
        )
        partner = current.copy()
        builder = NeighborhoodBuilder(random.Random(5), meta_exchange_probability=1.0)
        candidates = builder.neighborhood(
            current, Transformation.SWAP, NeighborhoodKind.COMPLEX, 6, partner
        )
        self.assertEqual(len(candidates), 6)
        for candidate in candidates:
            self.assertNotEqual(candidate, current)
            self.assertEqual(candidate.customer_multiset(), current.customer_multiset())

    def test_complex_requires_swap(self):
        with self.assertRaises(UnhandledTransformationError):
            self.builder.neighborhood(
                self.current, Transformation.INVERSION, NeighborhoodKind.COMPLEX, 3
            )

    def test_unknown_kind_and_transformation(self):
        with self.assertRaises(UnhandledNeighborhoodKindError):
            self.builder.neighborhood(self.current, Transformation.SWAP, 'fancy', 3)
        with self.assertRaises(UnhandledTransformationError):
            self.builder.neighborhood(self.current, 'three_opt', NeighborhoodKind.BASIC, 3)

    def test_single_customer_route_every_transformation(self):
        customers = [Customer(1, 3, 4, 1)]
        problem = VRPProblem(customers, Depot(0, 0, 0), 10)
        current = Solution.from_sequences(problem, [[1]])
        for transformation in Transformation:
            candidates = self.builder.neighborhood(
                current, transformation, NeighborhoodKind.BASIC, 2
            )
            for candidate in candidates:
                self.assertEqual(candidate, current)
                self.assertAlmostEqual(candidate.global_cost, 10.0)


if __name__ == '__main__':
    unittest.main()

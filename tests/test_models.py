"""
Unit tests for the problem and solution model.
"""

import logging
import os
import tempfile
import unittest
import numpy as np

from tabu_vrp.models.vrp_model import (
    Customer, Depot, Vehicle, VRPProblem, create_vrp_problem_from_dict
)
from tabu_vrp.models.solution import Route, Solution
from tabu_vrp.core.exceptions import (
    ErrorKind, TabuVRPException, RouteTooSmallError, InvalidConfigurationError
)
from tabu_vrp.core.validators import ConfigValidator
from tabu_vrp.core.logger import setup_logger, get_logger
from tabu_vrp.config import TABU_CONFIG


class TestVRPModel(unittest.TestCase):
    """Test VRP model components."""

    def setUp(self):
        """Set up test data."""
        self.customers = [
            Customer(1, 3, 4, 5),
            Customer(2, 6, 8, 8),
            Customer(3, 0, 5, 12),
        ]
        self.depot = Depot(0, 0, 0)

    def test_customer_validation(self):
        """Negative demand is rejected."""
        with self.assertRaises(ValueError):
            Customer(1, 10, 20, -5)

    def test_euclidean_matrix(self):
        """Distances default to Euclidean with depot at index 0."""
        problem = VRPProblem(self.customers, self.depot, 20)
        self.assertAlmostEqual(problem.get_distance(0, 1), 5.0)
        self.assertAlmostEqual(problem.get_distance(1, 2), 5.0)
        self.assertAlmostEqual(problem.get_distance(2, 0), 10.0)
        self.assertAlmostEqual(problem.get_distance(3, 3), 0.0)

    def test_route_length(self):
        problem = VRPProblem(self.customers, self.depot, 20)
        self.assertAlmostEqual(problem.route_length([1, 2]), 5.0 + 5.0 + 10.0)
        self.assertEqual(problem.route_length([]), 0.0)
        self.assertEqual(problem.route_load([1, 3]), 17)

    def test_problem_validation(self):
        """Invalid instances are rejected."""
        with self.assertRaises(ValueError):
            VRPProblem([], self.depot, 20)
        with self.assertRaises(ValueError):
            VRPProblem(self.customers, self.depot, 0)
        with self.assertRaises(ValueError):
            VRPProblem(self.customers + [Customer(1, 1, 1, 1)], self.depot, 20)
        with self.assertRaises(ValueError):
            VRPProblem(self.customers, self.depot, 20, distance_matrix=np.zeros((2, 2)))
        # Customer 3 alone exceeds the capacity
        with self.assertRaises(ValueError):
            VRPProblem(self.customers, self.depot, 10)

    def test_create_from_dict(self):
        data = {
            'name': 'tiny',
            'customers': [
                {'id': 1, 'x': 1, 'y': 0, 'demand': 2},
                {'id': 2, 'x': 0, 'y': 1, 'demand': 3},
            ],
            'depot': {'id': 0, 'x': 0, 'y': 0},
            'vehicle_capacity': 10,
        }
        problem = create_vrp_problem_from_dict(data)
        self.assertEqual(problem.name, 'tiny')
        self.assertEqual(problem.customer_ids(), [1, 2])
        self.assertEqual(problem.calculate_total_demand(), 5)
        self.assertEqual(problem.estimate_minimum_vehicles(), 1)

    def test_vehicle_relaxation(self):
        vehicle = Vehicle(capacity=10)
        self.assertFalse(vehicle.can_carry(11))
        relaxed = vehicle.relaxed()
        self.assertTrue(relaxed.can_carry(1000))
        self.assertFalse(relaxed.restricted().can_carry(11))
        # Original vehicle is untouched
        self.assertFalse(vehicle.uncapacitated)


class TestSolutionModel(unittest.TestCase):
    """Test Route and Solution."""

    def setUp(self):
        customers = [Customer(i, float(i), 0.0, 4) for i in range(1, 6)]
        self.problem = VRPProblem(customers, Depot(0, 0, 0), 10)

    def test_route_cache(self):
        route = Route(self.problem, [1, 2])
        self.assertAlmostEqual(route.total_length, 4.0)
        self.assertEqual(route.load, 8)
        self.assertTrue(route.is_feasible())

        route.customers.append(3)
        route.recompute()
        self.assertAlmostEqual(route.total_length, 6.0)
        self.assertFalse(route.is_feasible())

    def test_route_rejects_duplicates(self):
        with self.assertRaises(ValueError):
            Route(self.problem, [1, 1])

    def test_route_copy_is_independent(self):
        route = Route(self.problem, [1, 2, 3])
        clone = route.copy()
        clone.customers.reverse()
        clone.recompute()
        self.assertEqual(route.customers, [1, 2, 3])
        self.assertEqual(clone.customers, [3, 2, 1])

    def test_solution_cost_and_idempotent_recompute(self):
        solution = Solution.from_sequences(self.problem, [[1, 2], [3], [4, 5]])
        expected = sum(self.problem.route_length(r.customers) for r in solution.routes)
        self.assertAlmostEqual(solution.global_cost, expected)
        first = solution.recompute_global_cost()
        second = solution.recompute_global_cost()
        self.assertEqual(first, second)

    def test_solution_equality(self):
        a = Solution.from_sequences(self.problem, [[1, 2], [3, 4, 5]])
        b = Solution.from_sequences(self.problem, [[1, 2], [3, 4, 5]])
        c = Solution.from_sequences(self.problem, [[2, 1], [3, 4, 5]])
        self.assertEqual(a, b)
        self.assertNotEqual(a, c)
        self.assertEqual(a.signature(), b.signature())

    def test_add_and_remove_route(self):
        solution = Solution.from_sequences(self.problem, [[1, 2]])
        route = Route(self.problem, [3])
        solution.add_route(route)
        self.assertAlmostEqual(solution.global_cost, 4.0 + 6.0)

        with self.assertRaises(ValueError):
            solution.add_route(Route(self.problem, [3]))

        solution.remove_route(route)
        self.assertEqual(len(solution), 1)
        self.assertAlmostEqual(solution.global_cost, 4.0)

    def test_solution_copy_is_deep(self):
        solution = Solution.from_sequences(self.problem, [[1, 2], [3, 4, 5]])
        clone = solution.copy()
        clone.routes[0].customers.reverse()
        clone.routes[0].recompute()
        clone.recompute_global_cost()
        self.assertEqual(solution.routes[0].customers, [1, 2])
        self.assertEqual(solution.customer_multiset(), clone.customer_multiset())

    def test_to_dict(self):
        solution = Solution.from_sequences(self.problem, [[1, 2], [3]])
        data = solution.to_dict()
        self.assertEqual(data['n_routes'], 2)
        self.assertEqual(data['routes'][0]['customers'], [1, 2])
        self.assertTrue(data['is_feasible'])


class TestExceptionsAndConfig(unittest.TestCase):
    """Test error tags and configuration validation."""

    def test_error_kind_tags(self):
        error = RouteTooSmallError("two_opt", 3, 4)
        self.assertIsInstance(error, TabuVRPException)
        self.assertIs(error.kind, ErrorKind.ROUTE_TOO_SMALL)
        self.assertEqual(error.details['minimum'], 4)
        self.assertIn("Details", str(error))

    def test_default_config_is_valid(self):
        self.assertTrue(ConfigValidator.validate_tabu_config(TABU_CONFIG))

    def test_invalid_config(self):
        config = TABU_CONFIG.copy()
        config['tabu_capacity'] = -1
        with self.assertRaises(InvalidConfigurationError):
            ConfigValidator.validate_tabu_config(config)

        config = TABU_CONFIG.copy()
        config['transformation'] = 'three_opt'
        with self.assertRaises(InvalidConfigurationError):
            ConfigValidator.validate_tabu_config(config)

        config = TABU_CONFIG.copy()
        del config['max_iterations']
        with self.assertRaises(InvalidConfigurationError):
            ConfigValidator.validate_tabu_config(config)

        with self.assertRaises(InvalidConfigurationError):
            ConfigValidator.validate_vrp_config({'vehicle_capacity': 0})

    def test_meta_exchange_parameter_types(self):
        for key, value in [('meta_exchange_probability', '0.5'),
                           ('meta_exchange_probability', True),
                           ('meta_exchange_probability', 1.5),
                           ('meta_exchange_attempts', True),
                           ('meta_exchange_attempts', 2.5)]:
            config = TABU_CONFIG.copy()
            config[key] = value
            with self.assertRaises(InvalidConfigurationError):
                ConfigValidator.validate_tabu_config(config)

        config = TABU_CONFIG.copy()
        config['meta_exchange_probability'] = 1
        self.assertTrue(ConfigValidator.validate_tabu_config(config))


class TestLogger(unittest.TestCase):
    """Test logger setup."""

    def test_setup_logger_with_file(self):
        with tempfile.TemporaryDirectory() as temp_dir:
            logger = setup_logger('tabu_vrp_test_file', log_file='run.log', log_dir=temp_dir)
            logger.info("hello")
            for handler in logger.handlers:
                handler.flush()
            self.assertTrue(os.path.exists(os.path.join(temp_dir, 'run.log')))
            self.assertEqual(len(logger.handlers), 2)

            # Handlers are not added twice
            self.assertIs(setup_logger('tabu_vrp_test_file', log_dir=temp_dir), logger)
            self.assertEqual(len(logger.handlers), 2)

            for handler in list(logger.handlers):
                handler.close()
                logger.removeHandler(handler)

    def test_get_logger_console_only(self):
        logger = get_logger('tabu_vrp_test_console')
        self.assertEqual(len(logger.handlers), 1)
        self.assertIsInstance(logger.handlers[0], logging.StreamHandler)


if __name__ == '__main__':
    unittest.main()

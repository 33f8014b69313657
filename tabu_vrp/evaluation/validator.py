"""
Solution validator for CVRP problems.
Validates solution feasibility and correctness.
"""

from typing import List, Dict, Tuple

from tabu_vrp.models.solution import Solution
from tabu_vrp.models.vrp_model import VRPProblem

COST_TOLERANCE = 1e-6


class SolutionValidator:
    """Validates CVRP solutions for correctness and feasibility."""

    def __init__(self, problem: VRPProblem):
        """
        Initialize solution validator.

        Args:
            problem: VRP problem instance
        """
        self.problem = problem

    def validate_solution(self, solution: Solution) -> Dict:
        """
        Validate a solution comprehensively.

        Args:
            solution: Solution to validate

        Returns:
            Validation results dictionary
        """
        if solution.n_routes_used() == 0:
            return {
                'is_valid': False,
                'is_feasible': False,
                'cost_consistent': solution.global_cost == 0,
                'errors': ['Empty solution'],
                'warnings': [],
            }

        errors, warnings = self._validate_coverage(solution)
        capacity_errors, route_warnings = self._validate_routes(solution)
        warnings.extend(route_warnings)

        cost_errors = self._validate_cost(solution)
        errors.extend(cost_errors)

        return {
            'is_valid': len(errors) == 0 and len(capacity_errors) == 0,
            'is_feasible': len(capacity_errors) == 0,
            'cost_consistent': len(cost_errors) == 0,
            'errors': errors + capacity_errors,
            'warnings': warnings,
        }

    def _validate_coverage(self, solution: Solution) -> Tuple[List[str], List[str]]:
        """Every customer visited exactly once, no unknown IDs, no depot visits."""
        errors = []
        warnings = []

        counts = solution.customer_multiset()
        expected_customers = set(self.problem.customer_ids())

        duplicated = sorted(cid for cid, count in counts.items() if count > 1)
        if duplicated:
            errors.append(f"Customers visited multiple times: {duplicated}")

        if self.problem.depot_id in counts:
            errors.append(f"Depot ({self.problem.depot_id}) should not appear inside a route")

        invalid_ids = set(counts) - expected_customers - {self.problem.depot_id}
        if invalid_ids:
            errors.append(f"Invalid customer IDs: {sorted(invalid_ids)}")

        missing_customers = expected_customers - set(counts)
        if missing_customers:
            errors.append(f"Missing customers: {sorted(missing_customers)}")

        return errors, warnings

    def _validate_routes(self, solution: Solution) -> Tuple[List[str], List[str]]:
        """Capacity per route, recomputed from the problem demands."""
        errors = []
        warnings = []

        for i, route in enumerate(solution.routes):
            if route.is_empty():
                warnings.append(f"Route {i} is empty")
                continue

            if route.vehicle.uncapacitated:
                warnings.append(f"Route {i} is served by an uncapacitated vehicle")

            load = sum(
                self.problem.get_demand(c) for c in route.customers
                if self.problem.get_customer_by_id(c) is not None
            )
            if load > self.problem.vehicle_capacity:
                errors.append(
                    f"Route {i} exceeds capacity: {load} > {self.problem.vehicle_capacity}"
                )

            if len(route) == 1:
                warnings.append(f"Route {i} has only one customer")

        return errors, warnings

    def _validate_cost(self, solution: Solution) -> List[str]:
        """Cached lengths and global cost match a from-scratch recomputation."""
        errors = []
        total = 0.0
        for i, route in enumerate(solution.routes):
            try:
                length = self.problem.route_length(route.customers)
            except ValueError as e:
                errors.append(f"Route {i} cannot be measured: {e}")
                continue
            total += length
            if abs(length - route.total_length) > COST_TOLERANCE:
                errors.append(
                    f"Route {i} cached length {route.total_length:.6f} != recomputed {length:.6f}"
                )

        if abs(total - solution.global_cost) > COST_TOLERANCE:
            errors.append(
                f"Global cost {solution.global_cost:.6f} != sum of route lengths {total:.6f}"
            )
        return errors


def validate_solution(problem: VRPProblem, solution: Solution) -> Dict:
    """Convenience function to validate a solution."""
    return SolutionValidator(problem).validate_solution(solution)

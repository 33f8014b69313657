"""
Solution representation for VRP problems.
Defines Route and Solution classes used by the tabu search.
"""

from collections import Counter
from typing import List, Dict, Optional, Iterator, Sequence, Tuple

from tabu_vrp.models.vrp_model import VRPProblem, Vehicle


class Route:
    """
    Ordered customer visits served by one vehicle, depot endpoints implicit.

    `total_length` and `load` are cached; every mutation must be followed by
    `recompute()`, which sums the legs from scratch.
    """

    def __init__(self, problem: VRPProblem, customers: Optional[Sequence[int]] = None,
                 vehicle: Optional[Vehicle] = None):
        """
        Initialize route.

        Args:
            problem: Problem instance used as distance oracle
            customers: Ordered customer IDs
            vehicle: Serving vehicle (instance default if None)
        """
        self.problem = problem
        self.customers: List[int] = list(customers or [])
        self.vehicle = vehicle or problem.default_vehicle()
        self.total_length = 0.0
        self.load = 0

        if len(set(self.customers)) != len(self.customers):
            raise ValueError(f"Duplicate customers in route: {self.customers}")

        self.recompute()

    def recompute(self) -> float:
        """Recompute length and load from scratch and return the length."""
        self.total_length = self.problem.route_length(self.customers)
        self.load = self.problem.route_load(self.customers)
        return self.total_length

    def is_feasible(self) -> bool:
        """Check the capacity constraint (always true for uncapacitated vehicles)."""
        return self.vehicle.can_carry(self.load)

    def is_empty(self) -> bool:
        return len(self.customers) == 0

    def copy(self) -> 'Route':
        """Create a deep copy of this route (the problem is shared)."""
        clone = Route.__new__(Route)
        clone.problem = self.problem
        clone.customers = list(self.customers)
        clone.vehicle = self.vehicle
        clone.total_length = self.total_length
        clone.load = self.load
        return clone

    def with_customers(self, customers: Sequence[int]) -> 'Route':
        """New route on the same vehicle with a different visit order."""
        return Route(self.problem, customers, self.vehicle)

    def signature(self) -> Tuple[int, ...]:
        return tuple(self.customers)

    def __len__(self) -> int:
        return len(self.customers)

    def __iter__(self) -> Iterator[int]:
        return iter(self.customers)

    def __getitem__(self, index: int) -> int:
        return self.customers[index]

    def __contains__(self, customer_id: int) -> bool:
        return customer_id in self.customers

    def __eq__(self, other) -> bool:
        if not isinstance(other, Route):
            return NotImplemented
        return self.customers == other.customers

    __hash__ = None

    def __repr__(self) -> str:
        if self.is_empty():
            return "Route(empty)"
        path = " -> ".join(map(str, self.customers))
        return f"Route(0 -> {path} -> 0, length={self.total_length:.2f}, load={self.load})"


class Solution:
    """
    Collection of routes with a cached global cost.

    Two solutions are equal when their route sequences are equal element-wise.
    """

    def __init__(self, routes: Optional[List[Route]] = None):
        """
        Initialize solution.

        Args:
            routes: Routes owned by this solution
        """
        self.routes: List[Route] = list(routes or [])
        self.global_cost = 0.0
        self.recompute_global_cost()

    @classmethod
    def from_sequences(cls, problem: VRPProblem, sequences: Sequence[Sequence[int]],
                       vehicle: Optional[Vehicle] = None) -> 'Solution':
        """Build a solution from plain customer ID lists."""
        vehicle = vehicle or problem.default_vehicle()
        return cls([Route(problem, seq, vehicle) for seq in sequences])

    def recompute_global_cost(self) -> float:
        """Recompute global cost as the sum of cached route lengths."""
        self.global_cost = sum(route.total_length for route in self.routes)
        return self.global_cost

    def copy(self) -> 'Solution':
        """Create a deep copy of the solution."""
        clone = Solution.__new__(Solution)
        clone.routes = [route.copy() for route in self.routes]
        clone.global_cost = self.global_cost
        return clone

    def add_route(self, route: Route):
        """
        Add a route unless an equal route is already present.

        Raises:
            ValueError: If an equal route is already part of the solution
        """
        if route in self.routes:
            raise ValueError(f"Route already present in solution: {route}")
        self.routes.append(route)
        self.global_cost += route.total_length

    def remove_route(self, route: Route):
        """Remove a route if present."""
        if route in self.routes:
            self.routes.remove(route)
            self.global_cost -= route.total_length

    def signature(self) -> Tuple[Tuple[int, ...], ...]:
        """Hashable content key with the same semantics as equality."""
        return tuple(route.signature() for route in self.routes)

    def customer_multiset(self) -> Counter:
        """Multiset of customer IDs over all routes."""
        counts = Counter()
        for route in self.routes:
            counts.update(route.customers)
        return counts

    def giant_tour(self) -> List[int]:
        """Concatenated customer sequence of all routes."""
        return [cid for route in self.routes for cid in route.customers]

    def is_feasible(self) -> bool:
        """Check capacity on every route."""
        return all(route.is_feasible() for route in self.routes)

    def n_routes(self) -> int:
        return len(self.routes)

    def n_routes_used(self) -> int:
        """Count number of non-empty routes."""
        return sum(1 for route in self.routes if not route.is_empty())

    def __len__(self) -> int:
        return len(self.routes)

    def __iter__(self) -> Iterator[Route]:
        return iter(self.routes)

    def __getitem__(self, index: int) -> Route:
        return self.routes[index]

    def __eq__(self, other) -> bool:
        if not isinstance(other, Solution):
            return NotImplemented
        return self.routes == other.routes

    __hash__ = None

    def summary(self) -> str:
        """Return summary string of solution."""
        return (
            f"Solution: {self.n_routes_used()} routes, "
            f"{sum(len(r) for r in self.routes)} customers, "
            f"cost={self.global_cost:.2f}, feasible={self.is_feasible()}"
        )

    def to_dict(self) -> Dict:
        """Convert solution to dictionary for serialization."""
        return {
            'global_cost': float(self.global_cost),
            'is_feasible': bool(self.is_feasible()),
            'n_routes': self.n_routes_used(),
            'routes': [
                {
                    'customers': list(r.customers),
                    'length': float(r.total_length),
                    'load': int(r.load),
                    'capacity': float(r.vehicle.capacity),
                }
                for r in self.routes
            ],
        }

    def __repr__(self) -> str:
        return self.summary()

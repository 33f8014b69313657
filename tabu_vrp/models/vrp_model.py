"""
VRP problem model and data structures.
Defines customers, depot, vehicles and the problem instance (distance oracle).
"""

from typing import List, Dict, Tuple, Optional, Sequence
import numpy as np
from dataclasses import dataclass, replace

from tabu_vrp.data_processing.distance import calculate_distance_matrix


@dataclass(frozen=True)
class Customer:
    """Represents a customer in the VRP problem."""
    id: int
    x: float
    y: float
    demand: int

    def __post_init__(self):
        """Validate customer data after initialization."""
        if self.demand < 0:
            raise ValueError(f"Customer {self.id} has negative demand")


@dataclass(frozen=True)
class Depot:
    """Represents the depot in the VRP problem."""
    id: int
    x: float
    y: float


@dataclass(frozen=True)
class Vehicle:
    """
    Vehicle serving a single route.

    When `uncapacitated` is set the capacity is ignored by every feasibility
    check. Only the single-route relaxation creates such vehicles.
    """
    capacity: float
    uncapacitated: bool = False

    def __post_init__(self):
        if self.capacity <= 0:
            raise ValueError("Vehicle capacity must be positive")

    def can_carry(self, load: float) -> bool:
        """Check whether a load respects this vehicle's capacity."""
        return self.uncapacitated or load <= self.capacity

    def relaxed(self) -> 'Vehicle':
        """Return the uncapacitated twin of this vehicle."""
        return replace(self, uncapacitated=True)

    def restricted(self) -> 'Vehicle':
        """Return the capacitated twin of this vehicle."""
        return replace(self, uncapacitated=False)


class VRPProblem:
    """Represents a complete capacitated VRP instance."""

    def __init__(self,
                 customers: List[Customer],
                 depot: Depot,
                 vehicle_capacity: float,
                 distance_matrix: Optional[np.ndarray] = None,
                 name: str = "instance"):
        """
        Initialize VRP problem.

        Args:
            customers: List of customers
            depot: Depot information
            vehicle_capacity: Maximum capacity per vehicle (Q)
            distance_matrix: Optional pre-computed distance matrix, depot at index 0
                followed by customers in list order. Euclidean if omitted.
            name: Instance name
        """
        self.customers = customers
        self.depot = depot
        self.vehicle_capacity = vehicle_capacity
        self.name = name

        # Create ID to index mapping for distance matrix
        self.id_to_index = {depot.id: 0}
        for i, customer in enumerate(customers):
            self.id_to_index[customer.id] = i + 1

        self._customers_by_id = {c.id: c for c in customers}

        if distance_matrix is None:
            distance_matrix = self._euclidean_matrix()
        self.distance_matrix = np.asarray(distance_matrix, dtype=np.float64)

        self._validate_problem()

    def _validate_problem(self):
        """Validate VRP problem constraints."""
        if not self.customers:
            raise ValueError("No customers provided")

        if self.vehicle_capacity <= 0:
            raise ValueError("Vehicle capacity must be positive")

        if len(self._customers_by_id) != len(self.customers):
            raise ValueError("Duplicate customer IDs")

        if self.depot.id in self._customers_by_id:
            raise ValueError(f"Customer ID {self.depot.id} collides with the depot ID")

        expected_shape = (len(self.customers) + 1, len(self.customers) + 1)
        if self.distance_matrix.shape != expected_shape:
            raise ValueError(
                f"Distance matrix shape {self.distance_matrix.shape} != expected {expected_shape}"
            )

        if np.any(self.distance_matrix < 0):
            raise ValueError("Distance matrix contains negative distances")

        max_demand = max(c.demand for c in self.customers)
        if max_demand > self.vehicle_capacity:
            raise ValueError(
                f"Customer demand {max_demand} exceeds vehicle capacity {self.vehicle_capacity}"
            )

    def _euclidean_matrix(self) -> np.ndarray:
        return calculate_distance_matrix(self.get_all_coordinates())

    @property
    def depot_id(self) -> int:
        return self.depot.id

    def default_vehicle(self) -> Vehicle:
        """Capacitated vehicle with the instance capacity."""
        return Vehicle(capacity=self.vehicle_capacity)

    def get_customer_by_id(self, customer_id: int) -> Optional[Customer]:
        """Get customer by ID."""
        return self._customers_by_id.get(customer_id)

    def get_demand(self, customer_id: int) -> int:
        customer = self._customers_by_id.get(customer_id)
        if customer is None:
            raise ValueError(f"Invalid customer ID: {customer_id}")
        return customer.demand

    def customer_ids(self) -> List[int]:
        """Get list of all customer IDs."""
        return [c.id for c in self.customers]

    def get_customer_coordinates(self) -> List[Tuple[float, float]]:
        """Get list of customer coordinates."""
        return [(c.x, c.y) for c in self.customers]

    def get_all_coordinates(self) -> List[Tuple[float, float]]:
        """Get list of all coordinates (depot + customers)."""
        coords = [(self.depot.x, self.depot.y)]
        coords.extend(self.get_customer_coordinates())
        return coords

    def get_distance(self, from_id: int, to_id: int) -> float:
        """Get distance between two nodes by ID (depot included)."""
        from_matrix_idx = self.id_to_index.get(from_id)
        to_matrix_idx = self.id_to_index.get(to_id)

        if from_matrix_idx is None or to_matrix_idx is None:
            raise ValueError(f"Invalid customer ID: {from_id} or {to_id}")

        return float(self.distance_matrix[from_matrix_idx, to_matrix_idx])

    def route_length(self, customer_ids: Sequence[int]) -> float:
        """
        Length of depot -> c1 -> ... -> cn -> depot, summed from scratch.

        Args:
            customer_ids: Ordered customer IDs (depot endpoints implicit)

        Returns:
            Total distance, 0.0 for an empty sequence
        """
        if not customer_ids:
            return 0.0

        total = 0.0
        prev = self.depot.id
        for customer_id in customer_ids:
            total += self.get_distance(prev, customer_id)
            prev = customer_id
        total += self.get_distance(prev, self.depot.id)
        return total

    def route_load(self, customer_ids: Sequence[int]) -> int:
        """Sum of demands of the given customers."""
        return sum(self.get_demand(cid) for cid in customer_ids)

    def calculate_total_demand(self) -> int:
        """Calculate total demand of all customers."""
        return sum(c.demand for c in self.customers)

    def estimate_minimum_vehicles(self) -> int:
        """Lower bound on the number of capacity-feasible routes."""
        total_demand = self.calculate_total_demand()
        return max(1, int(np.ceil(total_demand / self.vehicle_capacity)))

    def get_problem_info(self) -> Dict:
        """Get problem information summary."""
        return {
            'name': self.name,
            'num_customers': int(len(self.customers)),
            'vehicle_capacity': float(self.vehicle_capacity),
            'total_demand': float(self.calculate_total_demand()),
            'min_vehicles_needed': int(self.estimate_minimum_vehicles()),
            'depot_location': (float(self.depot.x), float(self.depot.y)),
        }


def create_vrp_problem_from_dict(data: Dict,
                                 distance_matrix: Optional[np.ndarray] = None) -> VRPProblem:
    """
    Create VRP problem from dictionary data.

    Args:
        data: Dictionary with 'customers', 'depot', 'vehicle_capacity' and optional 'name'
        distance_matrix: Optional pre-computed distance matrix

    Returns:
        VRPProblem instance
    """
    customers = []
    for customer_data in data['customers']:
        customers.append(Customer(
            id=int(customer_data['id']),
            x=float(customer_data['x']),
            y=float(customer_data['y']),
            demand=int(customer_data['demand']),
        ))

    depot_data = data['depot']
    depot = Depot(
        id=int(depot_data.get('id', 0)),
        x=float(depot_data['x']),
        y=float(depot_data['y']),
    )

    return VRPProblem(
        customers=customers,
        depot=depot,
        vehicle_capacity=data['vehicle_capacity'],
        distance_matrix=distance_matrix,
        name=data.get('name', 'instance'),
    )

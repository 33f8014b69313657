"""
Inter-route transformation: random customer exchanges between two routes.
"""

import random
from typing import Optional

from tabu_vrp.models.solution import Route


class CrossRouteTransformer:
    """Exchanges customers between two routes of the same solution."""

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()

    def meta_exchange(self, route_a: Route, route_b: Route, attempts: int = 40) -> int:
        """
        Try `attempts` random one-for-one customer exchanges between two routes.

        An exchange is kept when both routes stay capacity-feasible and their
        combined length does not increase; otherwise it is undone. An exchange
        that would put a customer twice on the same route is skipped.

        Args:
            route_a: First route, modified in place
            route_b: Second route, modified in place
            attempts: Number of exchanges to try

        Returns:
            Number of accepted exchanges
        """
        if route_a is route_b:
            raise ValueError("Meta-exchange needs two distinct routes")

        accepted = 0
        for _ in range(attempts):
            if route_a.is_empty() or route_b.is_empty():
                break

            i = self.rng.randrange(len(route_a))
            j = self.rng.randrange(len(route_b))
            customer_a = route_a.customers[i]
            customer_b = route_b.customers[j]
            if customer_b in route_a or customer_a in route_b:
                continue

            length_before = route_a.total_length + route_b.total_length

            route_a.customers[i], route_b.customers[j] = customer_b, customer_a
            route_a.recompute()
            route_b.recompute()

            if (route_a.is_feasible() and route_b.is_feasible()
                    and route_a.total_length + route_b.total_length <= length_before):
                accepted += 1
            else:
                route_a.customers[i], route_b.customers[j] = customer_a, customer_b
                route_a.recompute()
                route_b.recompute()

        route_a.recompute()
        route_b.recompute()
        return accepted

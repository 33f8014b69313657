"""
Tabu search solver for the capacitated Vehicle Routing Problem.

Main entry points:
- TabuSearch / tabu_search: multi-route tabu search
- SingleRouteTabuSearch / tabu_single_route: giant route, split, optional second pass
- VRPProblem, Route, Solution: problem and solution model
"""

from .models.vrp_model import Customer, Depot, Vehicle, VRPProblem
from .models.solution import Route, Solution
from .algorithms.types import Transformation, NeighborhoodKind, GenerationMethod
from .algorithms.tabu_search import TabuSearch, tabu_search
from .algorithms.single_route import SingleRouteTabuSearch, tabu_single_route

__version__ = "1.0.0"

__all__ = [
    'Customer', 'Depot', 'Vehicle', 'VRPProblem', 'Route', 'Solution',
    'Transformation', 'NeighborhoodKind', 'GenerationMethod',
    'TabuSearch', 'tabu_search', 'SingleRouteTabuSearch', 'tabu_single_route',
]

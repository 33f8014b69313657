"""
Distance matrix computation for VRP instances.
"""

import numpy as np
from typing import List, Tuple, Optional


class DistanceCalculator:
    """Calculates Euclidean distance matrices for VRP problems."""

    def __init__(self, decimals: Optional[int] = None):
        """
        Initialize distance calculator.

        Args:
            decimals: Round distances to this many decimals (no rounding if None)
        """
        self.decimals = decimals
        self.distance_matrix: Optional[np.ndarray] = None

    def calculate_distance_matrix(self, coordinates: List[Tuple[float, float]]) -> np.ndarray:
        """
        Calculate Euclidean distance matrix using vectorized NumPy operations.

        Args:
            coordinates: List of (x, y) coordinate tuples, depot first

        Returns:
            Distance matrix as numpy array
        """
        coords_array = np.asarray(coordinates, dtype=np.float64).reshape(-1, 2)

        x = coords_array[:, 0]
        y = coords_array[:, 1]

        # x_diff[i, j] = x[i] - x[j]
        x_diff = x[:, np.newaxis] - x[np.newaxis, :]
        y_diff = y[:, np.newaxis] - y[np.newaxis, :]

        distance_matrix = np.sqrt(x_diff ** 2 + y_diff ** 2)
        np.fill_diagonal(distance_matrix, 0.0)

        if self.decimals is not None:
            distance_matrix = np.round(distance_matrix, self.decimals)

        self.distance_matrix = distance_matrix
        return distance_matrix

    def get_distance(self, from_idx: int, to_idx: int) -> float:
        """
        Get distance between two points by matrix index.

        Args:
            from_idx: Source point index
            to_idx: Destination point index

        Returns:
            Distance between points
        """
        if self.distance_matrix is None:
            raise ValueError("Distance matrix not calculated yet")

        return float(self.distance_matrix[from_idx, to_idx])

    def get_route_distance(self, route: List[int]) -> float:
        """Total distance along a sequence of matrix indices."""
        if len(route) < 2:
            return 0.0

        total_distance = 0.0
        for i in range(len(route) - 1):
            total_distance += self.get_distance(route[i], route[i + 1])

        return total_distance


def calculate_distance_matrix(coordinates: List[Tuple[float, float]],
                              decimals: Optional[int] = None) -> np.ndarray:
    """
    Convenience function to calculate distance matrix.

    Args:
        coordinates: List of (x, y) coordinate tuples
        decimals: Optional rounding precision

    Returns:
        Distance matrix as numpy array
    """
    calculator = DistanceCalculator(decimals)
    return calculator.calculate_distance_matrix(coordinates)

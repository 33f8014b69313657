"""
Random instance generator for CVRP problems.
Creates synthetic customers uniformly spread over a square area.
"""

import logging
import os
from typing import Dict, List, Optional

import numpy as np
import pandas as pd

from tabu_vrp.config import GENERATOR_CONFIG, VRP_CONFIG

logger = logging.getLogger(__name__)


class InstanceGenerator:
    """Generates synthetic CVRP problem instances."""

    def __init__(self, config: Optional[Dict] = None):
        """
        Initialize generator with configuration.

        Args:
            config: Overrides for GENERATOR_CONFIG
        """
        self.config = GENERATOR_CONFIG.copy()
        if config:
            self.config.update(config)
        self.rng = np.random.default_rng(self.config['seed'])

    def generate_depot(self) -> Dict:
        """Place the depot at the center or the lower corner of the area."""
        low, high = self.config['area_bounds']
        if self.config['depot_position'] == 'corner':
            x = y = float(low)
        else:
            x = y = (low + high) / 2.0
        return {'id': VRP_CONFIG['depot_id'], 'x': x, 'y': y}

    def generate_customers(self, n_customers: Optional[int] = None) -> List[Dict]:
        """
        Generate customers with uniform coordinates and integer demands.

        Args:
            n_customers: Number of customers to generate

        Returns:
            List of customer dictionaries with IDs 1..n
        """
        n_customers = n_customers or self.config['n_customers']
        low, high = self.config['area_bounds']

        coords = self.rng.uniform(low, high, size=(n_customers, 2))
        demands = self.rng.integers(
            self.config['demand_min'], self.config['demand_max'], size=n_customers, endpoint=True
        )

        return [
            {'id': i + 1, 'x': float(coords[i, 0]), 'y': float(coords[i, 1]), 'demand': int(demands[i])}
            for i in range(n_customers)
        ]

    def generate(self, n_customers: Optional[int] = None,
                 vehicle_capacity: Optional[float] = None,
                 name: str = "random") -> Dict:
        """
        Generate a complete instance in the dictionary format of the loader.

        Returns:
            Dictionary containing customers, depot and vehicle capacity
        """
        vehicle_capacity = vehicle_capacity or VRP_CONFIG['vehicle_capacity']
        if self.config['demand_max'] > vehicle_capacity:
            raise ValueError(
                f"demand_max {self.config['demand_max']} exceeds vehicle capacity {vehicle_capacity}"
            )

        customers = self.generate_customers(n_customers)
        logger.info(f"Generated instance '{name}' with {len(customers)} customers")
        return {
            'name': name,
            'customers': customers,
            'depot': self.generate_depot(),
            'vehicle_capacity': vehicle_capacity,
            'num_customers': len(customers),
        }

    @staticmethod
    def save_to_csv(data: Dict, file_path: str):
        """
        Save an instance as CSV readable by InstanceLoader.

        The depot is written first with zero demand and `CUST NO.` 0.
        """
        rows = [{
            'CUST NO.': data['depot']['id'],
            'XCOORD.': data['depot']['x'],
            'YCOORD.': data['depot']['y'],
            'DEMAND': 0,
            'CAPACITY': data['vehicle_capacity'],
        }]
        for customer in data['customers']:
            rows.append({
                'CUST NO.': customer['id'],
                'XCOORD.': customer['x'],
                'YCOORD.': customer['y'],
                'DEMAND': customer['demand'],
                'CAPACITY': None,
            })

        directory = os.path.dirname(file_path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        pd.DataFrame(rows).to_csv(file_path, index=False)
        logger.info(f"Instance saved to {file_path}")

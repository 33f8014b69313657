"""
Data loader for CVRP instances in Solomon-like CSV format.
Handles CSV parsing and data validation.
"""

import logging
import os
import re
from typing import Dict, List, Optional

import pandas as pd

from tabu_vrp.config import VRP_CONFIG
from tabu_vrp.core.exceptions import DatasetNotFoundError
from tabu_vrp.models.vrp_model import VRPProblem, create_vrp_problem_from_dict

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ['CUST NO.', 'XCOORD.', 'YCOORD.', 'DEMAND']
SOLOMON_NAME = re.compile(r"^(RC|C|R)([12])\d{2}")


class InstanceLoader:
    """Loads and parses CVRP instances from CSV files."""

    def __init__(self, vehicle_capacity: Optional[float] = None):
        """
        Initialize loader.

        Args:
            vehicle_capacity: Capacity override (inferred from the file otherwise)
        """
        self.vehicle_capacity_override = vehicle_capacity
        self.customers: List[Dict] = []
        self.depot: Optional[Dict] = None
        self.vehicle_capacity: Optional[float] = None
        self.name: Optional[str] = None

    def load_from_file(self, file_path: str) -> Dict:
        """
        Load instance data from a CSV file.

        The depot is the first row with zero demand; every other row is a
        customer keyed by its `CUST NO.`.

        Args:
            file_path: Path to the CSV file

        Returns:
            Dictionary containing customers, depot, and problem parameters

        Raises:
            DatasetNotFoundError: File does not exist
            ValueError: Required columns or depot row missing
        """
        if not os.path.exists(file_path):
            raise DatasetNotFoundError(file_path)

        df = pd.read_csv(file_path, skipinitialspace=True)
        df.columns = [col.strip() for col in df.columns]

        missing_columns = [col for col in REQUIRED_COLUMNS if col not in df.columns]
        if missing_columns:
            raise ValueError(f"Missing required columns: {missing_columns}")

        depot_rows = df[df['DEMAND'] == 0]
        if depot_rows.empty:
            raise ValueError("No depot row (zero demand) found")
        depot_label = depot_rows.index[0]
        depot_row = depot_rows.iloc[0]

        self.depot = {
            'id': VRP_CONFIG['depot_id'],
            'x': float(depot_row['XCOORD.']),
            'y': float(depot_row['YCOORD.']),
        }

        self.customers = []
        for _, row in df.drop(index=depot_label).iterrows():
            self.customers.append({
                'id': int(row['CUST NO.']),
                'x': float(row['XCOORD.']),
                'y': float(row['YCOORD.']),
                'demand': int(row['DEMAND']),
            })

        self.name = os.path.splitext(os.path.basename(file_path))[0]
        self.vehicle_capacity = self._resolve_capacity(df)

        logger.info(
            f"Loaded instance '{self.name}': {len(self.customers)} customers, "
            f"capacity={self.vehicle_capacity}"
        )
        return self._to_dict()

    def _resolve_capacity(self, df: pd.DataFrame) -> float:
        """Capacity from override, CAPACITY column, Solomon file name, or default."""
        if self.vehicle_capacity_override is not None:
            return self.vehicle_capacity_override

        if 'CAPACITY' in df.columns:
            values = df['CAPACITY'].dropna()
            if not values.empty:
                return float(values.iloc[0])

        # Solomon series: C1, R1, RC1 use 200; C2 uses 700; R2, RC2 use 1000
        match = SOLOMON_NAME.match(self.name.upper())
        if match:
            series, horizon = match.groups()
            if horizon == "1":
                return 200
            return 700 if series == "C" else 1000

        return VRP_CONFIG['vehicle_capacity']

    def _to_dict(self) -> Dict:
        """Convert loaded data to dictionary format."""
        return {
            'name': self.name,
            'customers': self.customers,
            'depot': self.depot,
            'vehicle_capacity': self.vehicle_capacity,
            'num_customers': len(self.customers),
        }


def load_instance(file_path: str, vehicle_capacity: Optional[float] = None) -> VRPProblem:
    """
    Convenience function to load an instance as a VRPProblem.

    Args:
        file_path: Path to CSV file
        vehicle_capacity: Capacity override

    Returns:
        VRPProblem instance
    """
    loader = InstanceLoader(vehicle_capacity)
    data = loader.load_from_file(file_path)
    return create_vrp_problem_from_dict(data)

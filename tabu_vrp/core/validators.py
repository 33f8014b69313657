"""
Validation layer for the Tabu VRP solver.
Provides validators for configuration dictionaries.
"""

from typing import Dict
from tabu_vrp.core.exceptions import (
    InvalidConfigurationError, UnhandledTransformationError, UnhandledNeighborhoodKindError
)
from tabu_vrp.algorithms.types import Transformation, NeighborhoodKind


class ConfigValidator:
    """Validate configuration parameters."""

    @staticmethod
    def validate_tabu_config(config: Dict) -> bool:
        """
        Validate tabu search configuration.

        Args:
            config: Tabu configuration dictionary

        Returns:
            True if valid, raises InvalidConfigurationError otherwise

        Raises:
            InvalidConfigurationError: If a parameter is missing or out of range
        """
        required_keys = [
            'tabu_capacity',
            'max_iterations',
            'neighborhood_size',
            'transformation',
            'neighborhood_kind',
        ]

        for key in required_keys:
            if key not in config:
                raise InvalidConfigurationError(
                    parameter=key,
                    value=None,
                    expected="Required parameter"
                )

        for key in ('tabu_capacity', 'max_iterations', 'neighborhood_size'):
            value = config[key]
            if not isinstance(value, int) or isinstance(value, bool) or value < 0:
                raise InvalidConfigurationError(
                    parameter=key,
                    value=value,
                    expected="integer >= 0"
                )

        attempts = config.get('meta_exchange_attempts', 40)
        if not isinstance(attempts, int) or isinstance(attempts, bool) or attempts < 0:
            raise InvalidConfigurationError(
                parameter='meta_exchange_attempts',
                value=attempts,
                expected="integer >= 0"
            )

        probability = config.get('meta_exchange_probability', 0.5)
        if (not isinstance(probability, (int, float)) or isinstance(probability, bool)
                or not 0 <= probability <= 1):
            raise InvalidConfigurationError(
                parameter='meta_exchange_probability',
                value=probability,
                expected="[0, 1]"
            )

        try:
            Transformation.parse(config['transformation'])
        except UnhandledTransformationError:
            raise InvalidConfigurationError(
                parameter='transformation',
                value=config['transformation'],
                expected=", ".join(t.value for t in Transformation)
            )

        try:
            NeighborhoodKind.parse(config['neighborhood_kind'])
        except UnhandledNeighborhoodKindError:
            raise InvalidConfigurationError(
                parameter='neighborhood_kind',
                value=config['neighborhood_kind'],
                expected=", ".join(k.value for k in NeighborhoodKind)
            )

        return True

    @staticmethod
    def validate_vrp_config(config: Dict) -> bool:
        """
        Validate VRP configuration.

        Args:
            config: VRP configuration dictionary

        Returns:
            True if valid, raises InvalidConfigurationError otherwise
        """
        capacity = config.get('vehicle_capacity')
        if capacity is None or capacity <= 0:
            raise InvalidConfigurationError(
                parameter='vehicle_capacity',
                value=capacity,
                expected="> 0"
            )

        return True

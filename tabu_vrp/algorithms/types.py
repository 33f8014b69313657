"""
Enumerations shared by the transformers, the neighborhood builder and the driver.
"""

from enum import Enum
from typing import Union

from tabu_vrp.core.exceptions import UnhandledTransformationError, UnhandledNeighborhoodKindError


class Transformation(Enum):
    """Intra-route transformations available to the neighborhood builder."""
    SWAP = "swap"
    SHIFT_INSERT = "shift_insert"
    INVERSION = "inversion"
    TWO_OPT = "two_opt"

    @classmethod
    def parse(cls, value: Union[str, 'Transformation']) -> 'Transformation':
        """Convert a config/CLI value into a Transformation."""
        if isinstance(value, cls):
            return value
        key = str(value).strip().lower().replace('-', '_')
        for member in cls:
            if member.value == key:
                return member
        raise UnhandledTransformationError(value)


class NeighborhoodKind(Enum):
    """Neighborhood exploration strategies."""
    BASIC = "basic"
    COMPLEX = "complex"

    @classmethod
    def parse(cls, value: Union[str, 'NeighborhoodKind']) -> 'NeighborhoodKind':
        """Convert a config/CLI value into a NeighborhoodKind."""
        if isinstance(value, cls):
            return value
        key = str(value).strip().lower()
        for member in cls:
            if member.value == key:
                return member
        raise UnhandledNeighborhoodKindError(value)


class GenerationMethod(Enum):
    """Construction methods for the initial solution."""
    RANDOM = "random"
    GREEDY = "greedy"
    RANDOM_SINGLE = "random_single"

    @classmethod
    def parse(cls, value: Union[str, 'GenerationMethod']) -> 'GenerationMethod':
        if isinstance(value, cls):
            return value
        key = str(value).strip().lower().replace('-', '_')
        for member in cls:
            if member.value == key:
                return member
        raise ValueError(f"Unknown generation method: {value}")

"""
Custom exceptions for the Tabu VRP solver.
Every domain error carries an ErrorKind tag so callers can dispatch on it.
"""

from enum import Enum


class ErrorKind(Enum):
    """Closed set of error kinds raised by the solver."""
    ROUTE_TOO_SMALL = "route_too_small"
    CAPACITY_EXCEEDED = "capacity_exceeded"
    EMPTY_CLIENT_LIST = "empty_client_list"
    UNHANDLED_TRANSFORMATION = "unhandled_transformation"
    UNHANDLED_NEIGHBORHOOD_KIND = "unhandled_neighborhood_kind"
    INVALID_SINGLE_ROUTE_INPUT = "invalid_single_route_input"
    SUBDIVISION_FAILED = "subdivision_failed"
    INVALID_CONFIGURATION = "invalid_configuration"
    DATASET_NOT_FOUND = "dataset_not_found"


class TabuVRPException(Exception):
    """Base exception for the Tabu VRP solver."""

    kind: ErrorKind = None

    def __init__(self, message: str = "", details: dict = None):
        """
        Initialize solver exception.

        Args:
            message: Error message
            details: Additional error details
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self):
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class RouteTooSmallError(TabuVRPException):
    """Raised when a route has fewer customers than an operation requires."""

    kind = ErrorKind.ROUTE_TOO_SMALL

    def __init__(self, operation: str = None, size: int = None, minimum: int = None):
        """
        Initialize route too small error.

        Args:
            operation: Name of the transformation
            size: Number of customers in the route
            minimum: Minimum number of customers required
        """
        message = "Route too small for transformation"
        details = {}

        if operation is not None:
            details['operation'] = operation
        if size is not None:
            details['size'] = size
        if minimum is not None:
            details['minimum'] = minimum

        if operation is not None:
            message += f": {operation} needs at least {minimum} customers, route has {size}"

        super().__init__(message, details)


class CapacityExceededError(TabuVRPException):
    """Raised when a transformation leaves a capacitated route overloaded."""

    kind = ErrorKind.CAPACITY_EXCEEDED

    def __init__(self, load: float = None, capacity: float = None, operation: str = None):
        """
        Initialize capacity exceeded error.

        Args:
            load: Load of the offending route
            capacity: Vehicle capacity limit
            operation: Transformation that produced the route
        """
        message = "Vehicle capacity constraint violated"
        details = {}

        if load is not None:
            details['load'] = load
        if capacity is not None:
            details['capacity'] = capacity
        if operation is not None:
            details['operation'] = operation

        if load is not None and capacity is not None:
            message += f": load {load} > capacity {capacity}"

        super().__init__(message, details)


class EmptyClientListError(TabuVRPException):
    """Raised when a transformation tries to build a route without customers."""

    kind = ErrorKind.EMPTY_CLIENT_LIST

    def __init__(self, operation: str = None):
        message = "Transformation produced an empty customer list"
        details = {}
        if operation is not None:
            details['operation'] = operation
            message += f" ({operation})"
        super().__init__(message, details)


class UnhandledTransformationError(TabuVRPException):
    """Raised when a transformation is unknown or not allowed for a neighborhood kind."""

    kind = ErrorKind.UNHANDLED_TRANSFORMATION

    def __init__(self, transformation=None, neighborhood_kind=None, reason: str = None):
        """
        Initialize unhandled transformation error.

        Args:
            transformation: The rejected transformation (enum member or raw value)
            neighborhood_kind: Neighborhood kind it was requested for
            reason: Optional explanation
        """
        message = "Unhandled transformation"
        details = {}

        if transformation is not None:
            details['transformation'] = str(transformation)
            message += f": {transformation}"
        if neighborhood_kind is not None:
            details['neighborhood_kind'] = str(neighborhood_kind)
            message += f" (neighborhood: {neighborhood_kind})"
        if reason:
            details['reason'] = reason

        super().__init__(message, details)


class UnhandledNeighborhoodKindError(TabuVRPException):
    """Raised when a neighborhood kind is not recognized."""

    kind = ErrorKind.UNHANDLED_NEIGHBORHOOD_KIND

    def __init__(self, neighborhood_kind=None):
        message = "Unhandled neighborhood kind"
        details = {}
        if neighborhood_kind is not None:
            details['neighborhood_kind'] = str(neighborhood_kind)
            message += f": {neighborhood_kind}"
        super().__init__(message, details)


class InvalidSingleRouteInputError(TabuVRPException):
    """Raised when the single-route search receives a solution without exactly one route."""

    kind = ErrorKind.INVALID_SINGLE_ROUTE_INPUT

    def __init__(self, num_routes: int = None):
        message = "Single-route tabu search expects exactly one route"
        details = {}
        if num_routes is not None:
            details['num_routes'] = num_routes
            message += f", got {num_routes}"
        super().__init__(message, details)


class SubdivisionFailedError(TabuVRPException):
    """Raised when a giant route cannot be split into capacity-feasible routes."""

    kind = ErrorKind.SUBDIVISION_FAILED

    def __init__(self, reason: str = None, customer_id: int = None):
        message = "Route subdivision failed"
        details = {}
        if customer_id is not None:
            details['customer_id'] = customer_id
        if reason:
            details['reason'] = reason
            message += f": {reason}"
        super().__init__(message, details)


class InvalidConfigurationError(TabuVRPException):
    """Raised when configuration parameters are invalid."""

    kind = ErrorKind.INVALID_CONFIGURATION

    def __init__(self, parameter: str = None, value: any = None,
                 expected: str = None):
        """
        Initialize invalid configuration error.

        Args:
            parameter: Parameter name
            value: Invalid value
            expected: Expected value or range
        """
        message = "Invalid configuration parameter"
        details = {}

        if parameter:
            details['parameter'] = parameter
        if value is not None:
            details['value'] = value
        if expected:
            details['expected'] = expected

        if parameter:
            message += f": {parameter} = {value}"
            if expected:
                message += f" (expected: {expected})"

        super().__init__(message, details)


class DatasetNotFoundError(TabuVRPException):
    """Raised when an instance file is not found."""

    kind = ErrorKind.DATASET_NOT_FOUND

    def __init__(self, dataset_path: str = None):
        message = "Dataset not found"
        details = {}
        if dataset_path:
            details['dataset_path'] = dataset_path
            message += f": '{dataset_path}'"
        super().__init__(message, details)

"""Exceptions raised while normalizing input, building graphs and walking paths."""


class SurfaceDistanceError(ValueError):
    """Base class for invalid graph/mesh input and failed path queries."""


class ShapeError(SurfaceDistanceError):
    """Positions or connectivity have the wrong rank or number of columns."""


class EmptyInputError(SurfaceDistanceError):
    """Zero vertices or zero connectivity records."""


class InvalidValueError(SurfaceDistanceError):
    """NaN coordinate, undefined index or start node outside the vertex range."""


class NoValidConnectivityError(SurfaceDistanceError):
    """Every connectivity record was dropped by the range filter."""


class InvalidWeightError(SurfaceDistanceError):
    """Negative (or NaN) edge weight."""


class InvalidTargetError(SurfaceDistanceError):
    """Target node outside the vertex range."""


class UnreachableError(SurfaceDistanceError):
    """No path from the start set to the target."""


class SearchCancelledError(RuntimeError):
    """Dijkstra search stopped by a cancel signal or timeout."""


class DroppedConnectivityWarning(UserWarning):
    """Connectivity records referencing missing vertices were ignored."""

"""
Graph and mesh surface distances.
"""

from .dijkstra import DistanceTable, Settled, Unreached, run_searches, shortest_paths
from .errors import (
    DroppedConnectivityWarning,
    EmptyInputError,
    InvalidTargetError,
    InvalidValueError,
    InvalidWeightError,
    NoValidConnectivityError,
    SearchCancelledError,
    ShapeError,
    SurfaceDistanceError,
    UnreachableError,
)
from .mesh_graph import MeshGraph, analyze_graph_connectivity, build_graph, largest_connected_component
from .normalize import normalize
from .paths import reconstruct
from .surface_distance import SurfaceDistance, dijkstras_surface_distance, surface_path

__all__ = [
    "normalize", "build_graph", "shortest_paths", "run_searches", "reconstruct",
    "dijkstras_surface_distance", "surface_path",
    "MeshGraph", "DistanceTable", "Settled", "Unreached", "SurfaceDistance",
    "analyze_graph_connectivity", "largest_connected_component",
    "SurfaceDistanceError", "ShapeError", "EmptyInputError", "InvalidValueError",
    "NoValidConnectivityError", "InvalidWeightError", "InvalidTargetError",
    "UnreachableError", "SearchCancelledError", "DroppedConnectivityWarning",
]

"""
Validation and canonicalization of raw vertex positions and connectivity.

Positions are promoted to (N, 3), connectivity is shifted to 0-based indices
and records referencing missing vertices are dropped with a warning.
"""
import logging
import warnings
from typing import NamedTuple, Optional

import numpy as np

from surfdist.geo.errors import (
    DroppedConnectivityWarning,
    EmptyInputError,
    InvalidValueError,
    NoValidConnectivityError,
    ShapeError,
)

logger = logging.getLogger(__name__)

_FACE_WIDTHS = (2, 3)
_POSITION_WIDTHS = (1, 2, 3)


class NormalizedMesh(NamedTuple):
    positions: np.ndarray       # (N, 3) float64
    faces: np.ndarray           # (M, 2|3) int64, 0-based
    index_origin: int
    start_nodes: Optional[np.ndarray] = None  # 0-based, None if not requested


def _as_table(values, name: str) -> np.ndarray:
    try:
        arr = np.asarray(values, dtype=np.float64)
    except (TypeError, ValueError) as exc:
        raise ShapeError(f"`{name}` must be a rectangular numeric table") from exc
    if arr.ndim != 2:
        raise ShapeError(f"`{name}` must be a 2D table, got {arr.ndim} dimension(s)")
    return arr


def _resolve_origin(index_origin, faces: np.ndarray) -> int:
    if index_origin is not None:
        origin = float(index_origin)
        if np.isfinite(origin):
            return int(origin)
    origin = int(faces.min())
    logger.debug("Face index origin inferred from connectivity: %d", origin)
    return origin


def normalize_start_nodes(start_nodes, index_origin: int, n_nodes: int) -> np.ndarray:
    """Shift start nodes by the index origin and check they are valid vertices."""
    starts = np.atleast_1d(np.asarray(start_nodes, dtype=np.float64)).ravel()
    if starts.size == 0:
        raise InvalidValueError("`start_node` must not be empty")
    if not np.isfinite(starts).all():
        raise InvalidValueError("`start_node` must not contain NA or infinite values")
    starts = starts.astype(np.int64) - index_origin
    if ((starts < 0) | (starts >= n_nodes)).any():
        raise InvalidValueError(
            f"`start_node` is invalid. `start_node - face_index_start` must be "
            f"integer(s) between 0 ~ {n_nodes - 1}"
        )
    return starts


def normalize(positions, connectivity, index_origin=None, start_nodes=None,
              stacklevel: int = 2) -> NormalizedMesh:
    """
    Canonicalize a graph or mesh description.

    Args:
        positions: (N, D) vertex coordinates, D in {1, 2, 3}
        connectivity: (M, 2) edge list or (M, 3) triangle list
        index_origin: value of the first vertex in `connectivity` (usually 0 or 1);
            inferred as the minimum index when None or NaN
        start_nodes: optional start vertices in the same indexing as `connectivity`
        stacklevel: passed to `warnings.warn` for dropped records (2 points at our caller)

    Returns:
        NormalizedMesh with 3D positions, 0-based faces, the origin used and
        0-based start nodes (when given)
    """
    positions = _as_table(positions, "positions")
    faces = _as_table(connectivity, "faces")

    if faces.shape[1] not in _FACE_WIDTHS:
        raise ShapeError("Face indices `faces` should have two or three columns")
    if positions.shape[1] not in _POSITION_WIDTHS:
        raise ShapeError("Vertex `positions` dimension should be 1, 2, or 3")

    n_points = positions.shape[0]
    if n_points == 0 or faces.shape[0] == 0:
        raise EmptyInputError("Cannot work with zero number vertices or empty face indices")

    if np.isnan(positions).any():
        raise InvalidValueError("Cannot handle NA vertex positions")
    if not np.isfinite(faces).all():
        raise InvalidValueError("Cannot handle NA face index")

    faces = faces.astype(np.int64)
    origin = _resolve_origin(index_origin, faces)
    faces = faces - origin

    invalid = ((faces < 0) | (faces >= n_points)).any(axis=1)
    if invalid.any():
        warnings.warn(
            f"Face index starts from {origin}. Found {int(invalid.sum())} record(s) "
            f"outside the allowed range [{origin}, {n_points - 1 + origin}]; "
            f"they will be ignored.",
            DroppedConnectivityWarning,
            stacklevel=stacklevel,
        )
        faces = faces[~invalid]
    if faces.shape[0] == 0:
        raise NoValidConnectivityError("No valid face indices found")

    if positions.shape[1] < 3:
        pad = np.zeros((n_points, 3 - positions.shape[1]), dtype=np.float64)
        positions = np.hstack([positions, pad])

    starts = None
    if start_nodes is not None:
        starts = normalize_start_nodes(start_nodes, origin, n_points)

    return NormalizedMesh(positions, faces, origin, starts)

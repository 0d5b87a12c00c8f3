"""
Surface / graph distances with 1-indexed node ids.

`dijkstras_surface_distance` computes the distance table once; `surface_path`
extracts the shortest path to any target from that table.
"""
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

import numpy as np
import pandas as pd

from surfdist.geo.dijkstra import DistanceTable, shortest_paths
from surfdist.geo.errors import InvalidTargetError, UnreachableError
from surfdist.geo.mesh_graph import build_graph
from surfdist.geo.normalize import normalize
from surfdist.geo.paths import reconstruct

logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class SurfaceDistance:
    paths: pd.DataFrame         # node_id, prev_id, distance
    start_node: np.ndarray      # 1-indexed
    face_index_start: int
    max_search_distance: float  # inf when unbounded
    n_nodes: int
    n_faces: int
    n_edges: int
    table: DistanceTable

    def meta(self) -> Dict[str, Any]:
        return {
            "start_node": [int(s) for s in self.start_node],
            "face_index_start": int(self.face_index_start),
            "max_search_distance": float(self.max_search_distance),
            "n_nodes": int(self.n_nodes),
            "n_faces": int(self.n_faces),
            "n_edges": int(self.n_edges),
            "n_reached": int(self.table.visited.sum()),
        }


def _paths_frame(table: DistanceTable) -> pd.DataFrame:
    prev = table.predecessor
    return pd.DataFrame({
        "node_id": np.arange(1, table.n_nodes + 1),
        "prev_id": pd.Series(prev + 1, dtype="Int64").mask(prev < 0),
        "distance": np.where(table.visited, table.distance, np.nan),
    })


def dijkstras_surface_distance(positions, faces, start_node, face_index_start=None,
                               max_search_distance: Optional[float] = None,
                               cancel=None, timeout: Optional[float] = None) -> SurfaceDistance:
    """
    Distances along the edges of a graph ((M,2) `faces`) or triangle mesh ((M,3) `faces`).

    Args:
        positions: (N, 1|2|3) vertex coordinates, no NaN
        faces: connectivity rows referencing `positions` rows
        start_node: start node(s), in the same indexing as `faces`
        face_index_start: value that denotes the first vertex in `faces`;
            None (default) uses the minimum index found in `faces`
        max_search_distance: inclusive search radius; None, negative or
            non-finite searches the whole graph
        cancel, timeout: forwarded to `shortest_paths`

    Returns:
        SurfaceDistance with a per-node `paths` frame and run metadata
    """
    mesh = normalize(positions, faces, index_origin=face_index_start, start_nodes=start_node,
                     stacklevel=3)
    graph = build_graph(mesh.positions, mesh.faces)
    table = shortest_paths(graph, mesh.start_nodes, max_distance=max_search_distance,
                           cancel=cancel, timeout=timeout)
    logger.info("Surface distance: %d/%d nodes reached from %s",
                int(table.visited.sum()), graph.n_nodes, (table.start_nodes + 1).tolist())

    return SurfaceDistance(
        paths=_paths_frame(table),
        start_node=table.start_nodes + 1,
        face_index_start=mesh.index_origin,
        max_search_distance=table.max_distance,
        n_nodes=graph.n_nodes,
        n_faces=graph.n_faces,
        n_edges=graph.n_edges,
        table=table,
    )


def surface_path(x: SurfaceDistance, target_node) -> pd.DataFrame:
    """Shortest path from the start node to a 1-indexed `target_node` (columns: path, distance)."""
    if not isinstance(x, SurfaceDistance):
        raise TypeError("`x` must be a surface distance result from `dijkstras_surface_distance`")
    try:
        target = int(target_node)
    except (TypeError, ValueError, OverflowError) as exc:
        raise InvalidTargetError(f"`target_node` must be 1~{x.n_nodes}") from exc
    if not 1 <= target <= x.n_nodes:
        raise InvalidTargetError(f"`target_node` must be 1~{x.n_nodes}")

    try:
        steps = reconstruct(x.table, target - 1)
    except UnreachableError as exc:
        raise UnreachableError(
            f"Node {target} is not reachable from {x.start_node.tolist()}"
        ) from exc
    return pd.DataFrame({
        "path": np.array([v + 1 for v, _ in steps], dtype=np.int64),
        "distance": np.array([d for _, d in steps], dtype=np.float64),
    })

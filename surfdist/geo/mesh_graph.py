"""
Builds an undirected weighted graph from a mesh face list or a graph edge list.

Edge weights are Euclidean lengths between vertex positions. Edges shared by
several faces (or repeated in an edge list) keep the minimum length.
"""
import logging
from dataclasses import dataclass
from typing import Dict, Tuple

import numpy as np
from scipy import sparse
from scipy.sparse.csgraph import connected_components

from surfdist.geo.errors import InvalidWeightError, ShapeError

logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class MeshGraph:
    """Symmetric CSR adjacency; explicit zero weights are real (coincident vertices)."""
    W: sparse.csr_matrix
    n_faces: int

    @property
    def n_nodes(self) -> int:
        return self.W.shape[0]

    @property
    def n_edges(self) -> int:
        return self.W.nnz // 2

    def neighbors(self, v: int) -> Tuple[np.ndarray, np.ndarray]:
        """Neighbour indices and edge weights of vertex `v`."""
        lo, hi = self.W.indptr[v], self.W.indptr[v + 1]
        return self.W.indices[lo:hi], self.W.data[lo:hi]

    def degrees(self) -> np.ndarray:
        return np.diff(self.W.indptr)


def face_edges(faces: np.ndarray) -> np.ndarray:
    """(M,3) triangles -> (3M,2) edges (a,b),(b,c),(c,a); (M,2) edge lists pass through."""
    if faces.ndim != 2 or faces.shape[1] not in (2, 3):
        raise ShapeError("faces must be (M,2) or (M,3)")
    if faces.shape[1] == 2:
        return faces
    return np.concatenate([faces[:, [0, 1]], faces[:, [1, 2]], faces[:, [2, 0]]], axis=0)


def unique_edges(positions: np.ndarray, faces: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """Unordered edges (u < v) with their minimum Euclidean length, self-loops removed."""
    edges = face_edges(faces)
    edges = edges[edges[:, 0] != edges[:, 1]]
    u = np.minimum(edges[:, 0], edges[:, 1])
    v = np.maximum(edges[:, 0], edges[:, 1])
    w = np.linalg.norm(positions[u] - positions[v], axis=1)

    # sort by pair, then weight: the first row of each pair run is its minimum
    order = np.lexsort((w, v, u))
    u, v, w = u[order], v[order], w[order]
    first = np.ones(u.shape[0], dtype=bool)
    first[1:] = (u[1:] != u[:-1]) | (v[1:] != v[:-1])
    return np.stack((u[first], v[first]), axis=1), w[first]


def _symmetric_csr(edges: np.ndarray, weights: np.ndarray, n_nodes: int) -> sparse.csr_matrix:
    # csr built from (data, indices, indptr) keeps explicit zeros
    rows = np.concatenate([edges[:, 0], edges[:, 1]]).astype(np.int64)
    cols = np.concatenate([edges[:, 1], edges[:, 0]]).astype(np.int64)
    data = np.concatenate([weights, weights]).astype(np.float64)
    order = np.lexsort((cols, rows))
    indptr = np.zeros(n_nodes + 1, dtype=np.int64)
    np.cumsum(np.bincount(rows, minlength=n_nodes), out=indptr[1:])
    return sparse.csr_matrix((data[order], cols[order], indptr), shape=(n_nodes, n_nodes))


def build_graph(positions: np.ndarray, faces: np.ndarray) -> MeshGraph:
    """
    Build the weighted adjacency of a normalized mesh or edge list.

    Args:
        positions: (N, 3) vertex positions
        faces: (M, 2|3) 0-based connectivity, all indices in [0, N-1]

    Returns:
        MeshGraph; isolated vertices keep an empty neighbour set
    """
    positions = np.asarray(positions, dtype=np.float64)
    faces = np.asarray(faces, dtype=np.int64)
    n_nodes = positions.shape[0]

    edges, weights = unique_edges(positions, faces)
    if np.isnan(weights).any():
        raise InvalidWeightError("Edge lengths are undefined (infinite vertex positions?)")

    W = _symmetric_csr(edges, weights, n_nodes)
    logger.debug("Built graph: nodes=%d, faces=%d, edges=%d", n_nodes, faces.shape[0], edges.shape[0])
    return MeshGraph(W=W, n_faces=int(faces.shape[0]))


def component_labels(graph: MeshGraph) -> Tuple[int, np.ndarray]:
    """Number of connected components and the component id of every node."""
    n_components, labels = connected_components(graph.W, directed=False)
    return int(n_components), labels


def largest_connected_component(graph: MeshGraph) -> np.ndarray:
    """Mask of the nodes in the largest connected component.

    Ties between equally large components go to the one with the lowest id,
    so the mask is deterministic for a given face order.
    """
    _, labels = component_labels(graph)
    sizes = np.bincount(labels, minlength=1)
    return labels == int(np.argmax(sizes))


def analyze_graph_connectivity(graph: MeshGraph) -> Dict:
    """Component and degree statistics of a graph."""
    N = graph.n_nodes
    n_components, labels = component_labels(graph)
    component_sizes = np.bincount(labels)
    largest_size = int(component_sizes.max())

    degrees = graph.degrees()
    stats = {
        "n_nodes": N,
        "n_edges": graph.n_edges,
        "n_components": int(n_components),
        "largest_component_size": largest_size,
        "connectivity_ratio": largest_size / N,
        "isolated_nodes": int((degrees == 0).sum()),
        "avg_degree": float(degrees.mean()),
        "min_degree": int(degrees.min()),
        "max_degree": int(degrees.max()),
    }
    logger.info(
        "Graph connectivity: nodes=%d, edges=%d, components=%d, largest=%d (%.1f%%)",
        N, graph.n_edges, n_components, largest_size, 100 * stats["connectivity_ratio"],
    )
    return stats

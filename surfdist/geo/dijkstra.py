"""
Dijkstra shortest paths over a MeshGraph (or any symmetric scipy sparse adjacency).

A binary heap with lazy deletion; all start nodes begin at distance 0, so
several starts behave as one multi-start search. The optional radius is
inclusive: a node exactly `max_distance` away is reached.
"""
import heapq
import logging
import math
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import List, Optional, Sequence, Union

import numpy as np
from scipy import sparse
from tqdm import tqdm

from surfdist.geo.errors import (
    InvalidValueError,
    InvalidWeightError,
    SearchCancelledError,
    ShapeError,
)
from surfdist.geo.mesh_graph import MeshGraph

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Settled:
    distance: float
    predecessor: Optional[int]  # None for start nodes


@dataclass(frozen=True)
class Unreached:
    pass


NodeState = Union[Settled, Unreached]
UNREACHED = Unreached()


@dataclass(frozen=True, eq=False)
class DistanceTable:
    """
    Result of one search. Arrays are read-only copies of the ones passed in.

    distance:     (N,) float64, inf where unreached
    predecessor:  (N,) int64, -1 for start nodes and unreached nodes
    visited:      (N,) bool, True once settled
    start_nodes:  0-based start nodes
    max_distance: search radius, inf when unbounded
    settle_order: nodes in the order they were settled
    """
    distance: np.ndarray
    predecessor: np.ndarray
    visited: np.ndarray
    start_nodes: np.ndarray
    max_distance: float
    settle_order: np.ndarray

    def __post_init__(self):
        for name in ("distance", "predecessor", "visited", "start_nodes", "settle_order"):
            arr = np.array(getattr(self, name))
            arr.setflags(write=False)
            object.__setattr__(self, name, arr)

    def __len__(self) -> int:
        return self.distance.shape[0]

    @property
    def n_nodes(self) -> int:
        return self.distance.shape[0]

    def state(self, v: int) -> NodeState:
        if not self.visited[v]:
            return UNREACHED
        prev = int(self.predecessor[v])
        return Settled(float(self.distance[v]), None if prev < 0 else prev)

    def is_start(self, v: int) -> bool:
        return bool(np.isin(v, self.start_nodes))


# From mesh_graph.py we expect W to be symmetric with non-negative weights but
# hand-built sparse matrices get the same checks
def _ensure_valid_graph(W: sparse.spmatrix) -> sparse.csr_matrix:
    if not sparse.issparse(W):
        raise TypeError("W must be a scipy sparse matrix")
    if W.shape[0] != W.shape[1]:
        raise ShapeError("W must be square")
    W = sparse.csr_matrix(W)
    if W.nnz > 0 and (np.isnan(W.data).any() or (W.data < 0).any()):
        raise InvalidWeightError("Negative weights")
    return W


def _resolve_radius(max_distance) -> float:
    """Negative, NaN, infinite or missing radius means search everything."""
    if max_distance is None:
        return math.inf
    radius = float(max_distance)
    if not math.isfinite(radius) or radius < 0:
        return math.inf
    return radius


def shortest_paths(graph: Union[MeshGraph, sparse.spmatrix], start_nodes: Sequence[int],
                   max_distance: Optional[float] = None, cancel=None,
                   timeout: Optional[float] = None) -> DistanceTable:
    """
    Single search from one or more 0-based start nodes.

    Args:
        graph: MeshGraph or square sparse adjacency
        start_nodes: non-empty sequence of 0-based node indices
        max_distance: inclusive search radius; see `_resolve_radius`
        cancel: object with `is_set()` (e.g. threading.Event), checked at every pop
        timeout: seconds before the search is abandoned

    Returns:
        DistanceTable covering every node of the graph
    """
    W = _ensure_valid_graph(graph.W if isinstance(graph, MeshGraph) else graph)
    N = W.shape[0]

    starts = np.unique(np.asarray(start_nodes, dtype=np.int64).ravel())
    if starts.size == 0:
        raise InvalidValueError("start_nodes must be a non-empty sequence of node indices")
    if starts[0] < 0 or starts[-1] >= N:
        raise InvalidValueError(f"start_nodes must lie in [0, {N - 1}]")

    radius = _resolve_radius(max_distance)
    deadline = None if timeout is None else time.monotonic() + timeout

    # plain lists: element access on numpy arrays is slow inside the loop
    indptr = W.indptr.tolist()
    indices = W.indices.tolist()
    weights = W.data.tolist()
    dist = [math.inf] * N
    prev = [-1] * N
    done = [False] * N
    order: List[int] = []

    heap = []
    for s in starts.tolist():
        dist[s] = 0.0
        heap.append((0.0, s))
    heapq.heapify(heap)

    while heap:
        if cancel is not None and cancel.is_set():
            raise SearchCancelledError(f"Search cancelled after settling {len(order)} nodes")
        if deadline is not None and time.monotonic() > deadline:
            raise SearchCancelledError(f"Search timed out after settling {len(order)} nodes")

        d, v = heapq.heappop(heap)
        if done[v]:
            continue
        done[v] = True
        order.append(v)

        for k in range(indptr[v], indptr[v + 1]):
            w = indices[k]
            if done[w]:
                continue
            candidate = d + weights[k]
            if candidate < dist[w] and candidate <= radius:
                dist[w] = candidate
                prev[w] = v
                heapq.heappush(heap, (candidate, w))

    logger.debug("Dijkstra settled %d/%d nodes (radius=%s)", len(order), N, radius)
    return DistanceTable(
        distance=np.asarray(dist, dtype=np.float64),
        predecessor=np.asarray(prev, dtype=np.int64),
        visited=np.asarray(done, dtype=bool),
        start_nodes=starts,
        max_distance=radius,
        settle_order=np.asarray(order, dtype=np.int64),
    )


def run_searches(graph: MeshGraph, start_sets: Sequence[Sequence[int]],
                 max_distance: Optional[float] = None, max_workers: Optional[int] = None,
                 progress: bool = False) -> List[DistanceTable]:
    """Independent searches sharing one read-only graph; one table per start set."""
    start_sets = list(start_sets)

    def _search(starts):
        return shortest_paths(graph, starts, max_distance=max_distance)

    with ThreadPoolExecutor(max_workers=max_workers) as pool:
        results = pool.map(_search, start_sets)
        return list(tqdm(results, total=len(start_sets), desc="Dijkstra", disable=not progress))

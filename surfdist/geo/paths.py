"""Shortest-path reconstruction from a DistanceTable."""
from typing import List, Tuple

from surfdist.geo.dijkstra import DistanceTable, Settled
from surfdist.geo.errors import InvalidTargetError, UnreachableError


def reconstruct(table: DistanceTable, target: int) -> List[Tuple[int, float]]:
    """
    Walk predecessors from `target` back to a start node.

    Args:
        table: result of `shortest_paths`
        target: 0-based target node

    Returns:
        [(node, cumulative_distance), ...] ordered start -> target, both inclusive
    """
    N = table.n_nodes
    try:
        target = int(target)
    except (TypeError, ValueError, OverflowError) as exc:
        raise InvalidTargetError(f"target must be an integer node index, got {target!r}") from exc
    if not 0 <= target < N:
        raise InvalidTargetError(f"target must be in [0, {N - 1}], got {target}")

    chain = [target]
    node = target
    # a valid chain visits at most N nodes
    for _ in range(N):
        state = table.state(node)
        if not isinstance(state, Settled):
            raise UnreachableError(f"Node {target} is not reachable from {table.start_nodes.tolist()}")
        if state.predecessor is None:
            if not table.is_start(node):
                raise UnreachableError(f"Predecessor chain of node {target} ends at non-start node {node}")
            chain.reverse()
            return [(v, float(table.distance[v])) for v in chain]
        node = state.predecessor
        chain.append(node)

    raise UnreachableError(f"Predecessor chain of node {target} does not terminate (cycle)")

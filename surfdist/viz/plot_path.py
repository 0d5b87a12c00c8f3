"""
Plot a graph/mesh projection with a shortest path on top.
"""
from typing import Optional, Sequence, Tuple

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd
from matplotlib.collections import LineCollection

from surfdist.geo.mesh_graph import face_edges


def plot_surface_path(positions: np.ndarray, faces: np.ndarray, path: pd.DataFrame,
                      dims: Tuple[int, int] = (0, 1),
                      distances: Optional[Sequence[float]] = None,
                      title: str = "Dijkstra's shortest path",
                      save_path: Optional[str] = None,
                      figsize: Tuple[int, int] = (8, 8)) -> plt.Figure:
    """
    Draw edges, the path as arrows, the start (orangered) and the target (purple).

    **Arguments:**
    - positions: (N, D) vertex positions
    - faces: 0-based (M,2|3) connectivity
    - path: frame returned by `surface_path` (1-indexed `path` column)
    - dims: coordinate columns used as x and y
    - distances: optional per-node distances used to color the vertices
    - save_path: write the figure to this file when given

    **Returns:**
    - matplotlib Figure
    """
    positions = np.asarray(positions, dtype=np.float64)
    if positions.shape[1] < 3:
        positions = np.hstack([positions, np.zeros((positions.shape[0], 3 - positions.shape[1]))])
    xy = positions[:, list(dims)]
    edges = face_edges(np.asarray(faces, dtype=np.int64))
    nodes = path["path"].to_numpy() - 1

    fig, ax = plt.subplots(figsize=figsize)
    ax.add_collection(LineCollection(xy[edges], colors="#BEBEBE", linewidths=0.8, zorder=1))

    if distances is not None:
        d = np.asarray(distances, dtype=np.float64)
        reached = np.isfinite(d)
        ax.scatter(xy[~reached, 0], xy[~reached, 1], c="#BEBEBE", s=12, zorder=2)
        sc = ax.scatter(xy[reached, 0], xy[reached, 1], c=d[reached], cmap="plasma", s=16, zorder=2)
        fig.colorbar(sc, ax=ax, label="distance")
    else:
        ax.scatter(xy[:, 0], xy[:, 1], c="black", s=12, zorder=2)

    for a, b in zip(nodes[:-1], nodes[1:]):
        ax.annotate("", xy=xy[b], xytext=xy[a],
                    arrowprops=dict(arrowstyle="->", color="steelblue", lw=2, linestyle="--"),
                    zorder=3)

    ax.scatter(*xy[nodes[0]], c="orangered", s=60, zorder=4, label="start")
    ax.scatter(*xy[nodes[-1]], c="purple", s=60, zorder=4, label="target")
    ax.set_title(title)
    ax.set_xlabel("XYZ"[dims[0]])
    ax.set_ylabel("XYZ"[dims[1]])
    ax.autoscale_view()
    ax.legend(loc="best")

    if save_path is not None:
        fig.savefig(save_path, dpi=150, bbox_inches="tight")
    return fig

"""
surfdist

Shortest-path distances over graphs and triangulated surface meshes:
- Input normalization (index origin, dimension padding, range filtering)
- Weighted graph construction from edge or face lists
- Dijkstra search with optional radius
- Path reconstruction to arbitrary targets
"""

from .geo import dijkstras_surface_distance, surface_path

__version__ = "0.1.0"

__all__ = ["dijkstras_surface_distance", "surface_path"]

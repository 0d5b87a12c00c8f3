"""
Plotting helpers for distance maps and shortest paths.
"""

from .plot_path import plot_surface_path

__all__ = ["plot_surface_path"]

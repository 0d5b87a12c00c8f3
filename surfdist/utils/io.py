"""Loading vertex/face tables and writing distance results."""
from pathlib import Path
from typing import Union

import numpy as np
import yaml

from surfdist.geo.surface_distance import SurfaceDistance


def load_array(path: Union[str, Path]) -> np.ndarray:
    """Load a 2D table from .npy, .csv or whitespace-delimited .txt."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Array file not found: {path}")
    suffix = path.suffix.lower()
    if suffix == ".npy":
        arr = np.load(path)
    elif suffix == ".csv":
        arr = np.loadtxt(path, delimiter=",", ndmin=2)
    elif suffix in (".txt", ".dat"):
        arr = np.loadtxt(path, ndmin=2)
    else:
        raise ValueError(f"Unsupported array format: {suffix}")
    return arr


def save_result(result: SurfaceDistance, out_dir: Union[str, Path]) -> Path:
    """Write distances.csv and meta.yaml into `out_dir`."""
    out_dir = Path(out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)

    result.paths.to_csv(out_dir / "distances.csv", index=False)
    with open(out_dir / "meta.yaml", "w") as f:
        yaml.dump(result.meta(), f, default_flow_style=False)
    return out_dir

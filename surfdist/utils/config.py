"""YAML run configuration with defaults."""
import copy
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

DEFAULTS: Dict[str, Any] = {
    "data": {
        "positions": None,
        "faces": None,
    },
    "search": {
        "start_node": 1,
        "face_index_start": None,   # null -> minimum index in faces
        "max_search_distance": None,  # null -> whole mesh
    },
    "output": {
        "dir": "experiments/surface_distance",
        "target_node": None,
        "plot": False,
    },
}


def _merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    out = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(out.get(key), dict):
            out[key] = _merge(out[key], value)
        else:
            out[key] = value
    return out


def load_config(path: Optional[Union[str, Path]] = None) -> Dict[str, Any]:
    """Read a YAML config and fill missing keys from DEFAULTS."""
    if path is None:
        return copy.deepcopy(DEFAULTS)
    with open(path, "r") as f:
        cfg = yaml.safe_load(f) or {}
    if not isinstance(cfg, dict):
        raise ValueError(f"Config {path} must be a mapping, got {type(cfg).__name__}")
    return _merge(DEFAULTS, cfg)

"""
Utility modules for configuration and array I/O
"""

from .config import load_config
from .io import load_array, save_result

__all__ = ['load_config', 'load_array', 'save_result']

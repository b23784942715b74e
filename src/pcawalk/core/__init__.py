# Shared utilities for the demos. Explicit re-exports for a clean public API.

from .config import load_config as load_config
from .io import (
    ensure_dir as ensure_dir,
    load_yaml as load_yaml,
    save_csv as save_csv,
    save_json as save_json,
)
from .logs import get_logger as get_logger
from .manifest import Manifest as Manifest, write_manifest as write_manifest
from .timers import Timer as Timer, timed as timed
from .viz import save_image_grid as save_image_grid

__all__ = [
    "load_config",
    "ensure_dir",
    "load_yaml",
    "save_csv",
    "save_json",
    "get_logger",
    "Manifest",
    "write_manifest",
    "Timer",
    "timed",
    "save_image_grid",
]

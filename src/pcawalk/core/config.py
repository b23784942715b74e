from __future__ import annotations

from dataclasses import fields
from pathlib import Path
from typing import Any, Optional, Type, TypeVar

from .io import load_yaml

T = TypeVar("T")


def load_config(cls: Type[T], path: Optional[Path | str] = None, **overrides: Any) -> T:
    """
    Build a dataclass config from an optional YAML file plus keyword overrides.
    Overrides equal to None are ignored so unset CLI flags keep the file/default value.
    """
    data = {}
    if path is not None:
        data = load_yaml(path) or {}
        if not isinstance(data, dict):
            raise ValueError(f"{path}: expected a mapping at top level")
    data.update({k: v for k, v in overrides.items() if v is not None})

    known = {f.name for f in fields(cls)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ValueError(f"Unknown {cls.__name__} keys: {unknown}")
    return cls(**data)

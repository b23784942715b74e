from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pandas as pd
import yaml


def ensure_dir(path: Path | str) -> Path:
    p = Path(path)
    p.mkdir(parents=True, exist_ok=True)
    return p


def load_json(path: Path | str) -> Any:
    return json.loads(Path(path).read_text())


def save_json(path: Path | str, payload: Any) -> None:
    p = Path(path)
    ensure_dir(p.parent)
    p.write_text(json.dumps(payload, indent=2))


def load_yaml(path: Path | str) -> Any:
    return yaml.safe_load(Path(path).read_text())


def save_yaml(path: Path | str, payload: Any) -> None:
    p = Path(path)
    ensure_dir(p.parent)
    p.write_text(yaml.safe_dump(payload, sort_keys=False))


def save_csv(path: Path | str, frame: pd.DataFrame) -> Path:
    p = Path(path)
    ensure_dir(p.parent)
    frame.to_csv(p, index=False)
    return p

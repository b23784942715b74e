from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Sequence

import numpy as np
import pandas as pd

log = logging.getLogger("pcawalk.datasets")

COUNTY_NUMERIC_COLUMNS = [
    "area",
    "poptotal",
    "popdensity",
    "percwhite",
    "percblack",
    "percamerindan",
    "percasian",
    "percother",
    "percbelowpoverty",
    "percollege",
    "percprof",
]
COUNTY_LABEL_COLUMNS = ["state", "county"]
MIDWEST_STATES = ("IL", "IN", "MI", "OH", "WI")


def load_counties(path: Path | str, columns: Optional[Sequence[str]] = None) -> pd.DataFrame:
    """
    Read a county table (midwest-style CSV) keeping state, county and numeric columns.
    Rows with missing values are dropped.
    """
    columns = list(columns or COUNTY_NUMERIC_COLUMNS)
    df = pd.read_csv(path)
    df.columns = [c.strip() for c in df.columns]
    missing = [c for c in COUNTY_LABEL_COLUMNS + columns if c not in df.columns]
    if missing:
        raise KeyError(f"{path}: missing columns {missing}")

    df = df[COUNTY_LABEL_COLUMNS + columns].copy()
    df[columns] = df[columns].apply(pd.to_numeric, errors="coerce")
    n0 = len(df)
    df = df.dropna().reset_index(drop=True)
    if len(df) < n0:
        log.warning("%s: dropped %d row(s) with missing values", path, n0 - len(df))
    return df


def make_counties(
    n_per_state: int = 60, states: Sequence[str] = MIDWEST_STATES, seed: int = 0
) -> pd.DataFrame:
    """
    Synthetic county table with the same columns as the midwest data:
    population drives density and education, minority shares trade off against percwhite.
    """
    rng = np.random.default_rng(seed)
    frames = []
    for si, state in enumerate(states):
        n = n_per_state
        area = rng.uniform(0.02, 0.12, size=n)
        urban = rng.gamma(shape=1.2, scale=1.0 + 0.3 * si, size=n)
        jitter = (1.0 + 0.2 * rng.normal(size=n)).clip(0.2, None)
        poptotal = np.round(8000.0 + 60000.0 * urban * jitter)
        popdensity = poptotal / area
        percblack = (1.5 + 4.0 * urban + rng.gamma(1.0, 1.0, size=n)).clip(0.0, 60.0)
        percamerindan = rng.gamma(1.0, 0.3, size=n)
        percasian = (0.2 + 0.8 * urban + rng.gamma(1.0, 0.2, size=n)).clip(0.0, 20.0)
        percother = rng.gamma(1.0, 0.4, size=n)
        percwhite = 100.0 - percblack - percamerindan - percasian - percother
        percbelowpoverty = (14.0 - 1.5 * urban + 3.0 * rng.normal(size=n)).clip(2.0, 45.0)
        percollege = (15.0 + 6.0 * urban + 3.0 * rng.normal(size=n)).clip(5.0, 60.0)
        percprof = (0.25 * percollege + 0.8 * rng.normal(size=n)).clip(0.5, 25.0)
        frames.append(
            pd.DataFrame(
                {
                    "state": state,
                    "county": [f"{state}-COUNTY-{i + 1:03d}" for i in range(n)],
                    "area": area,
                    "poptotal": poptotal,
                    "popdensity": popdensity,
                    "percwhite": percwhite,
                    "percblack": percblack,
                    "percamerindan": percamerindan,
                    "percasian": percasian,
                    "percother": percother,
                    "percbelowpoverty": percbelowpoverty,
                    "percollege": percollege,
                    "percprof": percprof,
                }
            )
        )
    return pd.concat(frames, ignore_index=True)

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Hashable, List, Optional, Sequence

import pandas as pd

from pcawalk.unsupervised.errors import PCAError
from pcawalk.unsupervised.pca import DecompositionResult, decompose
from pcawalk.unsupervised.tidy import scores_frame, variance_frame

log = logging.getLogger("pcawalk.grouped")


@dataclass
class GroupedDecomposition:
    by: str
    columns: List[str]
    results: Dict[Hashable, DecompositionResult] = field(default_factory=dict)
    labels: Dict[Hashable, pd.DataFrame] = field(default_factory=dict)
    failures: Dict[Hashable, PCAError] = field(default_factory=dict)

    def variance_frame(self) -> pd.DataFrame:
        frames = [variance_frame(res).assign(**{self.by: key}) for key, res in self.results.items()]
        return _stack(frames, self.by)

    def scores_frame(self, k: Optional[int] = None) -> pd.DataFrame:
        frames = []
        for key, res in self.results.items():
            kk = None if k is None else min(k, res.n_cols)
            frames.append(scores_frame(res, self.labels.get(key), k=kk))
        return pd.concat(frames, ignore_index=True) if frames else pd.DataFrame()


def _stack(frames: List[pd.DataFrame], by: str) -> pd.DataFrame:
    if not frames:
        return pd.DataFrame()
    out = pd.concat(frames, ignore_index=True)
    return out[[by] + [c for c in out.columns if c != by]]


def decompose_groups(
    frame: pd.DataFrame,
    by: str,
    columns: Sequence[str],
    label_columns: Optional[Sequence[str]] = None,
) -> GroupedDecomposition:
    """
    Run `decompose` independently on each group of `frame`.

    A group whose matrix is degenerate (PCAError) is recorded in `failures` and skipped;
    the remaining groups still run. Label columns (default: `by` plus every non-numeric
    column not in `columns`) are kept per group for score tables.
    """
    columns = list(columns)
    missing = [c for c in [by, *columns] if c not in frame.columns]
    if missing:
        raise KeyError(f"Columns not in frame: {missing}")
    if label_columns is None:
        label_columns = [by] + [
            c
            for c in frame.columns
            if c not in columns and c != by and not pd.api.types.is_numeric_dtype(frame[c])
        ]

    n_unkeyed = int(frame[by].isna().sum())
    if n_unkeyed:
        log.warning("%d row(s) with missing %r excluded from grouping", n_unkeyed, by)

    out = GroupedDecomposition(by=by, columns=columns)
    for key, part in frame.groupby(by, sort=True):
        try:
            out.results[key] = decompose(part[columns].to_numpy(dtype=float))
        except PCAError as e:
            log.warning("group %s=%r skipped: %s", by, key, e)
            out.failures[key] = e
            continue
        out.labels[key] = part[list(label_columns)].reset_index(drop=True)
        log.debug("group %s=%r: %d rows decomposed", by, key, len(part))

    log.info(
        "decomposed %d group(s) by %r, %d skipped", len(out.results), by, len(out.failures)
    )
    return out

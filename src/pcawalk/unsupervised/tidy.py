from __future__ import annotations

from typing import Optional, Sequence

import numpy as np
import pandas as pd

from pcawalk.unsupervised.errors import InvalidInputError
from pcawalk.unsupervised.pca import DecompositionResult, explained_variance


def variance_frame(decomposition: DecompositionResult) -> pd.DataFrame:
    """One row per component: PC, std_dev, percent, cumulative."""
    rows = explained_variance(decomposition)
    return pd.DataFrame(
        {
            "PC": [r.component for r in rows],
            "std_dev": np.sqrt(decomposition.eigenvalues),
            "percent": [r.proportion for r in rows],
            "cumulative": [r.cumulative for r in rows],
        }
    )


def loadings_frame(decomposition: DecompositionResult, columns: Sequence[str]) -> pd.DataFrame:
    """Long table of the rotation matrix: one row per (variable, component)."""
    columns = list(columns)
    if len(columns) != decomposition.n_cols:
        raise InvalidInputError(
            f"Got {len(columns)} column names for {decomposition.n_cols} variables"
        )
    V = decomposition.eigenvectors
    wide = pd.DataFrame(V, columns=np.arange(1, V.shape[1] + 1))
    wide.insert(0, "column", columns)
    return wide.melt(id_vars="column", var_name="PC", value_name="value").astype({"PC": int})


def scores_frame(
    decomposition: DecompositionResult,
    labels: Optional[pd.DataFrame] = None,
    k: Optional[int] = None,
) -> pd.DataFrame:
    """
    Label columns (if any) followed by .fittedPC1 .. .fittedPCk.
    Labels ride alongside the scores and never enter the numeric core.
    """
    S = decomposition.subset(k).scores if k is not None else decomposition.scores
    fitted = pd.DataFrame(S, columns=[f".fittedPC{j + 1}" for j in range(S.shape[1])])
    if labels is None:
        return fitted
    if len(labels) != decomposition.n_rows:
        raise InvalidInputError(f"Got {len(labels)} label rows for {decomposition.n_rows} scores")
    return pd.concat([labels.reset_index(drop=True), fitted], axis=1)

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, List, NamedTuple, Optional, Tuple

import numpy as np

from pcawalk.unsupervised.errors import DecompositionError, InvalidInputError, RangeError

log = logging.getLogger("pcawalk.pca")

# stddev within this many ulps of |mean| (times sqrt(n)) is rounding noise: column is constant
ZERO_STD_ULPS = 64.0
# entries this close (relative) to a column's largest magnitude count as tied for the sign rule
SIGN_TIE_RTOL = 1e-8


def _frozen(a: np.ndarray) -> np.ndarray:
    a = np.array(a, dtype=np.float64, copy=True)
    a.setflags(write=False)
    return a


@dataclass(frozen=True)
class ScalingParams:
    mean: np.ndarray  # (d,)
    stddev: np.ndarray  # (d,) sample std, ddof=1

    def standardize(self, X: np.ndarray) -> np.ndarray:
        return (np.asarray(X, dtype=np.float64) - self.mean) / self.stddev

    def unstandardize(self, Z: np.ndarray) -> np.ndarray:
        return np.asarray(Z, dtype=np.float64) * self.stddev + self.mean


class ComponentSubset(NamedTuple):
    eigenvectors: np.ndarray  # (d, k)
    scores: np.ndarray  # (n, k)


@dataclass(frozen=True)
class DecompositionResult:
    scaling: ScalingParams
    covariance: np.ndarray  # (d, d) correlation matrix of the raw data
    eigenvalues: np.ndarray  # (d,) non-increasing
    eigenvectors: np.ndarray  # (d, d) columns = components
    scores: np.ndarray  # (n, d) standardized data projected on the components

    @property
    def n_rows(self) -> int:
        return int(self.scores.shape[0])

    @property
    def n_cols(self) -> int:
        return int(self.eigenvectors.shape[0])

    def subset(self, k: int) -> ComponentSubset:
        k = _check_k(k, self.n_cols)
        return ComponentSubset(self.eigenvectors[:, :k], self.scores[:, :k])


class VarianceRow(NamedTuple):
    component: int  # 1-based
    proportion: float
    cumulative: float


def _as_matrix(matrix) -> np.ndarray:
    try:
        X = np.asarray(matrix, dtype=np.float64)
    except (TypeError, ValueError) as e:
        raise InvalidInputError(f"Input is not a numeric matrix: {e}") from e
    if X.ndim != 2:
        raise InvalidInputError(f"Expected a 2-D matrix, got shape {X.shape}")
    return X


def _check_k(k, n_cols: int) -> int:
    if isinstance(k, bool) or not isinstance(k, (int, np.integer)):
        raise TypeError(f"k must be an integer, got {type(k).__name__}")
    k = int(k)
    if not 1 <= k <= n_cols:
        raise RangeError(f"k={k} outside [1, {n_cols}]")
    return k


def _fix_signs(V: np.ndarray) -> np.ndarray:
    """
    Flip each column so its largest-magnitude entry is positive (first one among near-ties).
    eigh may return v or -v; this makes the output solver-independent.
    """
    A = np.abs(V)
    tied = A >= (1.0 - SIGN_TIE_RTOL) * A.max(axis=0)
    idx = np.argmax(tied, axis=0)  # first tied row
    signs = np.sign(V[idx, np.arange(V.shape[1])])
    signs[signs == 0] = 1.0
    return V * signs


def scaling_params(X: np.ndarray) -> ScalingParams:
    """
    Per-column mean and sample standard deviation. Zero-variance columns are rejected,
    since standardizing them would divide by zero.
    """
    X = _as_matrix(X)
    n, d = X.shape
    if n < 2 or d < 2:
        raise InvalidInputError(f"Need at least 2 rows and 2 columns, got {n}x{d}")
    if not np.isfinite(X).all():
        raise InvalidInputError("Input contains NaN or infinite values")

    mean = X.mean(axis=0)
    std = X.std(axis=0, ddof=1)
    noise = ZERO_STD_ULPS * np.finfo(np.float64).eps * np.abs(mean) * np.sqrt(n)
    degenerate = np.flatnonzero((std == 0.0) | (std <= noise))
    if degenerate.size:
        raise InvalidInputError(f"Zero-variance column(s): {degenerate.tolist()}")
    return ScalingParams(_frozen(mean), _frozen(std))


def decompose(matrix) -> DecompositionResult:
    """
    PCA by eigendecomposition of the correlation matrix.

    matrix: (n, d) rows = observations, columns = variables.
    Returns scaling params, the (d, d) covariance of the standardized data, eigenvalues
    sorted descending, sign-normalized eigenvectors (columns) and the (n, d) scores.
    """
    X = _as_matrix(matrix)
    scaling = scaling_params(X)
    n, d = X.shape

    Z = scaling.standardize(X)
    cov = (Z.T @ Z) / (n - 1)
    cov = 0.5 * (cov + cov.T)  # exact symmetry for eigh

    try:
        vals, vecs = np.linalg.eigh(cov)
    except np.linalg.LinAlgError as e:
        raise DecompositionError(f"Eigendecomposition did not converge: {e}") from e
    if not (np.isfinite(vals).all() and np.isfinite(vecs).all()):
        raise DecompositionError("Eigensolver returned non-finite values")

    order = np.argsort(-vals, kind="stable")
    vals = np.clip(vals[order], 0.0, None)  # PSD up to rounding
    vecs = _fix_signs(vecs[:, order])
    scores = Z @ vecs

    log.debug("decompose %dx%d: top eigenvalue %.4f, trace %.4f", n, d, vals[0], vals.sum())
    return DecompositionResult(
        scaling=scaling,
        covariance=_frozen(cov),
        eigenvalues=_frozen(vals),
        eigenvectors=_frozen(vecs),
        scores=_frozen(scores),
    )


def reconstruct(decomposition: DecompositionResult, k: int) -> np.ndarray:
    """Rank-k approximation of the original matrix, in original units."""
    V_k, S_k = decomposition.subset(k)
    Z_hat = S_k @ V_k.T
    return decomposition.scaling.unstandardize(Z_hat)


def reconstruction_error(original, approx) -> float:
    """Sum of squared element-wise differences."""
    A = _as_matrix(original)
    B = _as_matrix(approx)
    if A.shape != B.shape:
        raise InvalidInputError(f"Shape mismatch: {A.shape} vs {B.shape}")
    return float(((A - B) ** 2).sum())


def error_curve(
    decomposition: DecompositionResult, original, ks: Optional[Iterable[int]] = None
) -> List[Tuple[int, float]]:
    ks = range(1, decomposition.n_cols + 1) if ks is None else ks
    return [(int(k), reconstruction_error(original, reconstruct(decomposition, k))) for k in ks]


def explained_variance(decomposition: DecompositionResult) -> List[VarianceRow]:
    vals = decomposition.eigenvalues
    total = float(vals.sum())
    if total <= 0.0:
        raise DecompositionError("Total variance is zero")
    prop = vals / total
    cum = np.cumsum(prop)
    cum[-1] = 1.0  # absorb rounding so the sequence ends exactly at 1
    return [
        VarianceRow(j + 1, float(p), float(c)) for j, (p, c) in enumerate(zip(prop, cum))
    ]


@dataclass
class PCA:
    n_components: int  # number of principal components to keep
    result_: DecompositionResult | None = None
    mean_: np.ndarray | None = None  # (d,)
    scale_: np.ndarray | None = None  # (d,)
    components_: np.ndarray | None = None  # (k, d)
    explained_variance_: np.ndarray | None = None  # (k,)
    explained_variance_ratio_: np.ndarray | None = None  # (k,)

    def fit(self, X: np.ndarray):
        res = decompose(X)
        k = _check_k(self.n_components, res.n_cols)
        ratio = np.array([row.proportion for row in explained_variance(res)])

        self.result_ = res
        self.mean_ = res.scaling.mean
        self.scale_ = res.scaling.stddev
        self.components_ = res.eigenvectors[:, :k].T
        self.explained_variance_ = res.eigenvalues[:k]
        self.explained_variance_ratio_ = ratio[:k]
        return self

    def _require_fit(self) -> DecompositionResult:
        if self.result_ is None:
            raise RuntimeError("Call fit() first.")
        return self.result_

    def transform(self, X: np.ndarray) -> np.ndarray:
        """Project (possibly new) rows onto the fitted components."""
        res = self._require_fit()
        X = _as_matrix(X)
        if X.shape[1] != res.n_cols:
            raise InvalidInputError(f"Expected {res.n_cols} columns, got {X.shape[1]}")
        return res.scaling.standardize(X) @ self.components_.T  # (n, k)

    def inverse_transform(self, Z: np.ndarray) -> np.ndarray:
        res = self._require_fit()
        return res.scaling.unstandardize(np.asarray(Z, dtype=np.float64) @ self.components_)

    def fit_transform(self, X: np.ndarray) -> np.ndarray:
        return self.fit(X).transform(X)

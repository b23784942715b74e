import numpy as np
import pytest

from pcawalk.unsupervised.errors import DecompositionError, InvalidInputError
from pcawalk.unsupervised.pca import PCA, decompose, explained_variance


def _correlated(n=300, d=6, seed=0):
    rng = np.random.default_rng(seed)
    X = rng.normal(size=(n, d))
    # make correlated
    A = rng.normal(size=(d, d))
    return X @ np.linalg.cholesky(A @ A.T)


def test_pca_variance_and_reconstruction():
    X = _correlated()
    pca = PCA(n_components=2).fit(X)
    assert pca.explained_variance_ratio_.sum() > 0.5  # top-2 capture decent variance

    Z = pca.transform(X)
    Xr = pca.inverse_transform(Z)
    rec_mse = float(np.mean((X - Xr) ** 2))
    assert rec_mse < np.var(X) * 0.6  # crude but fast gate


def test_pca_transform_matches_scores_and_requires_fit():
    X = _correlated(n=80, d=4, seed=2)
    with pytest.raises(RuntimeError):
        PCA(n_components=2).transform(X)
    pca = PCA(n_components=3)
    Z = pca.fit_transform(X)
    assert Z.shape == (80, 3)
    assert np.allclose(Z, pca.result_.scores[:, :3])
    assert pca.components_.shape == (3, 4)


def test_eigenvectors_orthonormal_and_sorted():
    X = _correlated(n=200, d=7, seed=1)
    res = decompose(X)
    V = res.eigenvectors
    assert np.allclose(V.T @ V, np.eye(7), atol=1e-8)
    assert np.all(np.diff(res.eigenvalues) <= 1e-12)
    assert np.all(res.eigenvalues >= 0.0)
    assert res.eigenvalues.sum() == pytest.approx(7.0, abs=1e-8)
    # covariance of standardized data is the correlation matrix
    assert np.allclose(res.covariance, np.corrcoef(X, rowvar=False), atol=1e-10)


def test_sign_convention_is_deterministic():
    X = _correlated(n=120, d=5, seed=3)
    res = decompose(X)
    V = res.eigenvectors
    idx = np.argmax(np.abs(V), axis=0)
    assert np.all(V[idx, np.arange(5)] > 0)
    # correlation is invariant to affine rescaling, so the components must not flip
    res2 = decompose(3.0 * X + 7.0)
    assert np.allclose(res2.eigenvectors, V, atol=1e-10)


def test_result_arrays_are_read_only():
    res = decompose(_correlated(n=30, d=3))
    with pytest.raises(ValueError):
        res.scores[0, 0] = 1.0


def test_explained_variance_rows():
    res = decompose(_correlated(n=150, d=5, seed=4))
    rows = explained_variance(res)
    assert [r.component for r in rows] == [1, 2, 3, 4, 5]
    assert sum(r.proportion for r in rows) == pytest.approx(1.0)
    cum = [r.cumulative for r in rows]
    assert all(b >= a for a, b in zip(cum, cum[1:]))
    assert cum[-1] == 1.0


def test_constant_column_rejected():
    X = np.array([[1.0, 5.0, 2.0], [2.0, 5.0, 4.0], [3.0, 5.0, 7.0], [4.0, 5.0, 1.0]])
    with pytest.raises(InvalidInputError, match=r"\[1\]"):
        decompose(X)


@pytest.mark.parametrize(
    "bad",
    [
        np.ones((1, 3)),  # one observation
        np.arange(5.0).reshape(5, 1),  # one variable
        np.arange(6.0),  # not 2-D
        np.array([[1.0, 2.0], [np.nan, 3.0], [2.0, 1.0]]),
    ],
)
def test_invalid_shapes_and_values(bad):
    with pytest.raises(InvalidInputError):
        decompose(bad)


def test_solver_failure_is_reported(monkeypatch):
    def boom(a):
        raise np.linalg.LinAlgError("Eigenvalues did not converge")

    monkeypatch.setattr(np.linalg, "eigh", boom)
    with pytest.raises(DecompositionError):
        decompose(_correlated(n=20, d=3))


@pytest.mark.parametrize("seed", range(20))
def test_two_column_signs_stable_under_rescaling(seed):
    # second component is (+-0.707, -+0.707): the two entries tie up to rounding
    X = np.random.default_rng(seed).normal(size=(30, 2))
    V = decompose(X).eigenvectors
    assert np.allclose(decompose(3.0 * X + 7.0).eigenvectors, V)
    assert V[0, 1] > 0


def test_large_offset_with_spread_accepted():
    rng = np.random.default_rng(8)
    X = rng.normal(size=(10, 3))
    X[:, 0] = 1e12 + 0.5 * rng.normal(size=10)
    res = decompose(X)
    assert res.scaling.stddev[0] > 0.1


def test_constant_float_column_rejected():
    X = np.random.default_rng(9).normal(size=(7, 3))
    X[:, 2] = 0.1
    with pytest.raises(InvalidInputError, match=r"\[2\]"):
        decompose(X)

import numpy as np
import pytest

from pcawalk.unsupervised.errors import RangeError
from pcawalk.unsupervised.pca import decompose, error_curve, reconstruct, reconstruction_error


def test_full_rank_round_trip_small_matrix():
    # columns [1,2,3,4], [2,4,6,8], [5,3,1,7]
    M = np.array([[1, 2, 5], [2, 4, 3], [3, 6, 1], [4, 8, 7]], dtype=float)
    res = decompose(M)
    assert np.max(np.abs(reconstruct(res, 3) - M)) < 1e-6
    # second column is a multiple of the first: one component carries no variance
    assert res.eigenvalues[-1] == pytest.approx(0.0, abs=1e-10)


def test_round_trip_and_shape():
    rng = np.random.default_rng(5)
    M = rng.normal(size=(40, 6)) * np.array([1, 10, 100, 0.1, 3, 7]) + 50
    res = decompose(M)
    for k in (1, 3, 6):
        assert reconstruct(res, k).shape == M.shape
    assert np.max(np.abs(reconstruct(res, 6) - M)) < 1e-6


def test_error_non_increasing_in_standardized_units():
    rng = np.random.default_rng(6)
    M = rng.normal(size=(60, 8)) @ rng.normal(size=(8, 8)) * np.arange(1, 9)
    res = decompose(M)
    Z = res.scaling.standardize(M)
    errs = [
        reconstruction_error(Z, res.scaling.standardize(reconstruct(res, k))) for k in range(1, 9)
    ]
    assert all(b <= a + 1e-9 for a, b in zip(errs, errs[1:]))


def test_error_non_increasing_with_common_column_scale():
    rng = np.random.default_rng(7)
    M = rng.normal(size=(50, 5)) @ rng.normal(size=(5, 5))
    M = (M - M.mean(0)) / M.std(0, ddof=1) * 2.0 + 10.0
    res = decompose(M)
    errs = [e for _, e in error_curve(res, M)]
    assert all(b <= a + 1e-9 for a, b in zip(errs, errs[1:]))
    assert errs[-1] < 1e-12


def test_error_non_increasing_with_mixed_column_scales():
    for seed in range(10):
        rng = np.random.default_rng(seed)
        M = rng.normal(size=(40, 6)) @ rng.normal(size=(6, 6))
        M = M * np.array([1, 10, 100, 0.1, 3, 1000]) + 5.0
        res = decompose(M)
        errs = [e for _, e in error_curve(res, M)]
        assert all(b <= a * (1 + 1e-9) + 1e-9 for a, b in zip(errs, errs[1:]))
        assert errs[0] > errs[-1]


def test_random_image_matrix_errors():
    rng = np.random.default_rng(0)
    M = rng.random((10, 10))
    res = decompose(M)
    e1 = reconstruction_error(M, reconstruct(res, 1))
    e5 = reconstruction_error(M, reconstruct(res, 5))
    e10 = reconstruction_error(M, reconstruct(res, 10))
    assert e10 == pytest.approx(0.0, abs=1e-10)
    assert e1 > e5


@pytest.mark.parametrize("k", [0, 4, -1])
def test_k_out_of_range(k):
    res = decompose(np.random.default_rng(1).normal(size=(10, 3)))
    with pytest.raises(RangeError):
        reconstruct(res, k)


def test_k_must_be_integer():
    res = decompose(np.random.default_rng(1).normal(size=(10, 3)))
    with pytest.raises(TypeError):
        reconstruct(res, 2.0)


def test_subset_columns():
    res = decompose(np.random.default_rng(2).normal(size=(12, 4)))
    sub = res.subset(2)
    assert sub.eigenvectors.shape == (4, 2)
    assert sub.scores.shape == (12, 2)

from __future__ import annotations


class PCAError(ValueError):
    """Base class for failures of the PCA core."""


class InvalidInputError(PCAError):
    """Malformed or degenerate input matrix (shape, non-finite values, zero-variance column)."""


class DecompositionError(PCAError):
    """The symmetric eigensolver failed or returned non-finite values."""


class RangeError(PCAError):
    """Requested component count is outside [1, n_cols]."""

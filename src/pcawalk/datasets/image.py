from __future__ import annotations

from pathlib import Path

import cv2
import numpy as np
import pandas as pd


def load_grayscale(path: Path | str) -> np.ndarray:
    """Read an image file as an HxW uint8 grayscale array."""
    img = cv2.imread(str(path), cv2.IMREAD_GRAYSCALE)
    if img is None:
        raise FileNotFoundError(f"Cannot read image: {path}")
    return img


def image_to_matrix(img: np.ndarray) -> np.ndarray:
    """
    HxW (or HxWx3 BGR) image -> float64 matrix of shape (W, H) in [0, 1].
    Rows are pixel columns (x), columns are pixel rows (y).
    """
    img = np.asarray(img)
    if img.ndim == 3 and img.shape[2] == 3:
        img = cv2.cvtColor(np.ascontiguousarray(img), cv2.COLOR_BGR2GRAY)
    if img.ndim != 2:
        raise ValueError(f"Expected HxW or HxWx3 image, got shape {img.shape}")
    if img.dtype == np.uint8:
        m = img.astype(np.float64) / 255.0
    else:
        m = np.clip(img.astype(np.float64), 0.0, 1.0)
    return m.T.copy()


def matrix_to_image(matrix: np.ndarray) -> np.ndarray:
    """(W, H) intensity matrix -> HxW uint8 image. Values outside [0, 1] are clipped."""
    m = np.clip(np.asarray(matrix, dtype=np.float64), 0.0, 1.0)
    return np.round(m.T * 255.0).astype(np.uint8)


def matrix_to_long(matrix: np.ndarray) -> pd.DataFrame:
    """(W, H) matrix -> long table with columns x, y, value (x, y are 1-based)."""
    m = np.asarray(matrix, dtype=np.float64)
    w, h = m.shape
    xs, ys = np.meshgrid(np.arange(1, w + 1), np.arange(1, h + 1), indexing="ij")
    return pd.DataFrame({"x": xs.ravel(), "y": ys.ravel(), "value": m.ravel()})


def long_to_matrix(frame: pd.DataFrame) -> np.ndarray:
    wide = frame.pivot(index="x", columns="y", values="value").sort_index().sort_index(axis=1)
    if wide.isna().to_numpy().any():
        raise ValueError("Long table does not cover a full x/y grid")
    return wide.to_numpy(dtype=np.float64)


def make_test_image(width: int = 96, height: int = 64, seed: int = 0) -> np.ndarray:
    """Deterministic HxW uint8 picture: gradient, a disc, stripes and mild noise."""
    rng = np.random.default_rng(seed)
    yy, xx = np.mgrid[0:height, 0:width].astype(np.float64)
    img = 0.6 * xx / max(width - 1, 1) + 0.2 * yy / max(height - 1, 1)
    r = 0.25 * min(width, height)
    disc = (xx - 0.35 * width) ** 2 + (yy - 0.5 * height) ** 2 <= r * r
    img[disc] = 0.95
    stripes = (xx > 0.65 * width) & ((yy // 4) % 2 == 0)
    img[stripes] = 0.1
    img += 0.03 * rng.normal(size=img.shape)
    return np.round(np.clip(img, 0.0, 1.0) * 255.0).astype(np.uint8)

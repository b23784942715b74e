from __future__ import annotations

from math import ceil
from pathlib import Path
from typing import Optional, Sequence

import cv2
import numpy as np


def _to_bgr(img: np.ndarray) -> np.ndarray:
    """
    Accepts HxW grayscale or HxWx3 [0..255] uint8, returns HxWx3 BGR.
    """
    if img.ndim == 2:
        return cv2.cvtColor(img, cv2.COLOR_GRAY2BGR)
    if img.ndim != 3 or img.shape[2] != 3:
        raise ValueError("Expected HxW or HxWx3 image")
    return img


def save_image_grid(
    images: Sequence[np.ndarray],
    out_path: Path | str,
    captions: Optional[Sequence[str]] = None,
    max_cols: int = 4,
    pad: int = 2,
    scale: int = 2,
) -> Path:
    """Tile images on a dark canvas (upscaled by `scale`), optionally captioned."""
    imgs = [np.ascontiguousarray(_to_bgr(np.asarray(im).astype(np.uint8))) for im in images]
    if not imgs:
        raise ValueError("No images to grid")
    if captions is not None and len(captions) != len(imgs):
        raise ValueError("captions must match images")

    H = max(im.shape[0] for im in imgs) * scale
    W = max(im.shape[1] for im in imgs) * scale

    # nearest keeps pixel blocks visible for small images
    resized = [cv2.resize(im, (W, H), interpolation=cv2.INTER_NEAREST) for im in imgs]

    cols = min(max_cols, len(resized))
    rows = ceil(len(resized) / cols)
    canvas = np.full((rows * H + (rows + 1) * pad, cols * W + (cols + 1) * pad, 3), 20, np.uint8)

    k = 0
    for r in range(rows):
        for c in range(cols):
            if k >= len(resized):
                break
            y0 = r * H + (r + 1) * pad
            x0 = c * W + (c + 1) * pad
            canvas[y0 : y0 + H, x0 : x0 + W] = resized[k]
            if captions is not None:
                cv2.putText(
                    canvas, captions[k], (x0 + 4, y0 + 14),
                    cv2.FONT_HERSHEY_SIMPLEX, 0.4, (0, 0, 255), 1, cv2.LINE_AA,
                )
            k += 1

    out = Path(out_path)
    out.parent.mkdir(parents=True, exist_ok=True)
    cv2.imwrite(str(out), canvas)
    return out

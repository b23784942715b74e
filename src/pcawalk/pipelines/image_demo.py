from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field
from typing import Dict, List, Optional

from pcawalk.core.io import ensure_dir, save_csv, save_json
from pcawalk.core.manifest import write_manifest
from pcawalk.core.timers import timed
from pcawalk.core.viz import save_image_grid
from pcawalk.datasets.image import (
    image_to_matrix,
    load_grayscale,
    make_test_image,
    matrix_to_image,
)
from pcawalk.graphics.plots import plot_scree
from pcawalk.unsupervised.pca import decompose, error_curve, reconstruct
from pcawalk.unsupervised.tidy import variance_frame

log = logging.getLogger("pcawalk.image_demo")


@dataclass
class ImageDemoConfig:
    image: Optional[str] = None  # grayscale-readable file; synthetic picture when None
    ks: List[int] = field(default_factory=lambda: [1, 2, 5, 10, 20, 40])
    out_dir: str = "outputs/pca/image"
    width: int = 96  # synthetic picture size
    height: int = 64
    seed: int = 0
    log_level: str = "INFO"
    log_file: Optional[str] = None


@dataclass
class ImageDemoResult:
    shape: tuple
    ks: List[int]
    errors: Dict[int, float]  # k -> sum of squared errors
    cumulative: Dict[int, float]  # k -> cumulative proportion of variance
    outputs: Dict[str, str]


def run_image_demo(cfg: ImageDemoConfig, config_path: Optional[str] = None) -> ImageDemoResult:
    """
    Decompose a grayscale picture (rows = pixel columns) and rebuild it from the
    first k components for every k in cfg.ks.
    """
    out_dir = ensure_dir(cfg.out_dir)
    if cfg.image:
        img = load_grayscale(cfg.image)
        inputs = [cfg.image]
    else:
        img = make_test_image(cfg.width, cfg.height, seed=cfg.seed)
        inputs = []
    M = image_to_matrix(img)
    log.info("image %dx%d -> matrix %dx%d", img.shape[1], img.shape[0], *M.shape)

    with timed("decompose", log):
        res = decompose(M)

    ks = sorted({int(k) for k in cfg.ks})
    dropped = [k for k in ks if not 1 <= k <= res.n_cols]
    if dropped:
        log.warning("ignoring k outside [1, %d]: %s", res.n_cols, dropped)
    ks = [k for k in ks if 1 <= k <= res.n_cols]
    if not ks:
        raise ValueError(f"No usable k in {cfg.ks} for {res.n_cols} components")

    var = variance_frame(res)
    errors = dict(error_curve(res, M, ks))
    cumulative = {k: float(var["cumulative"].iloc[k - 1]) for k in ks}
    for k in ks:
        log.info("k=%-4d  cum_var=%.3f  sse=%.4f", k, cumulative[k], errors[k])

    tiles = [img] + [matrix_to_image(reconstruct(res, k)) for k in ks]
    captions = ["original"] + [f"k={k}" for k in ks]
    outputs = {
        "grid_png": str(save_image_grid(tiles, out_dir / "reconstructions.png", captions)),
        "scree_png": str(plot_scree(var, out_dir, title="Image: variance explained")),
        "variance_csv": str(save_csv(out_dir / "variance.csv", var)),
    }
    errors_json = out_dir / "errors.json"
    save_json(errors_json, [{"k": k, "sse": errors[k], "cumulative": cumulative[k]} for k in ks])
    outputs["errors_json"] = str(errors_json)
    save_json(out_dir / "config.json", asdict(cfg))

    write_manifest(out_dir, "pca/image_demo", "0.1.0", config_path, inputs, outputs, cfg.seed)
    return ImageDemoResult(tuple(M.shape), ks, errors, cumulative, outputs)

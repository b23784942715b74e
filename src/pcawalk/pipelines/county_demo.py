from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field
from typing import Dict, List, Optional

import pandas as pd

from pcawalk.core.io import ensure_dir, save_csv, save_json
from pcawalk.core.manifest import write_manifest
from pcawalk.datasets.counties import COUNTY_NUMERIC_COLUMNS, load_counties, make_counties
from pcawalk.graphics.plots import plot_scores
from pcawalk.unsupervised.grouped import decompose_groups
from pcawalk.unsupervised.tidy import loadings_frame

log = logging.getLogger("pcawalk.county_demo")


@dataclass
class CountyDemoConfig:
    csv: Optional[str] = None  # midwest-style CSV; synthetic counties when None
    group_by: str = "state"
    columns: List[str] = field(default_factory=lambda: list(COUNTY_NUMERIC_COLUMNS))
    k: int = 2  # score columns kept per county
    out_dir: str = "outputs/pca/counties"
    n_per_state: int = 60  # synthetic data only
    seed: int = 0
    log_level: str = "INFO"
    log_file: Optional[str] = None


@dataclass
class CountyDemoResult:
    groups: List[str]
    skipped: Dict[str, str]  # group -> reason
    first_pc_share: Dict[str, float]  # group -> proportion of variance on PC1
    outputs: Dict[str, str]


def run_county_demo(
    cfg: CountyDemoConfig, config_path: Optional[str] = None, frame: Optional[pd.DataFrame] = None
) -> CountyDemoResult:
    """
    PCA of county statistics, one decomposition per group (state by default).
    Degenerate groups are skipped and reported instead of aborting the run.
    """
    out_dir = ensure_dir(cfg.out_dir)
    inputs: List[str] = []
    if frame is None:
        if cfg.csv:
            frame = load_counties(cfg.csv, cfg.columns)
            inputs = [cfg.csv]
        else:
            frame = make_counties(cfg.n_per_state, seed=cfg.seed)
    log.info("%d counties, %d variables", len(frame), len(cfg.columns))

    grouped = decompose_groups(frame, cfg.group_by, cfg.columns)
    if not grouped.results:
        raise ValueError(f"No group of {cfg.group_by!r} could be decomposed")

    variance = grouped.variance_frame()
    scores = grouped.scores_frame(k=cfg.k)
    loadings = pd.concat(
        [
            loadings_frame(res, cfg.columns).assign(**{cfg.group_by: key})
            for key, res in grouped.results.items()
        ],
        ignore_index=True,
    )
    first = variance[variance["PC"] == 1].set_index(cfg.group_by)["percent"]
    for key, share in first.items():
        log.info("%s=%s: PC1 explains %.1f%%", cfg.group_by, key, 100.0 * share)

    outputs = {
        "scores_csv": str(save_csv(out_dir / "scores.csv", scores)),
        "variance_csv": str(save_csv(out_dir / "variance.csv", variance)),
        "loadings_csv": str(save_csv(out_dir / "loadings.csv", loadings)),
    }
    if cfg.k >= 2:
        outputs["scores_png"] = str(plot_scores(scores, out_dir, by=cfg.group_by))
    save_json(out_dir / "config.json", asdict(cfg))
    write_manifest(out_dir, "pca/county_demo", "0.1.0", config_path, inputs, outputs, cfg.seed)

    return CountyDemoResult(
        groups=[str(g) for g in grouped.results],
        skipped={str(g): str(e) for g, e in grouped.failures.items()},
        first_pc_share={str(g): float(s) for g, s in first.items()},
        outputs=outputs,
    )

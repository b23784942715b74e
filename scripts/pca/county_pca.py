#!/usr/bin/env python
from __future__ import annotations

import argparse

from pcawalk.core.config import load_config
from pcawalk.core.logs import get_logger
from pcawalk.pipelines.county_demo import CountyDemoConfig, run_county_demo


def main():
    ap = argparse.ArgumentParser()
    ap.add_argument("--config", type=str, default=None, help="YAML config")
    ap.add_argument("--csv", type=str, default=None, help="CSV with state,county,<numeric...>")
    ap.add_argument("--group-by", type=str, default=None)
    ap.add_argument("--k", type=int, default=None)
    ap.add_argument("--out", type=str, default=None)
    args = ap.parse_args()

    cfg = load_config(
        CountyDemoConfig,
        args.config,
        csv=args.csv,
        group_by=args.group_by,
        k=args.k,
        out_dir=args.out,
    )
    get_logger("pcawalk", cfg.log_level, cfg.log_file)
    res = run_county_demo(cfg, config_path=args.config)
    print(
        f"[pca/county_pca] groups={len(res.groups)} skipped={sorted(res.skipped)} "
        f"wrote {res.outputs['scores_csv']}"
    )


if __name__ == "__main__":
    main()

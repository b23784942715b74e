from __future__ import annotations

from pathlib import Path
from typing import Optional

import matplotlib

matplotlib.use("Agg")  # headless
import matplotlib.pyplot as plt
import pandas as pd


def _ensure_dir(p: str | Path) -> Path:
    out = Path(p)
    out.mkdir(parents=True, exist_ok=True)
    return out


def plot_scree(
    variance: pd.DataFrame, out_dir: str | Path, title: str = "Variance Explained"
) -> Path:
    """Bars of per-component proportion plus the cumulative line (expects a variance_frame)."""
    out_dir = _ensure_dir(out_dir)
    fn = Path(out_dir) / "scree.png"
    plt.figure(figsize=(7, 3.5))
    plt.bar(variance["PC"], variance["percent"], color="steelblue", label="per component")
    plt.plot(
        variance["PC"], variance["cumulative"], color="black", marker="o", ms=3, label="cumulative"
    )
    plt.ylim(0, 1.02)
    plt.title(title)
    plt.xlabel("principal component")
    plt.ylabel("proportion of variance")
    plt.legend(loc="center right")
    plt.tight_layout()
    plt.savefig(fn, dpi=150)
    plt.close()
    return fn


def plot_scores(
    scores: pd.DataFrame,
    out_dir: str | Path,
    by: Optional[str] = None,
    x: str = ".fittedPC1",
    y: str = ".fittedPC2",
) -> Path:
    """Scatter of two score columns, one panel per group when `by` is given."""
    out_dir = _ensure_dir(out_dir)
    fn = Path(out_dir) / "scores.png"
    groups = list(scores.groupby(by, sort=True)) if by else [("all", scores)]
    n = max(len(groups), 1)
    fig, axes = plt.subplots(1, n, figsize=(3.2 * n, 3.2), squeeze=False)
    for ax, (key, part) in zip(axes[0], groups):
        ax.scatter(part[x], part[y], s=8, alpha=0.7)
        ax.axhline(0, color="grey", lw=0.5)
        ax.axvline(0, color="grey", lw=0.5)
        ax.set_title(str(key))
        ax.set_xlabel(x.lstrip("."))
    axes[0][0].set_ylabel(y.lstrip("."))
    fig.tight_layout()
    fig.savefig(fn, dpi=150)
    plt.close(fig)
    return fn

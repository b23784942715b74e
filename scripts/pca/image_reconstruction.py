from typing import List, Optional

import typer

from pcawalk.core.config import load_config
from pcawalk.core.logs import get_logger
from pcawalk.pipelines.image_demo import ImageDemoConfig, run_image_demo

app = typer.Typer(add_completion=False)


@app.command()
def main(
    config: Optional[str] = typer.Option(None, help="YAML config (configs/pca/image.yaml)"),
    image: Optional[str] = typer.Option(None, help="Image file; synthetic picture if omitted"),
    k: Optional[List[int]] = typer.Option(None, "--k", help="Component counts, repeatable"),
    out_dir: Optional[str] = typer.Option(None),
    seed: Optional[int] = typer.Option(None),
):
    cfg = load_config(
        ImageDemoConfig, config, image=image, ks=k or None, out_dir=out_dir, seed=seed
    )
    get_logger("pcawalk", cfg.log_level, cfg.log_file)
    res = run_image_demo(cfg, config_path=config)
    best = res.ks[-1]
    typer.echo(
        f"[pca/image] matrix={res.shape[0]}x{res.shape[1]} ks={res.ks} "
        f"sse(k={best})={res.errors[best]:.4f} -> {res.outputs['grid_png']}"
    )


if __name__ == "__main__":
    app()

import logging
from pathlib import Path

import pytest

from pcawalk.core.config import load_config
from pcawalk.core.io import ensure_dir, load_json, save_json, save_yaml
from pcawalk.core.logs import get_logger
from pcawalk.core.manifest import write_manifest
from pcawalk.pipelines.image_demo import ImageDemoConfig


def test_io_roundtrip(tmp_path: Path):
    p = tmp_path / "x" / "y.json"
    ensure_dir(p.parent)
    save_json(p, {"a": 1})
    obj = load_json(p)
    assert obj["a"] == 1


def test_load_config_yaml_and_overrides(tmp_path: Path):
    p = tmp_path / "image.yaml"
    save_yaml(p, {"ks": [1, 3], "seed": 4})
    cfg = load_config(ImageDemoConfig, p, seed=None, out_dir=str(tmp_path))
    assert cfg.ks == [1, 3] and cfg.seed == 4 and cfg.out_dir == str(tmp_path)

    save_yaml(p, {"kk": 2})
    with pytest.raises(ValueError):
        load_config(ImageDemoConfig, p)


def test_manifest_written(tmp_path: Path):
    man = write_manifest(tmp_path, "pca/test", "0.0.1", None, [], {"a": "b"}, 3)
    obj = load_json(tmp_path / "manifest.json")
    assert obj["name"] == "pca/test" and obj["seed"] == 3
    assert "numpy" in man.env


def test_logger_handlers_added_once(tmp_path: Path):
    log_file = tmp_path / "logs" / "run.log"
    log = get_logger("pcawalk.smoke", "DEBUG", log_file)
    again = get_logger("pcawalk.smoke", "INFO", log_file)
    assert log is again
    assert len(log.handlers) == 2
    assert log.level == logging.INFO
    log.info("hello")
    for h in log.handlers:
        h.flush()
    assert "| INFO | hello" in log_file.read_text()


def test_core_public_api():
    import pcawalk.core as core

    assert set(core.__all__) == {
        "load_config", "ensure_dir", "load_yaml", "save_csv", "save_json", "get_logger",
        "Manifest", "write_manifest", "Timer", "timed", "save_image_grid",
    }
    assert not hasattr(core, "load_json")

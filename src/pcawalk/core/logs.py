from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

FORMAT = "%(asctime)s | %(levelname)s | %(message)s"


def get_logger(
    name: str = "pcawalk", level: str = "INFO", log_file: Optional[Path | str] = None
) -> logging.Logger:
    """
    Named logger with a console handler and an optional file handler.
    Handlers are attached once; later calls only adjust the level.
    """
    log = logging.getLogger(name)
    lvl = getattr(logging, str(level).upper(), logging.INFO)
    log.setLevel(lvl)
    # Avoid adding multiple handlers on repeated runs
    if not log.handlers:
        fmt = logging.Formatter(FORMAT)
        ch = logging.StreamHandler()
        ch.setFormatter(fmt)
        log.addHandler(ch)
        if log_file:
            Path(log_file).parent.mkdir(parents=True, exist_ok=True)
            fh = logging.FileHandler(log_file)
            fh.setFormatter(fmt)
            log.addHandler(fh)
    for h in log.handlers:
        h.setLevel(lvl)
    return log

import logging
import sys
from pathlib import Path
from typing import Optional


def setup_logging(level: str = "INFO", log_dir: Optional[str] = None) -> None:
    """Configure root logging with a console handler and an optional file handler.

    Safe to call more than once: existing handlers are replaced, not duplicated.
    """
    root = logging.getLogger()
    root.setLevel(logging.DEBUG)

    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    ch = logging.StreamHandler(sys.stderr)
    ch.setLevel(getattr(logging, level.upper(), logging.INFO))
    ch.setFormatter(fmt)
    root.addHandler(ch)

    if log_dir:
        path = Path(log_dir)
        path.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(str(path / "todoapp.log"), encoding="utf-8")
        fh.setLevel(logging.DEBUG)
        fh.setFormatter(fmt)
        root.addHandler(fh)

    # httpx logs every request at INFO; the in-process page client makes that noisy
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.captureWarnings(True)

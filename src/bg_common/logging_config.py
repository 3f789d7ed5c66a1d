import logging
import sys


def configure_logging(level: str | int = logging.INFO) -> logging.Logger:
    """Install a single stdout handler on the root logger."""
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    root = logging.getLogger()
    root.setLevel(level)

    for existing in list(root.handlers):
        root.removeHandler(existing)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        logging.Formatter("%(asctime)s | %(levelname).1s | %(name)-30.30s | %(message)s")
    )
    root.addHandler(handler)
    return root

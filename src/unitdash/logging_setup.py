import logging
from typing import Optional

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(log_file: Optional[str] = None, level: str = "INFO") -> None:
    """Route package logs to ``log_file``; without one they are dropped.

    The dashboard owns the terminal, so nothing is ever written to stderr.
    """
    root = logging.getLogger("unitdash")
    for h in list(root.handlers):
        root.removeHandler(h)
        h.close()
    root.propagate = False
    if not log_file:
        root.addHandler(logging.NullHandler())
        return
    handler = logging.FileHandler(log_file, encoding="utf-8")
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

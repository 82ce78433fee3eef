# File: subcast/core/logging.py

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: int = logging.INFO) -> logging.Logger:
    """
    Installs a single stream handler on the package logger.
    Safe to call more than once (e.g. from tests and the process entrypoint).
    """
    root = logging.getLogger("subcast")
    root.setLevel(level)

    if not any(getattr(h, "_subcast", False) for h in root.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._subcast = True
        root.addHandler(handler)

    return root

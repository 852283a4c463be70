"""
Logging setup for the product service.

Records go to stderr and, when ``LOG_FILE`` is set, to that file as
well.  Request lines come from ``RequestLoggingMiddleware``, so
uvicorn's own access log is turned down to warnings.
"""

import logging
from pathlib import Path
from typing import Optional

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"


def setup_logging(level: str = "INFO", logfile: Optional[str] = None) -> None:
    """Configure the root logger from ``LOG_LEVEL`` and ``LOG_FILE``.

    Does nothing when the root logger already has handlers.
    """
    root = logging.getLogger()
    if root.handlers:
        # Already configured, e.g. by pytest or a repeated create_app call.
        return

    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATEFMT)

    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if logfile:
        handlers.append(logging.FileHandler(Path(logfile).resolve(), encoding="utf-8"))
    for handler in handlers:
        handler.setFormatter(formatter)
        root.addHandler(handler)

    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)

"""
Logging setup for emacs-profiles.

- Logs to stderr so command output on stdout stays clean.
- Default level: WARNING. Override via EMACS_PROFILES_LOG_LEVEL, or pass
  verbose=True for DEBUG.
- Set EMACS_PROFILES_LOG_FILE to also log to a rotating file.
"""

from __future__ import annotations

import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path


def setup_logging(verbose: bool = False) -> logging.Logger:
    level_name = os.environ.get("EMACS_PROFILES_LOG_LEVEL", "WARNING").upper()
    if verbose:
        level_name = "DEBUG"
    level = getattr(logging, level_name, logging.WARNING)

    logger = logging.getLogger("emacs_profiles")
    logger.setLevel(level)
    logger.propagate = False

    # Idempotent: one invocation may configure more than once (tests)
    for h in list(logger.handlers):
        logger.removeHandler(h)

    fmt = logging.Formatter("%(asctime)s %(levelname)s [%(name)s] %(message)s")

    ch = logging.StreamHandler()
    ch.setLevel(level)
    ch.setFormatter(fmt)
    logger.addHandler(ch)

    log_file = os.environ.get("EMACS_PROFILES_LOG_FILE")
    if log_file:
        path = Path(log_file).expanduser()
        path.parent.mkdir(parents=True, exist_ok=True)
        fh = RotatingFileHandler(path, maxBytes=1_000_000, backupCount=3)
        fh.setLevel(level)
        fh.setFormatter(fmt)
        logger.addHandler(fh)

    logger.debug("Logging initialized at level %s", level_name)
    return logger

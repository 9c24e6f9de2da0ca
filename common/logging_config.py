"""
Logging Configuration.

Every module obtains its logger through `get_logger(__name__)` so output
from the transforms and the validation checks shares one format.

Level Conventions
-----------------
- DEBUG: per-call solver diagnostics (iteration counts, residuals)
- WARNING: non-finite results returned in non-strict mode, failed checks
- ERROR: convergence failures, logged right before raising
"""

import logging
import sys


def get_logger(name: str, level: int = logging.INFO) -> logging.Logger:
    """Get a logger configured for the geodesy packages.

    Parameters
    ----------
    name : str
        Logger name (typically __name__).
    level : int
        Logging level.

    Returns
    -------
    logging.Logger
        Configured logger instance.
    """
    logger = logging.getLogger(name)

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        formatter = logging.Formatter(
            '%(asctime)s | %(name)s | %(levelname)s | %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    logger.setLevel(level)
    return logger

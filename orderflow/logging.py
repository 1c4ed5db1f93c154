"""
Logging helpers.

Loggers live under the ``orderflow`` namespace; the library never installs
handlers on import. Applications (and the examples) call
`configure_logging` once.
"""

import logging

ROOT = "orderflow"
FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger below the package root.

    Args:
        name: Dotted suffix, e.g. ``"retry"`` gives ``orderflow.retry``

    Returns:
        Logger instance
    """
    if name == ROOT or name.startswith(ROOT + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT}.{name}")


def configure_logging(level: int | str = logging.INFO) -> logging.Logger:
    """Attach a single stream handler to the package root logger."""
    logger = logging.getLogger(ROOT)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(FORMAT))
        logger.addHandler(handler)
    logger.setLevel(level)
    return logger

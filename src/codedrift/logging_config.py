"""
Logging for codedrift.

Every module logs through ``get_logger(__name__)``, which hangs off the
``codedrift`` package logger. ``setup_logging`` attaches a rich handler to
that logger at the level implied by the configured verbosity.
"""

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

ROOT_LOGGER = "codedrift"

LEVELS = {
    "quiet": logging.ERROR,
    "normal": logging.WARNING,
    "verbose": logging.DEBUG,
}


def setup_logging(verbosity: str = "normal", log_file: Optional[str] = None) -> logging.Logger:
    """
    Configure the codedrift logger.

    Handlers installed by an earlier call are replaced, so configuring once
    per command is safe in a long-lived process.

    Args:
        verbosity: "quiet" (errors only), "normal" (warnings) or "verbose" (debug)
        log_file: Optional file path to append plain-text logs to

    Returns:
        The configured codedrift logger
    """
    level = LEVELS[verbosity]
    verbose = level <= logging.DEBUG

    logger = logging.getLogger(ROOT_LOGGER)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    # stderr, so JSON reports on stdout stay parseable
    console_handler = RichHandler(
        console=Console(stderr=True),
        rich_tracebacks=True,
        tracebacks_show_locals=verbose,
        markup=False,
        show_path=verbose,
        log_time_format="[%X]",
    )
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, mode="a")
        file_handler.setFormatter(
            logging.Formatter(
                "%(asctime)s - %(name)s - %(levelname)s - %(message)s", datefmt="%Y-%m-%d %H:%M:%S"
            )
        )
        logger.addHandler(file_handler)

    logger.setLevel(level)
    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Logger for a module, namespaced under ``codedrift``."""
    if name is None:
        return logging.getLogger(ROOT_LOGGER)
    if not name.startswith(ROOT_LOGGER):
        name = f"{ROOT_LOGGER}.{name}"
    return logging.getLogger(name)

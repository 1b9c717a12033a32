"""
Logging helpers for hunkview.

Library modules only create loggers; the CLI is the single place that
configures handlers, based on the -v count.
"""

from __future__ import annotations

import logging


def verbosity_to_level(verbosity: int) -> int:
    """
    verbosity == 0 -> WARNING
    verbosity == 1 -> INFO
    verbosity >= 2 -> DEBUG
    """

    if verbosity <= 0:
        return logging.WARNING
    if verbosity == 1:
        return logging.INFO
    return logging.DEBUG


def configure_logging(verbosity: int) -> None:
    """
    Configure the root logger based on a verbosity count.
    """

    logging.basicConfig(
        level=verbosity_to_level(verbosity),
        format="%(levelname)s %(name)s: %(message)s",
    )

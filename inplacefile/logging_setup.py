"""Logging configuration for the inplacefile command line tool."""

from __future__ import annotations

import logging
import sys

_PACKAGE = "inplacefile"


def configure(*, verbose: bool = False, quiet: bool = False, reconfigure: bool = False) -> None:
    """Attach a stderr handler to the inplacefile package logger.

    *verbose* shows DEBUG records, *quiet* only ERROR and above; otherwise WARNING.

    Idempotent unless *reconfigure* is True. The library itself never calls this.
    """
    pkg_logger = logging.getLogger(_PACKAGE)
    if pkg_logger.handlers and not reconfigure:
        return
    if reconfigure:
        pkg_logger.handlers.clear()

    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.ERROR
    else:
        level = logging.WARNING
    pkg_logger.setLevel(level)

    sh = logging.StreamHandler(sys.stderr)
    sh.setLevel(level)
    sh.setFormatter(logging.Formatter("inplacefile: [%(levelname)s] %(message)s"))
    pkg_logger.addHandler(sh)

    pkg_logger.propagate = False

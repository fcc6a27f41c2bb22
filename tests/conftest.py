from __future__ import annotations

import logging

import pytest


@pytest.fixture(autouse=True)
def _reset_package_logger():
    """The CLI configures the package logger; undo that between tests."""
    pkg = logging.getLogger("inplacefile")
    yield
    pkg.handlers.clear()
    pkg.setLevel(logging.NOTSET)
    pkg.propagate = True

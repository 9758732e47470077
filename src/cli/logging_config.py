# src/cli/logging_config.py
"""
Logging setup for the vault-validate command.

Log records go to stderr; stdout is reserved for the rich report printed by
cli.validate_files.
"""

from __future__ import annotations

import logging
import sys

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def configure_logging(level: int = logging.INFO) -> None:
    """
    Set the root level and, if nothing handles records yet, log to stderr.

    The level is applied on every call so --verbose also works when an
    embedding application configured logging first.
    """
    root = logging.getLogger()
    root.setLevel(level)

    if root.handlers:
        return

    handler = logging.StreamHandler(stream=sys.stderr)
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT))
    root.addHandler(handler)

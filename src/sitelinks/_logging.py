"""Logging setup for the sitelinks package.

Modules log through ``logging.getLogger(__name__)``. The level comes from
the SITELINKS_LOG_LEVEL environment variable (default WARNING).
"""

from __future__ import annotations

import logging
import os

from rich.console import Console
from rich.logging import RichHandler


def configure_logging(level: int | str | None = None) -> None:
    """Attach a rich handler on stderr to the ``sitelinks`` logger.

    Call once at startup; later calls only adjust the level.
    """
    logger = logging.getLogger("sitelinks")

    if level is None:
        level = os.environ.get("SITELINKS_LOG_LEVEL", "WARNING").upper()
    if isinstance(level, str):
        level = getattr(logging, level, logging.WARNING)
    logger.setLevel(level)

    if logger.handlers:
        return

    handler = RichHandler(console=Console(stderr=True), show_path=False)
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
    logger.addHandler(handler)
    # avoid duplicate messages through the root logger
    logger.propagate = False

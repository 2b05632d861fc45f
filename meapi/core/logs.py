"""
Process logging setup.

Modules log through `logging.getLogger(__name__)` with `event key=value`
messages; this only wires the root handler once per process.
"""

from __future__ import annotations

import logging

from . import settings

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s - %(message)s"


def configure_logging(level: str | None = None) -> None:
    name = (level or settings.log_level()).upper()
    logging.basicConfig(
        level=getattr(logging, name, logging.INFO),
        format=LOG_FORMAT,
        datefmt="%H:%M:%S",
    )

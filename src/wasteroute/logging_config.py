"""Console logging setup for the command line entry point."""

import logging

from .config import settings

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


def configure_logging(level: str | None = None) -> None:
    """Replace any root handlers with a single stream handler."""
    root = logging.getLogger()
    root.setLevel((level or settings.log_level).upper())

    for handler in root.handlers[:]:
        root.removeHandler(handler)

    console = logging.StreamHandler()
    console.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(console)

import logging
import sys
from typing import Optional


def configure_logging(
    *,
    level: int = logging.INFO,
    formatter: Optional[logging.Formatter] = None,
) -> None:
    """Send stacklint's log records to stderr.

    Only the ``stacklint`` logger is touched, so embedding applications keep
    their own root configuration. Stdout stays reserved for diagnostics.
    """
    logger = logging.getLogger("stacklint")
    logger.handlers.clear()
    logger.setLevel(level)
    logger.propagate = False

    if formatter is None:
        formatter = logging.Formatter("%(name)s - %(levelname)s - %(message)s")

    handler = logging.StreamHandler(stream=sys.stderr)
    handler.setFormatter(formatter)
    logger.addHandler(handler)

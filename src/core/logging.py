"""Logging setup for the report scripts."""

import logging

from core.config import LOG_LEVEL

_configured = False


def configure_logging(level: str | None = None) -> None:
    """
    Configure root logging once.

    Diagnostics go to stderr so stdout carries only report lines.
    """
    global _configured
    if _configured:
        return

    resolved_level = getattr(logging, (level or LOG_LEVEL).upper(), logging.INFO)
    handler = logging.StreamHandler()  # stderr
    handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s [%(levelname)s] %(name)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )

    root = logging.getLogger()
    root.setLevel(resolved_level)
    root.addHandler(handler)

    _configured = True

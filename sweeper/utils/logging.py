"""Logging setup for the sweeper CLI and agents."""

from __future__ import annotations

import logging

from rich.logging import RichHandler

NOISY_LOGGERS = ("boto3", "botocore", "urllib3", "s3transfer")


def setup_logging(level: str = "INFO", verbose: bool = False) -> None:
    """Configure root logging with a Rich handler.

    Args:
        level: Log level name for sweeper loggers
        verbose: Also show third-party (boto3/botocore) debug output
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    root = logging.getLogger()
    for handler in list(root.handlers):
        if isinstance(handler, RichHandler):
            root.removeHandler(handler)

    handler = RichHandler(rich_tracebacks=True, show_path=verbose, markup=False)
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s", datefmt="[%X]"))
    root.addHandler(handler)
    root.setLevel(log_level)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.DEBUG if verbose else logging.WARNING)

"""Shared logging helpers for modelmerge."""

from __future__ import annotations

import logging


def configure_logging(*, level: int = logging.INFO, force: bool = False) -> None:
    """Initialise the root logger once with terse defaults.

    Mirrors ``logging.basicConfig``: the first call wins unless ``force=True`` is
    passed, which tests and bootstrap code use to reconfigure an existing setup.
    """

    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%H:%M:%S",
        force=force,
    )

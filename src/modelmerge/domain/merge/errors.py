"""Errors raised by the merge engine."""

from __future__ import annotations


class MissingModelError(ValueError):
    """Raised when a model argument required for a merge is None."""

    def __init__(self, argument: str) -> None:
        super().__init__(f"{argument} model must not be None")
        self.argument = argument

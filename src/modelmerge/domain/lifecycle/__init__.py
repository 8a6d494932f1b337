"""Create/update lifecycle for merged records."""

from __future__ import annotations

from .crud import MergeCrud, ModelNotFoundError
from .operations import (
    MergeOutcome,
    create_model,
    create_models,
    create_with_deltas,
    set_create_properties,
    set_update_properties,
    update_model,
    update_with_deltas,
)

__all__ = [
    "MergeCrud",
    "MergeOutcome",
    "ModelNotFoundError",
    "create_model",
    "create_models",
    "create_with_deltas",
    "set_create_properties",
    "set_update_properties",
    "update_model",
    "update_with_deltas",
]

"""Field-level merge engine and its change deltas."""

from __future__ import annotations

from .copying import copy_fields
from .delta import ModelDelta
from .engine import is_empty, merge_properties
from .errors import MissingModelError
from .naming import (
    DISPLAY_NAME_KEY,
    Named,
    describe_model,
    display_metadata,
    display_name,
    model_type_name,
)
from .policy import (
    MERGE_POLICY_KEY,
    MergeField,
    MergeMode,
    MergePolicy,
    field_names,
    merge_fields,
    merged,
    offers_field,
    policy_for,
)

__all__ = [
    "DISPLAY_NAME_KEY",
    "MERGE_POLICY_KEY",
    "MergeField",
    "MergeMode",
    "MergePolicy",
    "MissingModelError",
    "Named",
    "ModelDelta",
    "copy_fields",
    "describe_model",
    "display_metadata",
    "display_name",
    "field_names",
    "is_empty",
    "merge_fields",
    "merge_properties",
    "merged",
    "model_type_name",
    "offers_field",
    "policy_for",
]

"""
Base building blocks:
identity that exists as soon as a record is constructed.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from uuid import UUID, uuid4


def new_id() -> UUID:
    return uuid4()


@dataclass(eq=False, kw_only=True)
class Entity:
    """Internal identity exists immediately in the domain.

    ``id`` carries no merge policy, so merges never copy identities between records.
    """

    id: UUID = field(default_factory=new_id)

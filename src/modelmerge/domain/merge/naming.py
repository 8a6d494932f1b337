"""Human-readable names for record types and their fields."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Final, Protocol, runtime_checkable

if TYPE_CHECKING:
    from dataclasses import Field

DISPLAY_NAME_KEY: Final[str] = "display_name"


def display_metadata(name: str) -> dict[str, str]:
    """Field metadata declaring ``name`` as the display name of a plain dataclass field."""

    return {DISPLAY_NAME_KEY: name}


def display_name(field: Field[Any]) -> str:
    """Return the declared display name of ``field``, else its attribute name."""

    override = field.metadata.get(DISPLAY_NAME_KEY)
    if override:
        return str(override)
    return field.name


def model_type_name(model: object) -> str:
    """Return the logical type name of ``model``.

    Reads ``__class__`` rather than ``type()`` so transparent proxies (which
    forward ``__class__`` to the object they wrap) report the wrapped type.
    """

    return model.__class__.__name__


@runtime_checkable
class Named(Protocol):
    """A record with a human-readable name."""

    name: str | None


def describe_model(model: Named, description: str) -> str:
    """Prefix ``description`` with the type and name of ``model``: ``Tag 'jazz' was renamed``."""

    return f"{model_type_name(model)} '{model.name}' {description}"

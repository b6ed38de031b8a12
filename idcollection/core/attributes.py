"""
Attribute access for collection members.

Every query operator (filters, sorting, search, grouping) reads member
values through :func:`get_attribute`, so boxed scalars are unwrapped in
exactly one place.
"""

from __future__ import annotations

from typing import Any, Mapping


def unwrap(value: Any) -> Any:
    """Return the raw value of a boxed scalar, or ``value`` unchanged."""
    if isinstance(value, type):
        return value
    unwrap_fn = getattr(value, "unwrap", None)
    if callable(unwrap_fn):
        return unwrap_fn()
    return value


def _get_part(current: Any, part: str) -> Any:
    if isinstance(current, Mapping):
        return current.get(part)

    if isinstance(current, (list, tuple)):
        try:
            return current[int(part)]
        except (ValueError, IndexError):
            return None

    # stored fields win over methods of the same name
    get_field = getattr(type(current), "get_field", None)
    if callable(get_field):
        field = get_field(current, part)
        if field is not None:
            return field

    value = getattr(current, part, None)
    if callable(value) and not isinstance(value, type):
        # methods are read like properties
        return value()
    return value


def get_attribute(member: Any, field: str) -> Any:
    """
    Resolve a named attribute off a member.

    Supports nested access using dot notation, e.g. ``"author.name"``.
    Mappings are read by item, sequences by integer index and any other
    object by attribute; methods are called without arguments. Boxed
    scalars are unwrapped after each step.

    Args:
        member: The collection member
        field: Attribute name or dotted path

    Returns:
        The raw value, or None if any step is missing
    """
    current = member

    for part in field.split("."):
        if current is None:
            return None
        current = unwrap(_get_part(current, part))

    return current

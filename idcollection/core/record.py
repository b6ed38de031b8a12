"""
Member value types.

``Field`` is a boxed scalar and ``Record`` an identified member whose
attributes are served as fields. Collections do not require either type;
any object with an ``id()`` method (or none at all) can be stored.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass
class Field:
    """
    A named value wrapper.

    Attributes:
        key: Field name
        value: Raw underlying value

    Example:
        >>> title = Field("title", "Hello")
        >>> title.unwrap()
        'Hello'
    """

    key: str
    value: Any = None

    def unwrap(self) -> Any:
        """Return the raw value."""
        return self.value

    def is_empty(self) -> bool:
        """Check if the field holds no usable value."""
        if self.value is None:
            return True
        if isinstance(self.value, (str, list, tuple, dict, set)):
            return len(self.value) == 0
        return False

    def is_not_empty(self) -> bool:
        return not self.is_empty()

    def or_(self, fallback: Any) -> Any:
        """Return the raw value, or ``fallback`` when empty."""
        return fallback if self.is_empty() else self.value

    def __bool__(self) -> bool:
        return self.is_not_empty()

    def __str__(self) -> str:
        return "" if self.value is None else str(self.value)


@dataclass
class Record:
    """
    An identified member with named fields.

    Field values are exposed as attributes wrapped in :class:`Field`.

    Attributes:
        key: Unique identifier, returned by ``id()``
        fields: Field values by name

    Example:
        >>> record = Record("notes/first", {"title": "First", "tags": ["a"]})
        >>> record.id()
        'notes/first'
        >>> record.title.unwrap()
        'First'
    """

    key: str
    fields: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if not isinstance(self.key, str) or not self.key:
            raise ValueError("Record key must be a non-empty string")

    def id(self) -> str:
        return self.key

    def content(self) -> Dict[str, Any]:
        """Return a copy of the raw field values."""
        return dict(self.fields)

    def get_field(self, name: str) -> Optional[Field]:
        """
        Look up a stored field by name.

        Unlike attribute access this also reaches fields whose names clash
        with methods (``update``, ``content``, ``id``...).

        Returns:
            The boxed field, or None if the record has no such field
        """
        if name not in self.fields:
            return None
        return Field(name, self.fields[name])

    def __getattr__(self, name: str) -> Field:
        # only reached for names that are not real attributes
        if name.startswith("_") or name in ("key", "fields"):
            raise AttributeError(name)
        return Field(name, self.fields.get(name))

    def update(self, new_fields: Dict[str, Any]) -> Record:
        """
        Return a new record with updated fields.

        Args:
            new_fields: Fields to add/update

        Returns:
            New Record with merged fields
        """
        return Record(key=self.key, fields={**self.fields, **new_fields})

    def to_dict(self) -> Dict[str, Any]:
        """Convert record to dictionary (for serialization)."""
        return {"id": self.key, **self.fields}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Record:
        """Create record from dictionary."""
        fields = dict(data)
        key = fields.pop("id")
        return cls(key=key, fields=fields)

    def __repr__(self) -> str:
        return f"Record(id='{self.key}', fields={list(self.fields.keys())})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Record):
            return False
        return self.key == other.key and self.fields == other.fields

    def __hash__(self) -> int:
        return hash(self.key)

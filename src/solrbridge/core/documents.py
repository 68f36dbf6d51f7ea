"""Indexable input documents and the field-map transformer."""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping, MutableMapping
from typing import Any

logger = logging.getLogger(__name__)


class InputDocument(MutableMapping[str, Any]):
    """
    A document to be sent to Solr for indexing.

    Behaves like a dict of field name to value. Field names are unique;
    ``add_field`` turns a field into a multi-valued list instead of replacing it.
    """

    def __init__(self, fields: Mapping[str, Any] | None = None) -> None:
        self._fields: dict[str, Any] = {}
        if fields:
            for name, value in fields.items():
                self.set_field(name, value)

    def set_field(self, name: str, value: Any) -> None:
        """Set a field, replacing any existing value."""
        self._fields[name] = value

    def add_field(self, name: str, value: Any) -> None:
        """Add a value to a field, making it multi-valued if already present."""
        if name not in self._fields:
            self._fields[name] = value
            return

        existing = self._fields[name]
        if isinstance(existing, list):
            existing.append(value)
        else:
            self._fields[name] = [existing, value]

    def get_field_value(self, name: str) -> Any:
        """Return the first value of a field, or None if absent."""
        value = self._fields.get(name)
        if isinstance(value, list):
            return value[0] if value else None
        return value

    def to_dict(self) -> dict[str, Any]:
        """Return a shallow copy suitable for JSON encoding."""
        return dict(self._fields)

    def __getitem__(self, name: str) -> Any:
        return self._fields[name]

    def __setitem__(self, name: str, value: Any) -> None:
        self.set_field(name, value)

    def __delitem__(self, name: str) -> None:
        del self._fields[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._fields)

    def __len__(self) -> int:
        return len(self._fields)

    def __repr__(self) -> str:
        return f"InputDocument({self._fields!r})"


def fields_to_document(fields: Mapping[str, Any] | None) -> InputDocument | None:
    """
    Convert a flat field map into an indexable document.

    Args:
        fields: Mapping of field name to field value

    Returns:
        A new InputDocument, or None when fields is None or empty
    """
    if not fields:
        logger.debug("Transforming null or empty map to a null input document...")
        return None

    document = InputDocument()
    for name, value in fields.items():
        document.set_field(name, value)

    logger.debug(f"Transformed {dict(fields)!r} into {document!r}")
    return document

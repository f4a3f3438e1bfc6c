"""Explicit registry of record types, populated at startup."""

import logging
from collections.abc import Mapping
from typing import Any

from docmapper.domain.exceptions import DuplicateRecordTypeError, UnknownRecordTypeError

from .record import Record

logger = logging.getLogger(__name__)


class RecordTypeRegistry:
    """Maps record type names to their ``Record`` classes.

    Relation targets are resolved through this registry, so every type that
    is the target of a relation must be registered before records holding
    that relation are constructed.

    Usage:
        registry = RecordTypeRegistry()

        @registry.register
        class Customer(Record):
            type_name = "app:customer"
            field_defaults = {"name": None}
    """

    def __init__(self) -> None:
        self._types: dict[str, type[Record]] = {}

    def register(self, record_class: type[Record]) -> type[Record]:
        """Register ``record_class`` under its type name and bind it to this registry."""
        type_name = record_class.get_type_name()
        existing = self._types.get(type_name)
        if existing is not None and existing is not record_class:
            raise DuplicateRecordTypeError(type_name)

        self._types[type_name] = record_class
        record_class._registry = self
        logger.debug(
            "Registered record type '%s' (%d fields, %d relations)",
            type_name,
            len(record_class.field_names()),
            len(record_class.relations),
        )
        return record_class

    def get(self, type_name: str) -> type[Record]:
        try:
            return self._types[type_name]
        except KeyError:
            raise UnknownRecordTypeError(type_name) from None

    def target_of(self, owner: type[Record] | Record, field: str) -> type[Record]:
        """Return the record class a relation field of ``owner`` points at."""
        relation = owner.relations.get(field)
        if relation is None or relation.target is None:
            raise UnknownRecordTypeError(f"{owner.get_type_name()}.{field}")
        return self.get(relation.target)

    def create(self, type_name: str, document: Mapping[str, Any] | None = None) -> Record:
        """Construct a record of ``type_name`` from a raw document."""
        return self.get(type_name)(document)

    def type_names(self) -> list[str]:
        return list(self._types)

    def __contains__(self, type_name: object) -> bool:
        return type_name in self._types

    def __len__(self) -> int:
        return len(self._types)

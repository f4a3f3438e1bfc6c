"""Record: the typed, change-tracked document at the heart of the mapper.

A record type is a ``Record`` subclass that declares its fields and its
relations to other record types:

    class Order(Record):
        type_name = "app:order"
        field_defaults = {"reference": None, "total": 0}
        relations = {
            "customer": Relation.one("app:customer"),
            "lines": Relation.many("app:orderline", inverse="order"),
        }

Relation targets are looked up in the ``RecordTypeRegistry`` the class is
registered with, never by module or class name.
"""

import copy
from collections.abc import Iterator, Mapping
from dataclasses import replace
from typing import Any, ClassVar, TYPE_CHECKING

from docmapper.domain.exceptions import UnknownRelationError

from .relation import Relation

if TYPE_CHECKING:
    from .registry import RecordTypeRegistry

RESERVED_FIELDS = ("id", "created", "updated")


class Record:
    """Base class for every record type."""

    type_name: ClassVar[str] = "Record"
    field_defaults: ClassVar[dict[str, Any]] = {}
    relations: ClassVar[dict[str, Relation]] = {}

    _declared_fields: ClassVar[dict[str, Any]] = dict.fromkeys(RESERVED_FIELDS)
    _registry: ClassVar["RecordTypeRegistry | None"] = None

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        if not cls.__dict__.get("type_name"):
            cls.type_name = cls.__name__

        cls.relations = {
            name: relation if relation.target else replace(relation, target=name)
            for name, relation in cls.relations.items()
        }

        declared: dict[str, Any] = dict.fromkeys(RESERVED_FIELDS)
        declared.update(cls.field_defaults)
        for name in cls.relations:
            declared.setdefault(name, None)
        cls._declared_fields = declared

    def __init__(self, values: Mapping[str, Any] | None = None):
        self._data: dict[str, Any] = copy.deepcopy(self._declared_fields)
        self._changed_fields: dict[str, None] = {}
        self._validation_errors: dict[str, Any] = {}

        for field, value in (values or {}).items():
            if field in self._data:
                self._data[field] = value

        self.resolve_relations()

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.type_name} id={self.get_id()!r}>"

    # ── Field access ─────────────────────────────────────────────────

    def get(self, field: str, default: Any = None) -> Any:
        """Return the stored value of ``field``, or ``default`` when the field is unknown."""
        return self._data[field] if field in self._data else default

    def set(self, field: str, value: Any) -> bool:
        """Store ``value`` and mark ``field`` as changed.

        Returns False without touching the record when ``field`` is not
        declared on this type.
        """
        if field not in self._data:
            return False

        self._data[field] = value
        self._changed_fields[field] = None
        return True

    def has_field(self, field: str) -> bool:
        return field in self._data

    def items(self) -> Iterator[tuple[str, Any]]:
        """Iterate ``(field, value)`` pairs in declaration order."""
        return iter(list(self._data.items()))

    def relation_for(self, field: str) -> Relation | None:
        return self.relations.get(field)

    def _store(self, field: str, value: Any) -> None:
        """Write a value without marking the field as changed."""
        self._data[field] = value

    # ── Conversion ───────────────────────────────────────────────────

    def to_dict(self, fields: list[str] | None = None) -> dict[str, Any]:
        """Flatten the record, and every related record it holds, to plain data.

        ``None`` values are omitted rather than emitted. When ``fields`` is
        given only those field names are included.
        """
        from docmapper.domain.relation_resolver import flatten_record

        return flatten_record(self, fields)

    def from_dict(self, values: Mapping[str, Any]) -> None:
        """Overwrite every declared field present in ``values``; unknown keys are ignored."""
        for field, value in values.items():
            if field in self._data:
                self._data[field] = value
                self._changed_fields[field] = None

    def resolve_relations(self) -> None:
        """Expand raw relation data into child records (runs on construction)."""
        from docmapper.domain.relation_resolver import resolve_relations

        resolve_relations(self)

    def clone(self) -> "Record":
        """Return an unsaved copy of this record without ``id``, ``created`` or ``updated``."""
        cloned = dict(self._data)
        cloned["id"] = None
        cloned.pop("created", None)
        cloned.pop("updated", None)
        return type(self)(cloned)

    def add_related(self, related: "Record") -> bool:
        """Attach ``related`` through the relation whose target is its type.

        A MANY relation gets the record appended; a ONE relation is replaced.

        Raises:
            UnknownRelationError: If this type declares no relation to the
                related record's type.
        """
        related_type = related.get_type_name()
        for field, relation in self.relations.items():
            if relation.target != related_type:
                continue

            if relation.is_many:
                current = self._data.get(field) or []
                if not isinstance(current, list):
                    current = [current]
                return self.set(field, [*current, related])
            return self.set(field, related)

        raise UnknownRelationError(self.get_type_name(), related_type)

    # ── Bookkeeping ──────────────────────────────────────────────────

    def get_id(self) -> Any:
        return self.get("id")

    def get_created(self) -> Any:
        return self.get("created")

    def get_updated(self) -> Any:
        return self.get("updated")

    def set_validation_errors(self, errors: Mapping[str, Any] | None) -> None:
        self._validation_errors = dict(errors or {})

    def get_validation_errors(self) -> dict[str, Any]:
        return dict(self._validation_errors)

    def get_changed_fields(self) -> list[str]:
        return list(self._changed_fields)

    def clear_changed_fields(self) -> None:
        self._changed_fields = {}

    @classmethod
    def get_type_name(cls) -> str:
        return cls.type_name

    @classmethod
    def field_names(cls) -> list[str]:
        return list(cls._declared_fields)

    def reset(self) -> None:
        """Null every field and forget pending changes."""
        for field in self._data:
            self._data[field] = None
        self.clear_changed_fields()

"""Conversion between raw nested documents and typed child records.

Three directions are covered:

* ``resolve_relations``   raw document data -> child ``Record`` instances
* ``flatten_record``      ``Record`` graph -> plain nested data (``to_dict``)
* ``project_identifiers`` ``Record`` values -> their identifiers (write payloads)
"""

from collections.abc import Iterable
from typing import Any

from docmapper.domain.entities.record import Record
from docmapper.domain.entities.relation import Relation
from docmapper.domain.exceptions import UnknownRecordTypeError

_SCALARS = (str, int, float, bool)


def is_scalar(value: Any) -> bool:
    return isinstance(value, _SCALARS)


def as_sequence(value: Any) -> list[Any]:
    """Return a MANY relation value as a list; ``None`` becomes an empty list."""
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]


# ── Raw data -> records ──────────────────────────────────────────────


def resolve_relations(record: Record) -> None:
    """Expand every non-empty relation field of ``record`` into child records.

    Scalars are identifiers and are wrapped as ``{"id": value}`` before the
    child is constructed. Values that are already records are kept as-is.
    The expansion does not mark any field as changed.
    """
    for field, relation in record.relations.items():
        raw = record.get(field)
        if raw is None or (isinstance(raw, (list, tuple, dict)) and not raw):
            continue

        if relation.is_many:
            children = [_build_child(record, field, relation, item) for item in as_sequence(raw)]
            record._store(field, children)
        else:
            record._store(field, _build_child(record, field, relation, raw))


def _build_child(owner: Record, field: str, relation: Relation, raw: Any) -> Any:
    if isinstance(raw, Record) or raw is None:
        return raw

    registry = owner._registry
    if registry is None:
        raise UnknownRecordTypeError(relation.target or field)
    child_class = registry.target_of(owner, field)

    if is_scalar(raw):
        raw = {"id": raw}
    return child_class(raw)


# ── Records -> plain data ────────────────────────────────────────────


def flatten_record(
    record: Record,
    fields: Iterable[str] | None = None,
    _active: set[int] | None = None,
) -> dict[str, Any]:
    """Flatten ``record`` to a plain mapping, omitting ``None`` values.

    ONE relations are flattened through the child's own fields, or passed
    through when they already hold a bare identifier. MANY relations keep
    their order; ``None`` elements and elements that are still raw
    lists/mappings are skipped. A record met again inside its own branch is
    emitted as its identifier.
    """
    wanted = set(fields) if fields else None
    active = _active if _active is not None else set()
    active.add(id(record))

    try:
        result: dict[str, Any] = {}
        for field, value in record.items():
            if wanted is not None and field not in wanted:
                continue
            if value is None:
                continue

            relation = record.relation_for(field)
            if relation is None:
                result[field] = value
            elif relation.is_many:
                items = [
                    flatten_value(item, active)
                    for item in as_sequence(value)
                    if item is not None and not isinstance(item, (list, tuple, dict))
                ]
                if items:
                    result[field] = items
            else:
                result[field] = flatten_value(value, active)
        return result
    finally:
        active.discard(id(record))


def flatten_value(value: Any, _active: set[int] | None = None) -> Any:
    if not isinstance(value, Record):
        return value

    active = _active if _active is not None else set()
    if id(value) in active:
        return value.get_id()
    return flatten_record(value, None, active)


# ── Records -> identifiers ───────────────────────────────────────────


def project_identifiers(payload: dict[str, Any]) -> dict[str, Any]:
    """Replace every record in a write payload by its identifier.

    Lists are projected element by element; mappings and scalars are sent
    unchanged.
    """
    return {field: _project(value) for field, value in payload.items()}


def _project(value: Any) -> Any:
    if isinstance(value, Record):
        return value.get_id()
    if isinstance(value, (list, tuple)):
        return [_project(item) for item in value]
    return value


def related_records(record: Record, field: str) -> list[Record]:
    """Return the records currently held by a relation field (bare identifiers excluded)."""
    relation = record.relation_for(field)
    if relation is None:
        return []

    value = record.get(field)
    if relation.is_many:
        return [item for item in as_sequence(value) if isinstance(item, Record)]
    return [value] if isinstance(value, Record) else []

"""Schema loader: compiles YAML record type definitions into registered ``Record`` classes.

A schema document lists the types under ``types``:

    types:
      - name: Customer
        type_name: "app:customer"
        fields:
          name: null
          newsletter: false
      - name: Order
        type_name: "app:order"
        fields: [reference, total]
        relations:
          customer:
            cardinality: one
            target: "app:customer"
          lines:
            cardinality: many
            target: "app:orderline"
            inverse: order

A relation may also be written as just its cardinality (``customer: one``),
in which case the target is the type registered under the field name.
"""

import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml

from docmapper.domain.entities import Cardinality, Record, RecordTypeRegistry, Relation
from docmapper.domain.exceptions import SchemaDefinitionError

logger = logging.getLogger(__name__)


class SchemaLoader:
    """Builds record classes from schema documents and registers them."""

    def __init__(self, registry: RecordTypeRegistry):
        self._registry = registry

    def load_file(self, path: str | Path) -> list[type[Record]]:
        """Load every type defined in the YAML file at ``path``."""
        path = Path(path)
        data = self._load_yaml(path)
        if data is None:
            return []

        record_types = self.load_data(data)
        logger.info("Loaded %d record type(s) from %s", len(record_types), path)
        return record_types

    def load_data(self, data: Mapping[str, Any]) -> list[type[Record]]:
        """Register every type defined in an already-parsed schema mapping."""
        record_types = []
        for entry in data.get("types", []) or []:
            if not isinstance(entry, dict) or "name" not in entry:
                logger.warning("Skipping schema entry without a name: %r", entry)
                continue
            record_type = self._build_type(entry)
            self._registry.register(record_type)
            record_types.append(record_type)

        return record_types

    def _build_type(self, entry: dict) -> type[Record]:
        """Map a raw YAML dict to a ``Record`` subclass."""
        name = str(entry["name"])
        if not name.isidentifier():
            raise SchemaDefinitionError(name, "name must be a valid identifier")

        fields = entry.get("fields") or {}
        if isinstance(fields, list):
            fields = dict.fromkeys(fields)
        elif not isinstance(fields, dict):
            raise SchemaDefinitionError(name, "fields must be a mapping or a list of names")

        relations = {
            field: self._build_relation(name, field, spec)
            for field, spec in (entry.get("relations") or {}).items()
        }

        return type(
            name,
            (Record,),
            {
                "__module__": __name__,
                "__doc__": (entry.get("description") or "").strip() or None,
                "type_name": entry.get("type_name", name),
                "field_defaults": fields,
                "relations": relations,
            },
        )

    @staticmethod
    def _build_relation(type_name: str, field: str, spec: Any) -> Relation:
        if isinstance(spec, str):
            spec = {"cardinality": spec}
        if not isinstance(spec, dict):
            raise SchemaDefinitionError(type_name, f"relation '{field}' must be a mapping")

        try:
            cardinality = Cardinality(str(spec.get("cardinality", "one")).lower())
        except ValueError:
            raise SchemaDefinitionError(
                type_name, f"relation '{field}' has unknown cardinality {spec.get('cardinality')!r}"
            ) from None

        return Relation(
            cardinality=cardinality,
            target=spec.get("target"),
            inverse=spec.get("inverse"),
        )

    def _load_yaml(self, path: Path) -> dict | None:
        """Load and parse a YAML file, returning None on error."""
        try:
            with open(path, "r", encoding="utf-8") as f:
                return yaml.safe_load(f)
        except Exception:
            logger.exception("Failed to parse schema file: %s", path)
            return None

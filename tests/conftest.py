"""Shared fixtures: an in-memory document service and a small order domain."""

import copy
import itertools
from collections import defaultdict
from types import SimpleNamespace
from typing import Any

import pytest

from docmapper.application.interfaces import Transport
from docmapper.application.schemas import TransportResponse
from docmapper.domain.entities import Record, RecordTypeRegistry, Relation


# ── Fakes ────────────────────────────────────────────────────────────


class FakeTransport(Transport):
    """In-memory document service recording every call it receives.

    ``required`` maps a type name to the fields a create must carry;
    missing ones are reported back as validation errors.
    """

    def __init__(self):
        self.documents: dict[str, dict[Any, dict]] = defaultdict(dict)
        self.calls: list[tuple[str, str, dict | None, dict | None]] = []
        self.required: dict[str, list[str]] = {}
        self.failing_updates: set[str] = set()
        self.failing_deletes: set[str] = set()
        self.read_error: str | None = None
        self._ids = itertools.count(1)

    def calls_for(self, verb: str) -> list[tuple[str, str, dict | None, dict | None]]:
        return [call for call in self.calls if call[0] == verb]

    def create(self, type_name, payload):
        self.calls.append(("create", type_name, None, copy.deepcopy(payload)))

        missing = [f for f in self.required.get(type_name, []) if payload.get(f) in (None, "")]
        if missing:
            return TransportResponse.model_validate({
                "success": False,
                "failedDocuments": [{"validationErrors": {f: "required" for f in missing}}],
            })

        new_id = f"{type_name.lower()}-{next(self._ids)}"
        document = {k: v for k, v in payload.items() if v is not None}
        document["id"] = new_id
        self.documents[type_name][new_id] = document
        return TransportResponse.model_validate({
            "success": True,
            "createdDocuments": [copy.deepcopy(document)],
        })

    def read(self, type_name, filter=None, query=None):
        self.calls.append(("read", type_name, copy.deepcopy(filter), copy.deepcopy(query)))
        if self.read_error is not None:
            return TransportResponse.failure(self.read_error)

        filter = filter or {}
        matches = [
            copy.deepcopy(doc)
            for doc in self.documents[type_name].values()
            if all(doc.get(key) == value for key, value in filter.items())
        ]
        limit = (query or {}).get("limit")
        if limit is not None:
            matches = matches[:limit]
        return TransportResponse(success=True, documents=matches)

    def update(self, type_name, filter, payload):
        self.calls.append(("update", type_name, copy.deepcopy(filter), copy.deepcopy(payload)))
        if type_name in self.failing_updates:
            return TransportResponse.failure("update rejected")

        document = self.documents[type_name].get(filter.get("id"))
        if document is not None:
            document.update(payload)
        return TransportResponse(success=True)

    def delete(self, type_name, filter):
        self.calls.append(("delete", type_name, copy.deepcopy(filter), None))
        if type_name in self.failing_deletes:
            return TransportResponse.failure("delete rejected")

        removed = self.documents[type_name].pop(filter.get("id"), None)
        return TransportResponse(success=True, deleted=removed is not None)


# ── Fixtures ─────────────────────────────────────────────────────────


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def registry() -> RecordTypeRegistry:
    return RecordTypeRegistry()


@pytest.fixture
def models(registry: RecordTypeRegistry) -> SimpleNamespace:
    """Customer ⟷ Order ⟷ OrderLine, registered into a fresh registry."""

    @registry.register
    class Customer(Record):
        field_defaults = {"name": None, "email": None, "tags": []}
        relations = {"orders": Relation.many("Order")}

    @registry.register
    class Order(Record):
        field_defaults = {"reference": None, "total": 0, "note": None}
        relations = {
            "customer": Relation.one("Customer", inverse="orders"),
            "lines": Relation.many("OrderLine", inverse="order"),
        }

    @registry.register
    class OrderLine(Record):
        field_defaults = {"sku": None, "quantity": 1}
        relations = {"order": Relation.one("Order")}

    return SimpleNamespace(Customer=Customer, Order=Order, OrderLine=OrderLine)

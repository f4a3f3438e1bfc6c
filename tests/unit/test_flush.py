"""Unit tests for SaveOrchestrator queueing and flush."""

import pytest

from docmapper.application.services import SaveOrchestrator
from docmapper.domain.entities import FlushResult


@pytest.fixture
def orchestrator(transport) -> SaveOrchestrator:
    return SaveOrchestrator(transport)


def test_persist_and_delete_only_enqueue(orchestrator, transport, models):
    customer = models.Customer({"name": "Ada"})
    stale = models.Customer({"id": "c-1"})

    assert orchestrator.persist(customer).delete(stale) is orchestrator

    assert orchestrator.pending_persists == [customer]
    assert orchestrator.pending_deletes == [stale]
    assert transport.calls == []


def test_flush_reports_only_failed_persist(orchestrator, transport, models):
    transport.required["Customer"] = ["name"]
    existing = models.Customer({"name": "Old"})
    orchestrator.save_entity(existing)
    transport.calls.clear()

    good = models.Customer({"name": "Ada"})
    bad = models.Customer({"email": "nameless@example.com"})
    orchestrator.persist(good).persist(bad).delete(existing)

    result = orchestrator.flush()

    assert isinstance(result, FlushResult)
    assert not result
    assert len(result.failures) == 1
    assert result.failures[0].record is bad
    assert result.failures[0].validation_errors == {"name": "required"}
    assert good.get_id() is not None
    assert transport.calls[-1][0] == "delete"
    assert orchestrator.pending_persists == []
    assert orchestrator.pending_deletes == []


def test_flush_without_failures_is_truthy(orchestrator, models):
    orchestrator.persist(models.Customer({"name": "Ada"}))

    result = orchestrator.flush()

    assert result
    assert result.ok is True
    assert result.failures == []


def test_flush_of_empty_queues_succeeds(orchestrator, transport):
    assert orchestrator.flush().ok is True
    assert transport.calls == []


def test_deletes_run_after_persists_regardless_of_queue_order(orchestrator, transport, models):
    doomed = models.Customer({"name": "Doomed"})
    orchestrator.save_entity(doomed)
    transport.calls.clear()

    orchestrator.delete(doomed)
    orchestrator.persist(models.Customer({"name": "Ada"}))
    orchestrator.flush()

    assert [call[0] for call in transport.calls] == ["create", "delete"]


def test_every_delete_is_attempted_after_a_failure(orchestrator, transport, models):
    first = models.Customer({"id": "c-404"})
    second = models.Customer({"name": "Ada"})
    orchestrator.save_entity(second)

    orchestrator.delete(first).delete(second)
    result = orchestrator.flush()

    assert [failure.record for failure in result.failures] == [first]
    assert len(transport.calls_for("delete")) == 2
    assert transport.documents["Customer"] == {}


def test_deletes_run_even_if_persists_failed(orchestrator, transport, models):
    transport.required["Customer"] = ["name"]
    doomed = models.Customer({"name": "Doomed"})
    orchestrator.save_entity(doomed)

    orchestrator.persist(models.Customer()).delete(doomed)
    result = orchestrator.flush()

    assert len(result.failures) == 1
    assert transport.calls[-1] == ("delete", "Customer", {"id": doomed.get_id()}, None)


def test_flush_recovers_cascade_failure_and_continues(orchestrator, transport, models):
    transport.required["Customer"] = ["name"]
    order = models.Order({"reference": "A-1"})
    order.set("customer", models.Customer())
    other = models.Order({"reference": "B-2"})

    orchestrator.persist(order).persist(other)
    result = orchestrator.flush()

    assert len(result.failures) == 1
    failed = result.failures[0]
    assert failed.record is order
    assert "name" in failed.validation_errors
    assert "customer" in failed.message
    assert order.get_id() is None
    assert other.get_id() is not None


def test_queues_are_cleared_after_flush(orchestrator, transport, models):
    transport.failing_updates.add("Customer")
    customer = models.Customer({"id": "c-1"})
    customer.set("name", "Ada")

    orchestrator.persist(customer)
    assert orchestrator.flush().ok is False

    assert orchestrator.flush().ok is True
    assert len(transport.calls_for("update")) == 1

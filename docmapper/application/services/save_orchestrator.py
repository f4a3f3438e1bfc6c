"""Save orchestration: queues persists and deletes and flushes them in one pass.

Saving a record cascades depth-first through its relations: every related
record that has no identifier yet is created before the record that
references it, so the owner's payload can carry the children's
identifiers instead of nested documents.
"""

import logging
from typing import Any

from docmapper.application.interfaces import Transport
from docmapper.application.schemas import TransportResponse
from docmapper.application.services.record_repository import RecordRepository
from docmapper.domain.entities import (
    FailedRecord,
    Failure,
    FlushResult,
    OperationResult,
    Record,
    Success,
)
from docmapper.domain.exceptions import RelationSaveFailedError
from docmapper.domain.relation_resolver import as_sequence, project_identifiers, related_records

logger = logging.getLogger(__name__)


class SaveOrchestrator:
    """Unit of work over a ``Transport``.

    ``persist`` and ``delete`` only enqueue; nothing reaches the document
    service until ``flush`` (or a direct ``save_entity``/``delete_entity``
    call). Instances are not safe for concurrent use from several threads.
    """

    def __init__(self, transport: Transport):
        self._transport = transport
        self._to_persist: list[Record] = []
        self._to_delete: list[Record] = []
        self._saving: set[int] = set()

    # ── Queue ────────────────────────────────────────────────────────

    def persist(self, record: Record) -> "SaveOrchestrator":
        """Queue ``record`` (and, through the cascade, its unsaved relations) for saving."""
        self._to_persist.append(record)
        return self

    def delete(self, record: Record) -> "SaveOrchestrator":
        """Queue ``record`` for deletion."""
        self._to_delete.append(record)
        return self

    @property
    def pending_persists(self) -> list[Record]:
        return list(self._to_persist)

    @property
    def pending_deletes(self) -> list[Record]:
        return list(self._to_delete)

    def flush(self) -> FlushResult:
        """Run every queued persist, then every queued delete, and empty both queues.

        A failure never stops the pass: each queued record is attempted and
        every failure ends up in the returned ``FlushResult``. Deletes always
        run after all persists, whatever order they were queued in.
        """
        to_persist, self._to_persist = self._to_persist, []
        to_delete, self._to_delete = self._to_delete, []
        failures: list[FailedRecord] = []

        for record in to_persist:
            try:
                result = self.save_entity(record)
            except RelationSaveFailedError as e:
                logger.warning("Cascade save of %s failed: %s", record.get_type_name(), e)
                failures.append(
                    FailedRecord(
                        record=record,
                        validation_errors=dict.fromkeys(e.failed_fields),
                        message=str(e),
                    )
                )
                continue
            failures.extend(result.failures)

        for record in to_delete:
            failures.extend(self.delete_entity(record).failures)

        logger.info(
            "Flushed %d persist(s) and %d delete(s) with %d failure(s)",
            len(to_persist),
            len(to_delete),
            len(failures),
        )
        return FlushResult(failures)

    # ── Saving ───────────────────────────────────────────────────────

    def save_entity(self, record: Record) -> OperationResult:
        """Save ``record`` now, creating or updating it.

        A record without an identifier is created with all of its fields; an
        existing record is updated with its changed fields only. In both
        cases unsaved related records are created first.

        Returns:
            ``Success(record)`` with the identifier assigned on create, or
            ``Failure`` listing the record with the reported validation errors.

        Raises:
            RelationSaveFailedError: If a related record could not be saved.
                The owning record is not written in that case.
        """
        key = id(record)
        if key in self._saving:
            return Success(record)

        self._saving.add(key)
        try:
            if record.get_id() is None:
                return self._create(record)
            return self._update(record)
        finally:
            self._saving.discard(key)

    def save_related_entity(self, record: Record, field: str) -> list[Record]:
        """Create every unsaved record held by relation ``field`` of ``record``.

        Records that already carry an identifier, bare identifiers and
        records already being saved further up the cascade are left alone.
        The first failing child aborts the cascade.

        Returns:
            The related records created by this call, in relation order.

        Raises:
            RelationSaveFailedError: If a related record could not be saved.
        """
        saved: list[Record] = []
        for child in related_records(record, field):
            if child.get_id() is not None or id(child) in self._saving:
                continue

            result = self.save_entity(child)
            if not result.ok:
                failed_fields = [
                    name for failure in result.failures for name in failure.validation_errors
                ]
                raise RelationSaveFailedError(record.get_type_name(), field, failed_fields)
            saved.append(child)

        return saved

    def _create(self, record: Record) -> OperationResult:
        type_name = record.get_type_name()
        cascaded: list[tuple[str, Record]] = []
        payload: dict[str, Any] = {}

        for field, _ in record.items():
            if record.relation_for(field) is not None:
                cascaded.extend((field, child) for child in self.save_related_entity(record, field))
            payload[field] = record.get(field)

        record.clear_changed_fields()

        logger.debug("Creating %s (%d cascaded)", type_name, len(cascaded))
        response = self._transport.create(type_name, project_identifiers(payload))

        if not response.success or not response.created_documents:
            return self._failed(record, response, "create")

        record.set("id", response.created_id)
        record.set_validation_errors(None)
        self._backfill_inverse(record, cascaded)
        record.clear_changed_fields()

        logger.debug("Created %s id=%s", type_name, record.get_id())
        return Success(record)

    def _update(self, record: Record) -> OperationResult:
        type_name = record.get_type_name()
        payload: dict[str, Any] = {}

        for field in record.get_changed_fields():
            if record.relation_for(field) is not None:
                self.save_related_entity(record, field)
            payload[field] = record.get(field)

        # Changes count as flushed even if the update below is rejected
        record.clear_changed_fields()

        if not payload:
            return Success(record)

        logger.debug("Updating %s id=%s fields=%s", type_name, record.get_id(), list(payload))
        response = self._transport.update(
            type_name, {"id": record.get_id()}, project_identifiers(payload)
        )

        if not response.success:
            return self._failed(record, response, "update")

        record.set_validation_errors(None)
        return Success(record)

    def _backfill_inverse(self, record: Record, cascaded: list[tuple[str, Record]]) -> None:
        """Write the new identifier of ``record`` into the back-reference of its created children."""
        record_id = record.get_id()

        for field, child in cascaded:
            relation = record.relation_for(field)
            if relation is None or not relation.is_bidirectional:
                continue

            inverse = relation.inverse
            inverse_relation = child.relation_for(inverse)
            if inverse_relation is not None and inverse_relation.is_many:
                current = [
                    item
                    for item in as_sequence(child.get(inverse))
                    if item is not record and item != record_id
                ]
                value: Any = [*current, record_id]
            else:
                value = record_id

            if not child.set(inverse, value):
                logger.debug(
                    "%s has no field '%s' to back-reference %s",
                    child.get_type_name(),
                    inverse,
                    record.get_type_name(),
                )

    # ── Deleting ─────────────────────────────────────────────────────

    def delete_entity(self, record: Record) -> OperationResult:
        """Delete ``record`` now. A record without an identifier is a no-op success."""
        if record.get_id() is None:
            return Success(record)

        type_name = record.get_type_name()
        logger.debug("Deleting %s id=%s", type_name, record.get_id())
        response = self._transport.delete(type_name, {"id": record.get_id()})

        if not response.success or not response.deleted:
            logger.warning(
                "Delete of %s id=%s failed: %s",
                type_name,
                record.get_id(),
                response.message or "not deleted",
            )
            return Failure([FailedRecord(record=record, message=response.message)])

        return Success(record)

    # ── Helpers ──────────────────────────────────────────────────────

    def _failed(self, record: Record, response: TransportResponse, verb: str) -> Failure:
        errors = response.validation_errors()
        record.set_validation_errors(errors)
        logger.warning(
            "%s of %s rejected: %s",
            verb.capitalize(),
            record.get_type_name(),
            ", ".join(errors) or response.message or "no reason given",
        )
        return Failure([FailedRecord(record=record, validation_errors=errors, message=response.message)])

    def get_repository(self, record_type: type[Record]) -> RecordRepository:
        """Return a query repository for ``record_type`` bound to this orchestrator's transport."""
        return RecordRepository(record_type, self._transport)

"""Query repository: reads documents of one record type through a transport."""

import logging
from typing import Any, Literal

from docmapper.application.interfaces import Transport
from docmapper.application.schemas import TransportResponse
from docmapper.application.services.record_collection import RecordCollection
from docmapper.domain.entities import Record
from docmapper.domain.exceptions import RemoteError

logger = logging.getLogger(__name__)


class RecordRepository:
    """Turns transport read responses into records of the bound type."""

    def __init__(self, record_type: type[Record], transport: Transport):
        self._record_type = record_type
        self._transport = transport

    @property
    def record_type(self) -> type[Record]:
        return self._record_type

    @property
    def type_name(self) -> str:
        return self._record_type.get_type_name()

    def read(
        self,
        filter: dict[str, Any] | None = None,
        query: dict[str, Any] | None = None,
    ) -> RecordCollection:
        """Return every record matching ``filter``.

        Raises:
            RemoteError: If the document service reports a failure.
        """
        response = self._transport.read(self.type_name, dict(filter or {}), dict(query or {}))
        self._validate_response(response)
        return RecordCollection(self._record_type(document) for document in response.documents)

    def read_one(
        self,
        filter: dict[str, Any] | None = None,
        query: dict[str, Any] | None = None,
    ) -> Record | Literal[False]:
        """Return the first record matching ``filter``, or False when nothing matches.

        Raises:
            RemoteError: If the document service reports a failure.
        """
        query = {**(query or {}), "limit": 1}
        response = self._transport.read(self.type_name, dict(filter or {}), query)
        self._validate_response(response)

        if not response.documents:
            return False
        return self._record_type(response.documents[0])

    def rollback(self, record: Record) -> bool:
        """Overwrite ``record`` with its current remote state.

        Every field returned by the document service is written back through
        ``set``, so each of them ends up in the changed set. Returns False
        when the record has no identifier or could not be re-read.
        """
        record_id = record.get_id()
        if record_id is None:
            return False

        response = self._transport.read(record.get_type_name(), {"id": record_id}, {})
        if not response.success or not response.documents:
            logger.warning(
                "Rollback of %s id=%s failed: %s",
                record.get_type_name(),
                record_id,
                response.message or "document not found",
            )
            return False

        document = response.documents[0]
        refreshed = type(record)(document)

        record.clear_changed_fields()
        for field in document:
            record.set(field, refreshed.get(field))

        return True

    def _validate_response(self, response: TransportResponse) -> None:
        if not response.success:
            raise RemoteError(self.type_name, response.message)

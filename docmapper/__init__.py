"""docmapper: a lightweight object-document mapper over a create/read/update/delete transport."""

from docmapper.application.interfaces import Transport
from docmapper.application.schemas import TransportResponse
from docmapper.application.services import (
    RecordCollection,
    RecordRepository,
    SaveOrchestrator,
    SchemaLoader,
)
from docmapper.domain.entities import (
    Cardinality,
    FailedRecord,
    Failure,
    FlushResult,
    Record,
    RecordTypeRegistry,
    Relation,
    Success,
)
from docmapper.domain.exceptions import (
    DuplicateRecordTypeError,
    RelationSaveFailedError,
    RemoteError,
    SchemaDefinitionError,
    UnknownRecordTypeError,
    UnknownRelationError,
)

__version__ = "0.1.0"

__all__ = [
    "Cardinality",
    "DuplicateRecordTypeError",
    "FailedRecord",
    "Failure",
    "FlushResult",
    "Record",
    "RecordCollection",
    "RecordRepository",
    "RecordTypeRegistry",
    "Relation",
    "RelationSaveFailedError",
    "RemoteError",
    "SaveOrchestrator",
    "SchemaDefinitionError",
    "SchemaLoader",
    "Success",
    "Transport",
    "TransportResponse",
    "UnknownRecordTypeError",
    "UnknownRelationError",
]

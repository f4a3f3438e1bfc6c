from .relation import Cardinality, Relation
from .record import RESERVED_FIELDS, Record
from .registry import RecordTypeRegistry
from .results import FailedRecord, Failure, FlushResult, OperationResult, Success

__all__ = [
    "Cardinality",
    "Relation",
    "RESERVED_FIELDS",
    "Record",
    "RecordTypeRegistry",
    "FailedRecord",
    "Failure",
    "FlushResult",
    "OperationResult",
    "Success",
]

from .record_collection import RecordCollection
from .record_repository import RecordRepository
from .save_orchestrator import SaveOrchestrator
from .schema_loader import SchemaLoader

__all__ = [
    "RecordCollection",
    "RecordRepository",
    "SaveOrchestrator",
    "SchemaLoader",
]

"""Tagged results of save, delete and flush operations."""

from dataclasses import dataclass, field
from typing import Any

from .record import Record


@dataclass
class FailedRecord:
    """A record whose create, update or delete was rejected by the document service."""

    record: Record
    validation_errors: dict[str, Any] = field(default_factory=dict)
    message: str | None = None

    @property
    def type_name(self) -> str:
        return self.record.get_type_name()


@dataclass
class Success:
    """The operation went through; ``record`` is the (updated) record."""

    record: Record

    ok = True

    @property
    def failures(self) -> list[FailedRecord]:
        return []


@dataclass
class Failure:
    """The operation was rejected; ``failures`` lists every failed record."""

    failures: list[FailedRecord]

    ok = False

    @property
    def record(self) -> Record | None:
        return self.failures[0].record if self.failures else None


OperationResult = Success | Failure


@dataclass
class FlushResult:
    """Outcome of flushing the pending queues.

    Truthy only when every queued persist and delete went through.
    """

    failures: list[FailedRecord] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures

    def __bool__(self) -> bool:
        return self.ok

    def __len__(self) -> int:
        return len(self.failures)

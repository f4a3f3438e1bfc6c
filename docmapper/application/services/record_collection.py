"""Read-only sequence of records returned by repository reads."""

from collections.abc import Iterable, Iterator, Sequence
from typing import Any, overload

from docmapper.domain.entities import Record


class RecordCollection(Sequence[Record]):
    """An ordered, immutable list of records that can flatten itself to plain data."""

    def __init__(self, records: Iterable[Record] = ()):
        self._records = list(records)

    @overload
    def __getitem__(self, index: int) -> Record: ...

    @overload
    def __getitem__(self, index: slice) -> "RecordCollection": ...

    def __getitem__(self, index: int | slice) -> "Record | RecordCollection":
        if isinstance(index, slice):
            return RecordCollection(self._records[index])
        return self._records[index]

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[Record]:
        return iter(self._records)

    def __repr__(self) -> str:
        return f"RecordCollection({self._records!r})"

    def first(self) -> Record | None:
        return self._records[0] if self._records else None

    def to_list(self) -> list[Any]:
        """Flatten every record, including records nested in plain lists or dicts."""
        return [_to_plain(item) for item in self._records]


def _to_plain(value: Any) -> Any:
    if isinstance(value, Record):
        return value.to_dict()
    if isinstance(value, list):
        return [_to_plain(item) for item in value]
    if isinstance(value, dict):
        return {key: _to_plain(item) for key, item in value.items()}
    return value

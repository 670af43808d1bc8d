"""Record store protocol."""
from typing import Protocol, runtime_checkable

from bbnotify.parse.models import ScheduleRecord


@runtime_checkable
class RecordStore(Protocol):
    """Persistence backend for schedule records, keyed by code."""

    def find(self, code: str) -> list[ScheduleRecord]:
        """Return stored records whose code matches (possibly none)."""
        ...

    def upsert(self, record: ScheduleRecord) -> None:
        """Insert the record or overwrite the one stored under its code."""
        ...

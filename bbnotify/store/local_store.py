"""Local JSON file store, used for dry runs."""
import logging
from pathlib import Path

import orjson

from bbnotify.errors import StoreError
from bbnotify.parse.models import ScheduleRecord

logger = logging.getLogger(__name__)


class LocalRecordStore:
    """Keeps records in a single JSON file, one entry per code."""

    def __init__(self, path: Path):
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)

    def _load(self) -> dict[str, dict]:
        if not self.path.exists():
            return {}
        try:
            return orjson.loads(self.path.read_bytes())
        except (OSError, orjson.JSONDecodeError) as e:
            raise StoreError(f"Failed to read local store {self.path}: {e}") from e

    def find(self, code: str) -> list[ScheduleRecord]:
        row = self._load().get(code)
        return [ScheduleRecord.from_row(row)] if row is not None else []

    def upsert(self, record: ScheduleRecord) -> None:
        rows = self._load()
        rows[record.code] = record.to_row()
        try:
            self.path.write_bytes(orjson.dumps(rows, option=orjson.OPT_INDENT_2))
        except OSError as e:
            raise StoreError(f"Failed to write local store {self.path}: {e}") from e
        logger.debug(f"Saved code={record.code} to {self.path}")

"""Supabase-backed record store."""
import logging
from typing import Optional

from supabase import create_client, Client

from bbnotify.config import Config
from bbnotify.errors import StoreError
from bbnotify.parse.models import ScheduleRecord

logger = logging.getLogger(__name__)


class SupabaseRecordStore:
    """Reads and upserts schedule records in a Supabase table keyed by code."""

    def __init__(self, config: Config, client: Optional[Client] = None):
        if client is None:
            if not config.supabase_url or not config.supabase_service_role:
                raise ValueError("Supabase configuration missing")
            client = create_client(config.supabase_url, config.supabase_service_role)
        self.client: Client = client
        self.table = config.supabase_table

    def find(self, code: str) -> list[ScheduleRecord]:
        """Return stored records with the given code."""
        try:
            response = (
                self.client.table(self.table)
                .select("*")
                .eq("code", code)
                .execute()
            )
        except Exception as e:
            logger.error(f"Supabase query error for code={code}: {e}")
            raise StoreError(f"Failed to query {self.table} for code={code}: {e}") from e
        return [ScheduleRecord.from_row(row) for row in response.data or []]

    def upsert(self, record: ScheduleRecord) -> None:
        """Insert or overwrite the row for the record's code."""
        try:
            (
                self.client.table(self.table)
                .upsert(record.to_row(), on_conflict="code")
                .execute()
            )
        except Exception as e:
            logger.error(f"Supabase upsert error for code={record.code}: {e}")
            raise StoreError(f"Failed to upsert code={record.code} into {self.table}: {e}") from e
        logger.debug(f"Upserted code={record.code} to Supabase")

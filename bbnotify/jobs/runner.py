"""Main job runner: fetch, parse, diff against the store, notify."""
import logging
import time
import uuid
from contextlib import ExitStack, contextmanager
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Iterator, Optional

from bbnotify.config import Config
from bbnotify.fetch.client import FetchClient
from bbnotify.jobs.triggers import NEW_LISTING_TITLE, due_milestones, tomorrow
from bbnotify.notify.base import Notifier
from bbnotify.notify.slack import LogNotifier, SlackNotifier
from bbnotify.parse.models import ScheduleRecord
from bbnotify.parse.schedule_parser import parse_schedule_page
from bbnotify.store.base import RecordStore
from bbnotify.store.local_store import LocalRecordStore
from bbnotify.store.supabase_store import SupabaseRecordStore

logger = logging.getLogger(__name__)


@dataclass
class RunReport:
    """Counters for one run."""

    run_id: str
    tomorrow: date
    parsed: int = 0
    processed: int = 0
    new_listings: int = 0
    milestone_notifications: int = 0
    upserted: int = 0
    start_time: float = field(default_factory=time.time)

    def get_summary(self) -> dict:
        """Get summary statistics."""
        return {
            "run_id": self.run_id,
            "tomorrow": self.tomorrow.isoformat(),
            "parsed": self.parsed,
            "processed": self.processed,
            "new_listings": self.new_listings,
            "milestone_notifications": self.milestone_notifications,
            "upserted": self.upserted,
            "elapsed_seconds": round(time.time() - self.start_time, 2),
        }


class ScheduleRunner:
    """
    Runs one notification pass over the schedule page.

    Records are handled strictly in page order. For each record the store
    is queried before the record is written, so "new listing" means the
    code was absent before this run touched it. Any store or notifier error
    propagates immediately; records already handled keep their effects.
    """

    def __init__(
        self,
        config: Config,
        fetcher: FetchClient,
        store: RecordStore,
        notifier: Notifier,
        now: Optional[datetime] = None,
    ):
        self.config = config
        self.fetcher = fetcher
        self.store = store
        self.notifier = notifier
        self.now = now

    def run(self) -> RunReport:
        """Fetch the page and process every record on it."""
        logger.info("START: book-building notify")
        content = self.fetcher.fetch_page(self.config.schedule_url)
        records = parse_schedule_page(content, self.config.base_url)
        report = self.process(records)
        self._final_report(report)
        return report

    def process(self, records: list[ScheduleRecord], day: Optional[date] = None) -> RunReport:
        """Diff records against the store, notify, and upsert every record."""
        if day is None:
            day = tomorrow(self.now or datetime.now(self.config.tz), self.config.tz)

        report = RunReport(run_id=str(uuid.uuid4()), tomorrow=day, parsed=len(records))
        logger.info(f"Run ID: {report.run_id}, tomorrow is {day.isoformat()}")

        for record in records:
            self._process_record(record, day, report)
        return report

    def _process_record(self, record: ScheduleRecord, day: date, report: RunReport) -> None:
        existing = self.store.find(record.code)
        if not existing:
            logger.info(f"New listing: code={record.code} {record.company_name}")
            self.notifier.send(NEW_LISTING_TITLE, record)
            report.new_listings += 1

        self.store.upsert(record)
        report.upserted += 1

        for milestone in due_milestones(record, day):
            logger.info(f"Milestone {milestone.name} tomorrow for code={record.code}")
            self.notifier.send(milestone.title, record)
            report.milestone_notifications += 1

        report.processed += 1

    def _final_report(self, report: RunReport) -> None:
        summary = report.get_summary()
        logger.info("=" * 60)
        logger.info("FINAL REPORT")
        logger.info(f"Run ID: {summary['run_id']}")
        logger.info(f"Parsed: {summary['parsed']}")
        logger.info(f"New listings: {summary['new_listings']}")
        logger.info(f"Milestone notifications: {summary['milestone_notifications']}")
        logger.info(f"Upserted: {summary['upserted']}")
        logger.info(f"Elapsed: {summary['elapsed_seconds']}s")
        logger.info("=" * 60)


@contextmanager
def open_runner(
    config: Config,
    dry_run: bool = False,
    now: Optional[datetime] = None,
) -> Iterator[ScheduleRunner]:
    """
    Build a runner from configuration and close its HTTP clients afterwards.

    Dry runs keep records in a local JSON file and log notifications
    instead of posting them.
    """
    with ExitStack() as stack:
        fetcher = stack.enter_context(FetchClient(config))
        if dry_run:
            store: RecordStore = LocalRecordStore(config.local_store_path)
            notifier: Notifier = LogNotifier()
        else:
            store = SupabaseRecordStore(config)
            notifier = stack.enter_context(SlackNotifier(config))
        yield ScheduleRunner(config, fetcher, store, notifier, now=now)

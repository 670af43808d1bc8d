"""Milestone date checks: which notifications a record triggers for tomorrow."""
import re
from datetime import date, datetime, timedelta, tzinfo
from enum import Enum
from typing import Optional

from bbnotify.parse.models import ScheduleRecord

NEW_LISTING_TITLE = ":hatching_chick: < 新規IPO情報が公開されましたよ！"

MONTH_DAY_PATTERN = re.compile(r"^([0-9]{2})/([0-9]{2})$")
# Leap year so that 02/29 is a valid month/day
_REFERENCE_YEAR = 2000


class Milestone(Enum):
    """A tracked partial date and the message title sent the day before."""

    PROVISIONAL_CONDITION = ":hatching_chick: < 明日、仮条件が公開されますよ！"
    BOOK_BUILDING_START = ":hatching_chick: < 明日、ブックビルが開始されます！"
    RELEASE_PRICE = ":hatching_chick: < 明日、公開価格が発表されます！"
    STOCK_RELEASE = ":hatching_chick: < 明日、株式公開予定の企業があります！"

    @property
    def title(self) -> str:
        return self.value


def parse_month_day(text: str) -> Optional[tuple[int, int]]:
    """Parse "MM/DD" into (month, day); None when the text is not such a date."""
    match = MONTH_DAY_PATTERN.match(text)
    if not match:
        return None
    month, day = int(match.group(1)), int(match.group(2))
    try:
        date(_REFERENCE_YEAR, month, day)
    except ValueError:
        return None
    return month, day


def tomorrow(now: datetime, tz: tzinfo) -> date:
    """Tomorrow's date: now + 24 hours, seen in the given timezone."""
    if now.tzinfo is None:
        now = now.replace(tzinfo=tz)
    return (now + timedelta(hours=24)).astimezone(tz).date()


def is_tomorrow(text: str, day: date) -> bool:
    """Check if an "MM/DD" string falls on the given day, ignoring the year."""
    parsed = parse_month_day(text)
    return parsed is not None and parsed == (day.month, day.day)


def book_building_start(date_range: str) -> Optional[str]:
    """First date of a "MM/DD - MM/DD" range, or None if it is not a range."""
    parts = date_range.split("-")
    if len(parts) != 2:
        return None
    return parts[0].strip()


def due_milestones(record: ScheduleRecord, day: date) -> list[Milestone]:
    """Milestones of a record that fall on ``day``, in notification order."""
    due = []
    if record.provisional_condition and is_tomorrow(record.provisional_condition, day):
        due.append(Milestone.PROVISIONAL_CONDITION)

    start = book_building_start(record.book_building_date_range)
    if start is not None and is_tomorrow(start, day):
        due.append(Milestone.BOOK_BUILDING_START)

    if record.release_price and is_tomorrow(record.release_price, day):
        due.append(Milestone.RELEASE_PRICE)

    if record.stock_release_date and is_tomorrow(record.stock_release_date, day):
        due.append(Milestone.STOCK_RELEASE)
    return due

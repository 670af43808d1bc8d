"""Extract schedule records from the IPO schedule table.

The table has no explicit record delimiter. Each record spans six physical
rows: a header row marked ``iposchedulelist_tr_top`` followed by five
continuation rows. The fifth continuation row (+4) is hidden on the page
and never read.

    header  company name, detail / chart / disclosure links
    +1      公開日 | コード | 公開株数
    +2      仮条件 | 公開価格 | BB期間
    +3      初値 | 騰落率 | 主幹事
    +4      (hidden)
    +5      事業内容
"""
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Sequence, TypeVar
from urllib.parse import urljoin

from selectolax.parser import HTMLParser, Node

from bbnotify.errors import FetchError, MalformedLayoutError
from bbnotify.parse.models import ScheduleRecord
from bbnotify.parse.normalize import decode_page, normalize_text

logger = logging.getLogger(__name__)

ROW_SELECTOR = ".iposchedulelist tr"
EXCLUDED_ROW_CLASS = "iposchedulelist_tr1"
BLOCK_START_CLASS = "iposchedulelist_tr_top"

COMPANY_LINK_SELECTOR = "h2 a"
CHART_LINK_SELECTOR = "div a.minkabubtn"
RELEASE_LINK_SELECTOR = "div a.kaijibtn"

Row = TypeVar("Row")


class RowRole(Enum):
    """Role of a physical row inside one record block."""

    HEADER = 0
    FIRST = 1
    SECOND = 2
    THIRD = 3
    HIDDEN = 4
    DESCRIPTION = 5


TRAILING_ROWS = len(RowRole) - 1

# Cell position -> field name, per continuation row
FIELD_LAYOUT: dict[RowRole, tuple[str, ...]] = {
    RowRole.FIRST: ("stock_release_date", "code", "stock_count"),
    RowRole.SECOND: ("provisional_condition", "release_price", "book_building_date_range"),
    RowRole.THIRD: ("initial_price", "rise_rate", "secretary"),
    RowRole.DESCRIPTION: ("business_description",),
}


@dataclass
class RowBlock:
    """The rows of one logical record, keyed by role (hidden row excluded)."""

    index: int
    rows: dict[RowRole, Node] = field(default_factory=dict)

    @property
    def header(self):
        return self.rows[RowRole.HEADER]


def has_class(node: Node, class_name: str) -> bool:
    """Check if a node carries a CSS class."""
    return class_name in (node.attributes.get("class") or "").split()


def is_block_start(node: Node) -> bool:
    return has_class(node, BLOCK_START_CLASS)


def group_rows(
    rows: Sequence[Row],
    is_start: Callable[[Row], bool] = is_block_start,
) -> list[RowBlock]:
    """
    Walk the filtered rows and partition them into record blocks.

    Rows that are not block starts and are not owned by a block are skipped.
    The trailing row count is checked at each block start before any role is
    assigned, so a truncated table raises MalformedLayoutError naming the
    block start index instead of reading past the end.
    """
    blocks: list[RowBlock] = []
    role: RowRole | None = None
    block: RowBlock | None = None

    for i, row in enumerate(rows):
        if role is None:
            if not is_start(row):
                continue
            available = len(rows) - i - 1
            if available < TRAILING_ROWS:
                raise MalformedLayoutError(i, available)
            block = RowBlock(index=i, rows={RowRole.HEADER: row})
            role = RowRole.HEADER
            continue

        role = RowRole(role.value + 1)
        if role is not RowRole.HIDDEN:
            if is_start(row):
                raise MalformedLayoutError(
                    block.index,
                    i - block.index - 1,
                    reason=(
                        f"block starting at row {block.index} is interrupted by "
                        f"a block start at row {i} ({role.name} row expected)"
                    ),
                )
            block.rows[role] = row

        if role is RowRole.DESCRIPTION:
            blocks.append(block)
            role = None
            block = None

    return blocks


def extract_fields(role: RowRole, cells: Sequence[str]) -> dict[str, str]:
    """Map the cells of a continuation row to record fields."""
    names = FIELD_LAYOUT.get(role, ())
    return {name: normalize_text(cell) for name, cell in zip(names, cells)}


def _link_href(node: Node, selector: str) -> str:
    link = node.css_first(selector)
    if link is None:
        return ""
    return link.attributes.get("href") or ""


def assemble_record(block: RowBlock, base_url: str) -> ScheduleRecord:
    """Build one ScheduleRecord from a row block."""
    header = block.header
    values: dict[str, str] = {}

    company_link = header.css_first(COMPANY_LINK_SELECTOR)
    if company_link is not None:
        values["company_name"] = normalize_text(company_link.text())
        href = company_link.attributes.get("href")
        values["detail_url"] = urljoin(base_url, href) if href else ""

    values["chart_url"] = _link_href(header, CHART_LINK_SELECTOR)
    values["release_url"] = _link_href(header, RELEASE_LINK_SELECTOR)

    for role in FIELD_LAYOUT:
        cells = [td.text() for td in block.rows[role].css("td")]
        values.update(extract_fields(role, cells))

    return ScheduleRecord(**values)


def parse_schedule_page(content: bytes | str, base_url: str) -> list[ScheduleRecord]:
    """
    Parse the schedule page and return one record per block, in page order.

    Bytes are decoded from EUC-JP before DOM parsing so HTML entities
    expand into already decoded text.
    """
    html = decode_page(content) if isinstance(content, bytes) else content
    if not html or not html.strip():
        raise FetchError("Schedule page is empty")

    parser = HTMLParser(html)
    if parser.css_first(".iposchedulelist") is None:
        logger.warning("Schedule table .iposchedulelist not found on page")
        return []

    rows = [row for row in parser.css(ROW_SELECTOR) if not has_class(row, EXCLUDED_ROW_CLASS)]
    blocks = group_rows(rows)
    records = [assemble_record(block, base_url) for block in blocks]

    logger.info(f"Parsed {len(records)} schedules from {len(rows)} rows")
    for record in records:
        logger.debug(f"Parsed schedule: {record.model_dump()}")
    return records

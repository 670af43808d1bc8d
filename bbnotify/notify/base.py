"""Notifier protocol and message rendering."""
from typing import Protocol, runtime_checkable

from bbnotify.parse.models import ScheduleRecord


@runtime_checkable
class Notifier(Protocol):
    """Outbound notification channel."""

    def send(self, title: str, record: ScheduleRecord) -> None:
        """Deliver a message about a record. Raises NotificationError on failure."""
        ...


def render_details(record: ScheduleRecord) -> str:
    """Render the record summary shown under the message title."""
    return "\n".join(
        [
            f"企業名   : {record.company_name}",
            f"コード   : {record.code}",
            f"仮条件   : {record.provisional_condition}",
            f"公開価格 : {record.release_price}",
            f"ＢＢ期間 : {record.book_building_date_range}",
            f"公開日   : {record.stock_release_date}",
            f"公開株数 : {record.stock_count}",
            f"主幹事   : {record.secretary}",
            f"事業内容 : {record.business_description}",
            "",
            f"IPO詳細 : {record.detail_url}",
            f"株価詳細: {record.chart_url}",
            f"開示情報: {record.release_url}",
        ]
    )

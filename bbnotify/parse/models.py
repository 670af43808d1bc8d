"""Data models for scraped schedule records."""
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ScheduleRecord(BaseModel):
    """One IPO / book-building schedule entry from the schedule page."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    company_name: str = Field(default="", description="企業名")
    detail_url: str = Field(default="", description="IPO情報詳細URL")
    chart_url: str = Field(default="", description="株価・チャートURL")
    release_url: str = Field(default="", description="開示情報URL")

    stock_release_date: str = Field(default="", description="公開日, MM/DD or free text")
    code: str = Field(default="", description="コード (store key)")
    stock_count: str = Field(default="", description="公開株数")

    provisional_condition: str = Field(default="", description="仮条件, MM/DD or free text")
    release_price: str = Field(default="", description="公開価格, MM/DD or free text")
    book_building_date_range: str = Field(default="", description="BB期間, MM/DD - MM/DD")

    initial_price: str = Field(default="", description="初値")
    rise_rate: str = Field(default="", description="騰落率")
    secretary: str = Field(default="", description="主幹事")

    business_description: str = Field(default="", description="事業内容")

    def to_row(self) -> dict[str, Any]:
        """Convert to a dict for the record store."""
        return self.model_dump()

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "ScheduleRecord":
        """Build a record from a store row, ignoring store-managed columns."""
        return cls.model_validate({k: ("" if v is None else v) for k, v in row.items()})

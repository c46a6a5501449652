"""Filtering and paging of the charging history list."""

import math
from collections.abc import Iterable, Sequence
from decimal import Decimal
from typing import Optional

from chargelog.domain.aggregation import in_month
from chargelog.domain.entities import ChargingRecord, RecordPage

DEFAULT_PAGE_SIZE = 10


def matches_keyword(record: ChargingRecord, keyword: Optional[str]) -> bool:
    """Case-insensitive match against station name, vendor and notes."""
    if not keyword:
        return True
    needle = keyword.strip().lower()
    haystacks = (record.station_name, record.vendor, record.notes)
    return any(needle in (text or "").lower() for text in haystacks)


def filter_records(
    records: Iterable[ChargingRecord],
    month: Optional[str] = None,
    keyword: Optional[str] = None,
) -> list[ChargingRecord]:
    """Records dated in month (if given) that match keyword (if given)."""
    return [
        record
        for record in records
        if in_month(record, month) and matches_keyword(record, keyword)
    ]


def paginate(
    records: Sequence[ChargingRecord], page: int = 1, page_size: int = DEFAULT_PAGE_SIZE
) -> RecordPage:
    """Slice one page out of records.

    The page number is clamped into [1, total_pages]. Page totals cover only
    the records on the returned page.
    """
    if page_size < 1:
        raise ValueError("Page size must be at least 1")

    total_pages = max(1, math.ceil(len(records) / page_size))
    page = min(max(page, 1), total_pages)
    start = (page - 1) * page_size
    page_records = tuple(records[start : start + page_size])

    return RecordPage(
        records=page_records,
        page=page,
        total_pages=total_pages,
        total_count=len(records),
        total_power=sum((r.power for r in page_records), Decimal("0")),
        total_cost=sum((r.total_cost for r in page_records), Decimal("0")),
    )

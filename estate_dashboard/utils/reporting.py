"""
Period boundaries and display formatting shared by every report.
All functions are pure; callers pass `now` explicitly in tests.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from decimal import Decimal, InvalidOperation
from typing import Any, List, Optional, Tuple
import math


@dataclass(frozen=True)
class DateRange:
    """Inclusive period [start, end]."""
    start: datetime
    end: datetime

    def contains(self, moment: datetime) -> bool:
        return self.start <= moment <= self.end


@dataclass(frozen=True)
class DateRanges:
    this_month: DateRange
    last_month: DateRange
    this_year: DateRange
    last_year: DateRange


@dataclass(frozen=True)
class PriceBucket:
    label: str
    lower: Optional[Decimal]
    upper: Optional[Decimal]
    includes_upper: bool = True


# Both bounds inclusive, except "Under $500K" which stops just below 500K
PRICE_BUCKETS: Tuple[PriceBucket, ...] = (
    PriceBucket("Under $500K", None, Decimal("500000"), includes_upper=False),
    PriceBucket("$500K-$1M", Decimal("500000"), Decimal("1000000")),
    PriceBucket("$1M-$2M", Decimal("1000000"), Decimal("2000000")),
    PriceBucket("$2M-$5M", Decimal("2000000"), Decimal("5000000")),
    PriceBucket("Over $5M", Decimal("5000000"), None),
)


def _utc(now: Optional[datetime]) -> datetime:
    if now is None:
        return datetime.now(timezone.utc)
    if now.tzinfo is None:
        return now.replace(tzinfo=timezone.utc)
    return now.astimezone(timezone.utc)


def _month_start(year: int, month: int) -> datetime:
    return datetime(year, month, 1, tzinfo=timezone.utc)


def _shift_month(year: int, month: int, delta: int) -> Tuple[int, int]:
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


def _last_instant_before(moment: datetime) -> datetime:
    return moment - timedelta(microseconds=1)


def calculate_date_ranges(now: Optional[datetime] = None) -> DateRanges:
    """
    Compute the four standard reporting windows from the current instant.

    "This" windows run from their start up to now. Last month and last year
    end on the final microsecond of the period so they can be used as
    inclusive [start, end] ranges.
    """
    now = _utc(now)

    this_month_start = _month_start(now.year, now.month)
    prev_year, prev_month = _shift_month(now.year, now.month, -1)
    last_month_start = _month_start(prev_year, prev_month)

    this_year_start = _month_start(now.year, 1)
    last_year_start = _month_start(now.year - 1, 1)

    return DateRanges(
        this_month=DateRange(this_month_start, now),
        last_month=DateRange(last_month_start, _last_instant_before(this_month_start)),
        this_year=DateRange(this_year_start, now),
        last_year=DateRange(last_year_start, _last_instant_before(this_year_start)),
    )


def month_windows(count: int, now: Optional[datetime] = None) -> List[Tuple[str, datetime, datetime]]:
    """
    Trailing calendar months, oldest first, as (YYYY-MM, start, end) tuples.
    The current month is included and ends at `now`.
    """
    now = _utc(now)
    windows = []
    for offset in range(count - 1, -1, -1):
        year, month = _shift_month(now.year, now.month, -offset)
        start = _month_start(year, month)
        if offset == 0:
            end = now
        else:
            next_year, next_month = _shift_month(year, month, 1)
            end = _last_instant_before(_month_start(next_year, next_month))
        windows.append((f"{year:04d}-{month:02d}", start, end))
    return windows


def calculate_percentage_change(current: Any, previous: Any) -> float:
    """
    Percentage change from previous to current, rounded to one decimal.

    A previous value of zero yields 100 when current is positive and 0 otherwise.
    """
    current = float(current or 0)
    previous = float(previous or 0)
    if previous == 0:
        return 100.0 if current > 0 else 0.0
    return round(((current - previous) / previous) * 100, 1)


def safe_ratio(numerator: Any, denominator: Any, scale: float = 1, digits: int = 1) -> float:
    """numerator / denominator * scale, or 0 when the denominator is empty."""
    if not denominator:
        return 0.0
    return round(float(numerator or 0) / float(denominator) * scale, digits)


def format_currency(amount: Any) -> str:
    """
    Format an amount as whole US dollars, e.g. "$1,234,567".
    None, NaN and unparsable values format as "$0".
    """
    if amount is None:
        return "$0"
    try:
        value = Decimal(str(amount))
    except (InvalidOperation, ValueError, TypeError):
        return "$0"
    if not value.is_finite():
        return "$0"

    rounded = int(value.quantize(Decimal("1")))
    if rounded < 0:
        return f"-${abs(rounded):,}"
    return f"${rounded:,}"


def to_float(value: Any, digits: Optional[int] = None) -> Optional[float]:
    """Convert a driver aggregate (Decimal, str, float) to float, keeping None."""
    if value is None:
        return None
    result = float(value)
    if math.isnan(result):
        return None
    return round(result, digits) if digits is not None else result

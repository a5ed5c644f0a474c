from __future__ import annotations
import calendar
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional


@dataclass(frozen=True)
class RangeWindow:
    key: str
    days: int = 0
    months: int = 0

    def lower_bound(self, now: datetime) -> datetime:
        return _shift_months(now, -self.months) - timedelta(days=self.days)


DEFAULT_RANGE = RangeWindow(key="1d", days=1)

RANGES: dict[str, RangeWindow] = {
    "7d": RangeWindow(key="7d", days=7),
    "1m": RangeWindow(key="1m", months=1),
    "3m": RangeWindow(key="3m", months=3),
}


def resolve_range(selector: Optional[str]) -> RangeWindow:
    # Unknown selectors fall back to the last day rather than erroring
    if selector is None:
        return DEFAULT_RANGE
    return RANGES.get(selector, DEFAULT_RANGE)


def _shift_months(dt: datetime, months: int) -> datetime:
    if months == 0:
        return dt
    index = dt.year * 12 + (dt.month - 1) + months
    year, month = divmod(index, 12)
    month += 1
    # Clamp e.g. 31 March - 1 month to the last day of February
    day = min(dt.day, calendar.monthrange(year, month)[1])
    return dt.replace(year=year, month=month, day=day)

from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from typing import Iterable, List

from profilequest.core.errors import InvalidRange
from profilequest.services.leveling import ensure_amount

WEEKDAY_LABELS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")
MONTH_LABELS = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)
# Day-of-month starts of the four "weeks" charted for the monthly range.
MONTH_WEEK_STARTS = (1, 8, 15, 22)

DAILY_SLOT_HOURS = 2
DAILY_SLOTS = 12
WEEKLY_DAYS = 7


class HistoryRange(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"


@dataclass
class Bucket:
    start: datetime
    end: datetime
    label: str
    xp: int = 0

    def contains(self, moment: datetime) -> bool:
        return self.start <= moment < self.end

    def to_dict(self) -> dict:
        return {
            "label": self.label,
            "xp": self.xp,
            "start": self.start.isoformat(),
            "end": self.end.isoformat(),
        }


@dataclass(frozen=True)
class XpEvent:
    timestamp: datetime
    xp_amount: int


def parse_range(value) -> HistoryRange:
    if isinstance(value, HistoryRange):
        return value
    try:
        return HistoryRange(value)
    except ValueError:
        raise InvalidRange(value, [r.value for r in HistoryRange]) from None


def _midnight(moment: datetime) -> datetime:
    return moment.replace(hour=0, minute=0, second=0, microsecond=0)


def _first_of_next_month(first: datetime) -> datetime:
    if first.month == 12:
        return first.replace(year=first.year + 1, month=1)
    return first.replace(month=first.month + 1)


def _daily_buckets(now: datetime) -> List[Bucket]:
    slot_start = now.replace(
        hour=now.hour - now.hour % DAILY_SLOT_HOURS,
        minute=0, second=0, microsecond=0,
    )
    step = timedelta(hours=DAILY_SLOT_HOURS)
    first = slot_start - step * (DAILY_SLOTS - 1)

    buckets = []
    for i in range(DAILY_SLOTS):
        start = first + step * i
        buckets.append(Bucket(start=start, end=start + step, label=start.strftime("%H:00")))
    return buckets


def _weekly_buckets(now: datetime) -> List[Bucket]:
    day = timedelta(days=1)
    first = _midnight(now) - day * (WEEKLY_DAYS - 1)

    buckets = []
    for i in range(WEEKLY_DAYS):
        start = first + day * i
        buckets.append(Bucket(start=start, end=start + day, label=WEEKDAY_LABELS[start.weekday()]))
    return buckets


def _monthly_buckets(now: datetime) -> List[Bucket]:
    first = _midnight(now).replace(day=1)
    bounds = [first.replace(day=d) for d in MONTH_WEEK_STARTS]
    bounds.append(_first_of_next_month(first))

    return [
        Bucket(start=bounds[i], end=bounds[i + 1], label=f"W{i + 1}")
        for i in range(len(MONTH_WEEK_STARTS))
    ]


def _yearly_buckets(now: datetime) -> List[Bucket]:
    buckets = []
    start = _midnight(now).replace(month=1, day=1)
    for label in MONTH_LABELS:
        end = _first_of_next_month(start)
        buckets.append(Bucket(start=start, end=end, label=label))
        start = end
    return buckets


_BUILDERS = {
    HistoryRange.DAILY: _daily_buckets,
    HistoryRange.WEEKLY: _weekly_buckets,
    HistoryRange.MONTHLY: _monthly_buckets,
    HistoryRange.YEARLY: _yearly_buckets,
}


def build_buckets(range_, now: datetime) -> List[Bucket]:
    """
    Builds a fresh, ordered list of empty buckets for the given range.

    daily   -> 12 x 2h slots, the last one containing `now`
    weekly  -> 7 calendar days, the last one being today
    monthly -> W1..W4 of the current month (days 1, 8, 15, 22, month end)
    yearly  -> Jan..Dec of the current year
    """
    return _BUILDERS[parse_range(range_)](now)


def aggregate_events(buckets: List[Bucket], events: Iterable[XpEvent]) -> List[Bucket]:
    """
    Adds each event's XP to the bucket containing its timestamp.

    Events outside the overall window are ignored and input order does not
    matter. Buckets are accumulated in place, so feeding the same events
    twice counts them twice.
    """
    if not buckets:
        return buckets

    window_start = buckets[0].start
    window_end = buckets[-1].end

    for event in events:
        amount = ensure_amount(event.xp_amount)
        if not (window_start <= event.timestamp < window_end):
            continue
        for bucket in buckets:
            if bucket.contains(event.timestamp):
                bucket.xp += amount
                break

    return buckets

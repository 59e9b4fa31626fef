"""Calendar-date helpers.

Every date crossing a module boundary is a canonical ``YYYY-MM-DD`` string.
The format is fixed-width and zero-padded, so plain string comparison orders
dates correctly. Helpers that receive a malformed date return ``None``
instead of raising; callers decide whether to substitute ``today_str()`` or
drop the item.
"""
import calendar
import re
from datetime import date, datetime, timedelta

from bucketbook.utils.constants import DATE_FORMAT, MONTH_FORMAT

_DATE_SHAPE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def today() -> date:
    return date.today()


def today_str() -> str:
    return date.today().strftime(DATE_FORMAT)


def current_month_str() -> str:
    return date.today().strftime(MONTH_FORMAT)


def normalize(raw) -> str | None:
    """Return the ``YYYY-MM-DD`` part of ``raw`` or None if it has the wrong shape.

    Timestamp-like input ("2024-01-31T10:00:00Z", "2024-01-31 10:00") loses its
    time component. The day is not range-checked here; see ``parse_date``.
    """
    if raw is None:
        return None
    if isinstance(raw, datetime):
        return format_date(raw.date())
    if isinstance(raw, date):
        return format_date(raw)
    if not isinstance(raw, str):
        return None
    candidate = raw.strip().split("T")[0].split(" ")[0]
    if not _DATE_SHAPE.match(candidate):
        return None
    return candidate


def parse_date(date_str) -> date | None:
    """Parse a date string in YYYY-MM-DD format, returning None on failure."""
    normalized = normalize(date_str)
    if normalized is None:
        return None
    try:
        return datetime.strptime(normalized, DATE_FORMAT).date()
    except ValueError:
        return None


def format_date(d: date) -> str:
    return d.isoformat()


def is_valid(date_str) -> bool:
    return parse_date(date_str) is not None


def add_days(date_str, n: int) -> str | None:
    d = parse_date(date_str)
    if d is None:
        return None
    try:
        return format_date(d + timedelta(days=n))
    except OverflowError:
        return None


def compare(a, b) -> int | None:
    """-1, 0 or 1 like a classic comparator; None when either side is invalid."""
    left, right = normalize(a), normalize(b)
    if left is None or right is None:
        return None
    return (left > right) - (left < right)


def min_date(*dates) -> str | None:
    """Earliest valid date among the arguments; invalid ones are ignored."""
    valid = [normalize(d) for d in dates if is_valid(d)]
    return min(valid) if valid else None


def max_date(*dates) -> str | None:
    """Latest valid date among the arguments; invalid ones are ignored."""
    valid = [normalize(d) for d in dates if is_valid(d)]
    return max(valid) if valid else None


def last_day_of_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def months_between(start: date, end: date) -> int:
    """Whole calendar months from start's month to end's month (days ignored)."""
    return (end.year - start.year) * 12 + (end.month - start.month)


def start_of_month(date_str) -> str | None:
    d = parse_date(date_str)
    return format_date(d.replace(day=1)) if d else None


def end_of_month(date_str) -> str | None:
    d = parse_date(date_str)
    if d is None:
        return None
    return format_date(d.replace(day=last_day_of_month(d.year, d.month)))


def start_of_year(date_str) -> str | None:
    d = parse_date(date_str)
    return format_date(date(d.year, 1, 1)) if d else None


def end_of_year(date_str) -> str | None:
    d = parse_date(date_str)
    return format_date(date(d.year, 12, 31)) if d else None


def start_of_week(date_str, week_starts_on: int = 0) -> str | None:
    """First day of the week containing date_str. week_starts_on: 0=Mon..6=Sun."""
    d = parse_date(date_str)
    if d is None:
        return None
    offset = (d.weekday() - week_starts_on) % 7
    try:
        return format_date(d - timedelta(days=offset))
    except OverflowError:
        return None


def end_of_week(date_str, week_starts_on: int = 0) -> str | None:
    start = start_of_week(date_str, week_starts_on)
    return add_days(start, 6) if start else None


class DayRange:
    """Inclusive run of consecutive days. Iterable any number of times."""

    def __init__(self, start: date | None, end: date | None):
        self._start = start
        self._end = end

    def __iter__(self):
        if not self._start or not self._end:
            return
        current = self._start
        while current <= self._end:
            yield format_date(current)
            if current == self._end:
                return
            current += timedelta(days=1)

    def __len__(self) -> int:
        if not self._start or not self._end or self._start > self._end:
            return 0
        return (self._end - self._start).days + 1

    def __repr__(self) -> str:
        return f"DayRange({self._start!r}, {self._end!r})"


def enumerate_days_inclusive(start_str, end_str) -> DayRange:
    """Every day from start to end inclusive; empty if start > end or either is invalid."""
    return DayRange(parse_date(start_str), parse_date(end_str))


def format_month(d: date) -> str:
    return d.strftime(MONTH_FORMAT)


def parse_month(month_str: str) -> date | None:
    """Return the first day of the given YYYY-MM month string."""
    if not month_str:
        return None
    try:
        return datetime.strptime(month_str, MONTH_FORMAT).date()
    except ValueError:
        return None


def month_range(month_str: str) -> tuple[str, str]:
    """Return (first_day_str, last_day_str) for a YYYY-MM month."""
    d = parse_month(month_str)
    if d is None:
        raise ValueError(f"Invalid month: {month_str}")
    return (
        format_date(d),
        format_date(d.replace(day=last_day_of_month(d.year, d.month))),
    )


def prev_month(month_str: str) -> str:
    d = parse_month(month_str)
    if d is None:
        raise ValueError(f"Invalid month: {month_str}")
    if d.month == 1:
        return format_month(d.replace(year=d.year - 1, month=12))
    return format_month(d.replace(month=d.month - 1))


def next_month(month_str: str) -> str:
    d = parse_month(month_str)
    if d is None:
        raise ValueError(f"Invalid month: {month_str}")
    if d.month == 12:
        return format_month(d.replace(year=d.year + 1, month=1))
    return format_month(d.replace(month=d.month + 1))

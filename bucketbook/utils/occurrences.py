"""Occurrence arithmetic for recurring templates.

Monthly and yearly schedules are always derived from the start date
(``start + relativedelta(months=k)``), never from the previous occurrence, so a
template anchored on the 31st lands on Jan 31, Feb 29, Mar 31, Apr 30 rather
than drifting to the 28th/29th after February.
"""
import logging
from datetime import date, timedelta

from dateutil.relativedelta import relativedelta

from bucketbook.models.recurring_template import Frequency
from bucketbook.utils.constants import DAY_INTERVALS, MAX_OCCURRENCE_ITERATIONS
from bucketbook.utils.date_helpers import format_date, months_between, parse_date

logger = logging.getLogger(__name__)


def _frequency(value) -> Frequency | None:
    try:
        return Frequency(value)
    except ValueError:
        return None


def _nth_occurrence(freq: Frequency, start: date, n: int) -> date:
    if freq in (Frequency.DAILY, Frequency.WEEKLY, Frequency.FORTNIGHTLY):
        return start + timedelta(days=n * DAY_INTERVALS[freq.value])
    if freq == Frequency.MONTHLY:
        return start + relativedelta(months=n)
    if freq == Frequency.YEARLY:
        return start + relativedelta(years=n)
    raise ValueError(f"Unsupported frequency: {freq}")


def _next_after(freq: Frequency, start: date, after: date) -> date:
    if after < start:
        return start
    if freq in (Frequency.DAILY, Frequency.WEEKLY, Frequency.FORTNIGHTLY):
        return after + timedelta(days=DAY_INTERVALS[freq.value])
    if freq == Frequency.MONTHLY:
        return _nth_occurrence(freq, start, months_between(start, after) + 1)
    if freq == Frequency.YEARLY:
        return _nth_occurrence(freq, start, after.year - start.year + 1)
    raise ValueError(f"Unsupported frequency: {freq}")


def _first_on_or_after(freq: Frequency, start: date, from_date: date) -> date:
    if from_date <= start:
        return start
    if freq in (Frequency.DAILY, Frequency.WEEKLY, Frequency.FORTNIGHTLY):
        interval = DAY_INTERVALS[freq.value]
        n = -(-(from_date - start).days // interval)
    elif freq == Frequency.MONTHLY:
        n = months_between(start, from_date)
    else:
        n = from_date.year - start.year
    candidate = _nth_occurrence(freq, start, n)
    if candidate < from_date:
        candidate = _nth_occurrence(freq, start, n + 1)
    return candidate


def _walk(freq: Frequency, start: date, first: date, limit: date) -> list[str]:
    result: list[str] = []
    current = first
    for _ in range(MAX_OCCURRENCE_ITERATIONS):
        if current > limit:
            return result
        result.append(format_date(current))
        try:
            following = _next_after(freq, start, current)
        except (OverflowError, ValueError):
            return result
        if following <= current:
            logger.warning(
                "Occurrence step for %s did not advance past %s; stopping", freq.value, current
            )
            return result
        current = following
    logger.warning(
        "Occurrence walk for %s from %s hit the %d iteration cap",
        freq.value, format_date(first), MAX_OCCURRENCE_ITERATIONS,
    )
    return result


def next_occurrence(frequency, start_date, after_date=None) -> str | None:
    """First occurrence strictly after after_date (default: the start date).

    Returns None when the frequency or start date is unusable. An unparseable
    after_date falls back to the start date.
    """
    freq = _frequency(frequency)
    start = parse_date(start_date)
    if freq is None or start is None:
        return None
    after = parse_date(after_date) or start
    try:
        return format_date(_next_after(freq, start, after))
    except (OverflowError, ValueError):
        return None


def first_occurrence_on_or_after(frequency, start_date, from_date) -> str | None:
    freq = _frequency(frequency)
    start = parse_date(start_date)
    frm = parse_date(from_date)
    if freq is None or start is None or frm is None:
        return None
    try:
        return format_date(_first_on_or_after(freq, start, frm))
    except (OverflowError, ValueError):
        return None


def is_occurrence(frequency, start_date, date_str) -> bool:
    """True if date_str is one of the template's scheduled dates."""
    d = parse_date(date_str)
    if d is None:
        return False
    return first_occurrence_on_or_after(frequency, start_date, date_str) == format_date(d)


def occurrences_up_to(frequency, start_date, end_date, last_applied, up_to_date) -> list[str]:
    """Occurrences after the watermark (or from start_date inclusive) through up_to_date.

    end_date, when valid, is an inclusive upper bound. A watermark earlier than
    the start date is ignored.
    """
    freq = _frequency(frequency)
    start = parse_date(start_date)
    up_to = parse_date(up_to_date)
    if freq is None or start is None or up_to is None:
        return []

    limit = up_to
    end = parse_date(end_date)
    if end is not None:
        limit = min(limit, end)

    last = parse_date(last_applied)
    if last is not None and last >= start:
        try:
            first = _next_after(freq, start, last)
        except (OverflowError, ValueError):
            return []
    else:
        first = start

    return _walk(freq, start, first, limit)


def occurrences_between(frequency, start_date, end_date, from_date, to_date) -> list[str]:
    """Occurrences inside [from_date, to_date] for read-only projections.

    Seeds directly at the first occurrence on or after from_date. There is no
    watermark parameter: projections never depend on generation state.
    """
    freq = _frequency(frequency)
    start = parse_date(start_date)
    frm = parse_date(from_date)
    to = parse_date(to_date)
    if freq is None or start is None or frm is None or to is None:
        return []

    lo = max(frm, start)
    hi = to
    end = parse_date(end_date)
    if end is not None:
        hi = min(hi, end)
    if lo > hi:
        return []

    try:
        first = _first_on_or_after(freq, start, lo)
    except (OverflowError, ValueError):
        return []
    return _walk(freq, start, first, hi)

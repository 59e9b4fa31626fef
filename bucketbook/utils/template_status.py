from enum import Enum

from bucketbook.utils.date_helpers import format_date, parse_date, today_str


def _canonical(value) -> str | None:
    d = parse_date(value)
    return format_date(d) if d else None


class TemplateStatus(str, Enum):
    NOT_STARTED = "not_started"
    ACTIVE = "active"
    ENDED = "ended"


def classify(today, start_date, end_date=None) -> TemplateStatus:
    """Derive a template's status from the current date; both bounds are inclusive.

    Unparseable today/start_date fall back to the current date, an unparseable
    end_date counts as open-ended.
    """
    current = _canonical(today) or today_str()
    start = _canonical(start_date) or today_str()
    end = _canonical(end_date)
    if current < start:
        return TemplateStatus.NOT_STARTED
    if end is not None and current > end:
        return TemplateStatus.ENDED
    return TemplateStatus.ACTIVE

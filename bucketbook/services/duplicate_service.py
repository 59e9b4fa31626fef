from dataclasses import dataclass, field

from bucketbook.database.transaction_dao import TransactionDAO
from bucketbook.models.transaction import Transaction
from bucketbook.utils.constants import DUPLICATE_AMOUNT_TOLERANCE, DUPLICATE_WINDOW_DAYS
from bucketbook.utils.date_helpers import add_days, format_date, parse_date


@dataclass
class DuplicateCheckResult:
    is_duplicate: bool
    similar: list[Transaction] = field(default_factory=list)
    confidence: str = "low"   # 'high' | 'medium' | 'low'


def _is_similar(candidate: Transaction, other: Transaction) -> bool:
    if abs(other.amount - candidate.amount) >= DUPLICATE_AMOUNT_TOLERANCE:
        return False
    if other.type != candidate.type:
        return False
    mine, theirs = candidate.description.lower(), other.description.lower()
    if mine not in theirs and theirs not in mine:
        return False
    return not candidate.bucket_id or not other.bucket_id or candidate.bucket_id == other.bucket_id


def check_for_duplicates(
    candidate: Transaction,
    existing: list[Transaction],
    window_days: int = DUPLICATE_WINDOW_DAYS,
) -> DuplicateCheckResult:
    """Look for stored transactions that look like the one about to be recorded."""
    when = parse_date(candidate.date)
    if when is None:
        return DuplicateCheckResult(is_duplicate=False)

    similar = []
    for other in existing:
        other_date = parse_date(other.date)
        if other_date is None or other.id == candidate.id:
            continue
        if abs((other_date - when).days) > window_days:
            continue
        if _is_similar(candidate, other):
            similar.append(other)

    if not similar:
        return DuplicateCheckResult(is_duplicate=False)

    exact = any(
        t.amount == candidate.amount
        and t.description.lower() == candidate.description.lower()
        and parse_date(t.date) == when
        for t in similar
    )
    return DuplicateCheckResult(
        is_duplicate=True,
        similar=similar,
        confidence="high" if exact else "medium",
    )


class DuplicateService:
    def __init__(self, tx_dao: TransactionDAO, window_days: int = DUPLICATE_WINDOW_DAYS):
        self._tx_dao = tx_dao
        self._window_days = window_days

    def check(self, candidate: Transaction) -> DuplicateCheckResult:
        when = parse_date(candidate.date)
        if when is None:
            return DuplicateCheckResult(is_duplicate=False)
        day = format_date(when)
        nearby = self._tx_dao.list_between(
            add_days(day, -self._window_days), add_days(day, self._window_days)
        )
        return check_for_duplicates(candidate, nearby, self._window_days)

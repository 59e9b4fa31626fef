"""Planning half of recurring generation: which transactions a pass must create.

Nothing here touches storage. ``RecurringService.apply_due_templates`` feeds
these functions freshly read templates and transactions and persists the
outcome.

The watermark (``last_applied``) advances to the latest occurrence considered
in the pass, whether it was created now or already existed.
"""
import logging
import uuid
from dataclasses import dataclass, field
from typing import Callable, Iterable, Mapping, assert_never

from bucketbook.models.recurring_template import (
    ExpenseSkeleton,
    IncomeSkeleton,
    InvestmentSkeleton,
    RecurringTemplate,
    TransactionSkeleton,
    TransactionType,
)
from bucketbook.models.transaction import Transaction
from bucketbook.utils.date_helpers import format_date, parse_date, today_str
from bucketbook.utils.occurrences import occurrences_up_to
from bucketbook.utils.template_status import TemplateStatus, classify

logger = logging.getLogger(__name__)


def new_id() -> str:
    return uuid.uuid4().hex


@dataclass
class TemplatePlan:
    template_id: str
    candidates: list[str] = field(default_factory=list)
    new_transactions: list[Transaction] = field(default_factory=list)
    watermark: str | None = None    # None = leave last_applied as it is

    @property
    def is_noop(self) -> bool:
        return not self.new_transactions and self.watermark is None


@dataclass
class ReconcilePlan:
    new_transactions: list[Transaction] = field(default_factory=list)
    watermark_updates: dict[str, str] = field(default_factory=dict)
    skipped: list[str] = field(default_factory=list)


@dataclass
class GenerationFailure:
    template_id: str
    message: str
    dates: list[str] = field(default_factory=list)


@dataclass
class ReconcileResult:
    created: list[Transaction] = field(default_factory=list)
    watermark_updates: dict[str, str] = field(default_factory=dict)
    failures: list[GenerationFailure] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures


def _transaction_type(skeleton: TransactionSkeleton) -> TransactionType:
    match skeleton:
        case ExpenseSkeleton():
            return TransactionType.EXPENSE
        case IncomeSkeleton():
            return TransactionType.INCOME
        case InvestmentSkeleton():
            return TransactionType.INVESTMENT
        case _:
            assert_never(skeleton)


def build_transaction(template: RecurringTemplate, date_str: str, tx_id: str) -> Transaction:
    """Materialize one occurrence: skeleton fields verbatim plus the date and back-link."""
    skeleton = template.skeleton
    return Transaction(
        id=tx_id,
        type=_transaction_type(skeleton).value,
        amount=skeleton.amount,
        description=skeleton.description,
        date=date_str,
        is_recurring=True,
        bucket_id=skeleton.bucket_id,
        recurring_id=template.id,
        tags=list(skeleton.tags),
        notes=skeleton.notes,
    )


def plan_template(
    template: RecurringTemplate,
    existing_dates: Iterable[str],
    today: str,
    id_factory: Callable[[], str] = new_id,
) -> TemplatePlan | None:
    """Plan one template's generation up to and including today.

    Returns None when the template's start date is unusable; the caller skips it.
    """
    if parse_date(template.start_date) is None:
        logger.warning(
            "Recurring template %s has an invalid start date %r; skipping",
            template.id, template.start_date,
        )
        return None

    ref = parse_date(today)
    today = format_date(ref) if ref else today_str()
    plan = TemplatePlan(template_id=template.id)
    if classify(today, template.start_date, template.end_date) != TemplateStatus.ACTIVE:
        return plan

    plan.candidates = occurrences_up_to(
        template.frequency,
        template.start_date,
        template.end_date,
        template.last_applied,
        today,
    )
    existing = set()
    for raw in existing_dates:
        d = parse_date(raw)
        if d is not None:
            existing.add(format_date(d))

    plan.new_transactions = [
        build_transaction(template, d, id_factory())
        for d in plan.candidates
        if d not in existing
    ]
    if plan.candidates and plan.candidates[-1] != template.last_applied:
        plan.watermark = plan.candidates[-1]

    logger.debug(
        "Template %s: %d candidate(s), %d new, watermark %s",
        template.id, len(plan.candidates), len(plan.new_transactions), plan.watermark,
    )
    return plan


def reconcile(
    templates: Iterable[RecurringTemplate],
    existing_by_template_id: Mapping[str, Iterable[Transaction]],
    today: str,
    id_factory: Callable[[], str] = new_id,
) -> ReconcilePlan:
    """Plan a whole pass. Templates are independent of each other."""
    result = ReconcilePlan()
    for template in templates:
        existing = existing_by_template_id.get(template.id, ())
        plan = plan_template(template, (tx.date for tx in existing), today, id_factory)
        if plan is None:
            result.skipped.append(template.id)
            continue
        result.new_transactions.extend(plan.new_transactions)
        if plan.watermark is not None:
            result.watermark_updates[template.id] = plan.watermark
    return result

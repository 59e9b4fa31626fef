import logging
import sqlite3
from dataclasses import dataclass, field
from datetime import timedelta
from enum import Enum
from typing import Callable

from bucketbook.database.template_dao import TemplateDAO
from bucketbook.database.transaction_dao import TransactionDAO
from bucketbook.models.recurring_template import (
    Frequency,
    RecurringTemplate,
    TransactionSkeleton,
)
from bucketbook.services.reconciler import (
    GenerationFailure,
    ReconcileResult,
    new_id,
    plan_template,
)
from bucketbook.utils.date_helpers import format_date, parse_date, today_str
from bucketbook.utils.occurrences import first_occurrence_on_or_after
from bucketbook.utils.template_status import TemplateStatus, classify

logger = logging.getLogger(__name__)


class EditScope(str, Enum):
    NONE = "none"
    ALL = "all"
    FROM_CUTOFF = "from_cutoff"


class DeletePolicy(str, Enum):
    CASCADE = "cascade"
    ORPHAN = "orphan"


@dataclass
class EditResult:
    template: RecurringTemplate
    requested: int = 0
    updated: int = 0
    failed_ids: list[str] = field(default_factory=list)


class RecurringService:
    def __init__(
        self,
        template_dao: TemplateDAO,
        tx_dao: TransactionDAO,
        clock: Callable[[], str] = today_str,
        delete_policy: DeletePolicy | str = DeletePolicy.ORPHAN,
    ):
        self._dao = template_dao
        self._tx_dao = tx_dao
        self._clock = clock
        self._delete_policy = DeletePolicy(delete_policy)

    def _today(self, reference: str | None = None) -> str:
        d = parse_date(reference) or parse_date(self._clock())
        return format_date(d) if d else today_str()

    def get_all(self) -> list[RecurringTemplate]:
        return self._dao.get_all()

    def get_by_id(self, template_id: str) -> RecurringTemplate | None:
        return self._dao.get_by_id(template_id)

    def get_status(self, template: RecurringTemplate, today: str | None = None) -> TemplateStatus:
        return classify(self._today(today), template.start_date, template.end_date)

    def create(
        self,
        skeleton: TransactionSkeleton,
        frequency: Frequency | str,
        start_date: str,
        end_date: str | None = None,
    ) -> RecurringTemplate:
        frequency, start_date, end_date = self._validate(frequency, start_date, end_date)
        return self._dao.create(RecurringTemplate(
            id=new_id(),
            skeleton=skeleton,
            frequency=frequency,
            start_date=start_date,
            end_date=end_date,
        ))

    def update(
        self,
        template_id: str,
        skeleton: TransactionSkeleton,
        frequency: Frequency | str,
        start_date: str,
        end_date: str | None = None,
        scope: EditScope | str = EditScope.NONE,
        cutoff: str | None = None,
    ) -> EditResult:
        """Rewrite a template and, if the user asked for it, its materialized history.

        scope=ALL rewrites every generated transaction, scope=FROM_CUTOFF only
        those dated on or after cutoff. Only type, amount, description and bucket
        are rewritten; dates stay put. A row that fails to update is reported in
        failed_ids and the rows already rewritten stay rewritten.
        """
        scope = EditScope(scope)
        existing = self._dao.get_by_id(template_id)
        if existing is None:
            raise ValueError("Recurring template not found.")
        frequency, start_date, end_date = self._validate(frequency, start_date, end_date)
        cutoff_date = parse_date(cutoff)
        if scope == EditScope.FROM_CUTOFF and cutoff_date is None:
            raise ValueError("A valid cutoff date is required to update from a date.")

        template = self._dao.update(RecurringTemplate(
            id=template_id,
            skeleton=skeleton,
            frequency=frequency,
            start_date=start_date,
            end_date=end_date,
            last_applied=existing.last_applied,
        ))
        result = EditResult(template=template)
        if scope == EditScope.NONE:
            return result

        from_date = format_date(cutoff_date) if scope == EditScope.FROM_CUTOFF else None
        targets = self._tx_dao.list_by_recurring_id(template_id, from_date=from_date)
        result.requested = len(targets)
        fields = {
            "type": skeleton.type.value,
            "amount": skeleton.amount,
            "description": skeleton.description,
            "bucket_id": skeleton.bucket_id,
        }
        conn = self._tx_dao.db.get_connection()
        for tx in targets:
            try:
                self._tx_dao.update(tx.id, **fields)
            except sqlite3.Error as exc:
                conn.rollback()
                logger.warning("Could not rewrite transaction %s for template %s: %s",
                               tx.id, template_id, exc)
                result.failed_ids.append(tx.id)
            else:
                result.updated += 1

        logger.info("Template %s edited (%s): %d of %d transaction(s) rewritten",
                    template_id, scope.value, result.updated, result.requested)
        return result

    def delete(self, template_id: str, policy: DeletePolicy | str | None = None) -> int:
        """Delete a template. Returns how many transactions were deleted with it.

        CASCADE removes every transaction generated from the template; ORPHAN keeps
        them and the store clears their recurring_id.
        """
        policy = DeletePolicy(policy) if policy is not None else self._delete_policy
        conn = self._dao.db.get_connection()
        try:
            removed = 0
            if policy == DeletePolicy.CASCADE:
                removed = self._tx_dao.delete_by_recurring_id(template_id)
            self._dao.delete(template_id)
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        logger.info("Deleted template %s (%s, %d transaction(s) removed)",
                    template_id, policy.value, removed)
        return removed

    def apply_due_templates(self, reference_date: str | None = None) -> ReconcileResult:
        """
        Generate every missing occurrence up to reference_date (default: today).

        Each template's new transactions and its watermark are committed
        together; if that fails the batch is rolled back, the watermark stays,
        and the failure is reported. Other templates are unaffected.
        """
        ref = self._today(reference_date)
        result = ReconcileResult()
        conn = self._tx_dao.db.get_connection()

        for template in self._dao.list_active_or_pending(ref):
            try:
                existing = self._tx_dao.list_by_recurring_id(template.id)
            except sqlite3.Error as exc:
                logger.warning("Could not read transactions for template %s: %s", template.id, exc)
                result.failures.append(GenerationFailure(template.id, str(exc)))
                continue

            plan = plan_template(template, [tx.date for tx in existing], ref)
            if plan is None:
                result.skipped.append(template.id)
                continue
            if plan.is_noop:
                continue

            try:
                created = [self._tx_dao.create(tx) for tx in plan.new_transactions]
                if plan.watermark is not None:
                    self._dao.update_watermark(template.id, plan.watermark)
                conn.commit()
            except sqlite3.Error as exc:
                conn.rollback()
                logger.warning("Recurring generation failed for template %s: %s", template.id, exc)
                result.failures.append(GenerationFailure(
                    template.id, str(exc), [tx.date for tx in plan.new_transactions],
                ))
                continue

            result.created.extend(created)
            if plan.watermark is not None:
                result.watermark_updates[template.id] = plan.watermark

        logger.info(
            "Recurring pass for %s: %d created, %d watermark(s) advanced, %d failed, %d skipped",
            ref, len(result.created), len(result.watermark_updates),
            len(result.failures), len(result.skipped),
        )
        return result

    def next_due_date(self, template: RecurringTemplate, after: str | None = None) -> str | None:
        """Return the next date the template is due after `after` (default: today)."""
        start = parse_date(template.start_date)
        if start is None:
            return None
        search_from = parse_date(self._today(after)) + timedelta(days=1)
        last = parse_date(template.last_applied)
        if last:
            search_from = max(search_from, last + timedelta(days=1))
        candidate = first_occurrence_on_or_after(
            template.frequency, template.start_date, format_date(search_from)
        )
        if candidate is None:
            return None
        end = parse_date(template.end_date)
        if end and parse_date(candidate) > end:
            return None
        return candidate

    def _validate(self, frequency, start_date, end_date):
        try:
            frequency = Frequency(frequency)
        except ValueError:
            raise ValueError("Invalid frequency.") from None
        start = parse_date(start_date)
        if start is None:
            raise ValueError("Invalid start date.")
        end = None
        if end_date:
            end = parse_date(end_date)
            if end is None:
                raise ValueError("Invalid end date.")
            if end < start:
                raise ValueError("End date cannot be before start date.")
        return frequency, format_date(start), format_date(end) if end else None

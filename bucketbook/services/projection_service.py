from dataclasses import dataclass
from typing import Optional

from bucketbook.database.template_dao import TemplateDAO
from bucketbook.utils.date_helpers import month_range, next_month, parse_month
from bucketbook.utils.occurrences import occurrences_between


@dataclass
class ProjectedOccurrence:
    date: str
    template_id: str
    type: str
    amount: float
    description: str
    bucket_id: Optional[str] = None


class ProjectionService:
    """Read-only schedule projections for calendar and forecast views.

    Projections are computed from each template's anchor alone and never read
    or write the generation watermark.
    """

    def __init__(self, template_dao: TemplateDAO):
        self._dao = template_dao

    def project_between(self, from_date: str, to_date: str) -> list[ProjectedOccurrence]:
        result = []
        for template in self._dao.get_all():
            skeleton = template.skeleton
            for d in occurrences_between(
                template.frequency, template.start_date, template.end_date,
                from_date, to_date,
            ):
                result.append(ProjectedOccurrence(
                    date=d,
                    template_id=template.id,
                    type=skeleton.type.value,
                    amount=skeleton.amount,
                    description=skeleton.description,
                    bucket_id=skeleton.bucket_id,
                ))
        result.sort(key=lambda p: (p.date, p.description))
        return result

    def occurrences_by_day(self, from_date: str, to_date: str) -> dict[str, list[ProjectedOccurrence]]:
        by_day: dict[str, list[ProjectedOccurrence]] = {}
        for projected in self.project_between(from_date, to_date):
            by_day.setdefault(projected.date, []).append(projected)
        return by_day

    def monthly_totals(self, from_month: str, months: int = 12) -> list[dict]:
        """
        [{month:'YYYY-MM', income, expense, investment, net}] for `months`
        consecutive months starting at from_month.
        """
        if parse_month(from_month) is None:
            raise ValueError(f"Invalid month: {from_month}")
        result = []
        month = from_month
        for _ in range(months):
            first, last = month_range(month)
            totals = {"income": 0.0, "expense": 0.0, "investment": 0.0}
            for projected in self.project_between(first, last):
                totals[projected.type] += projected.amount
            result.append({
                "month": month,
                **totals,
                "net": totals["income"] - totals["expense"] - totals["investment"],
            })
            month = next_month(month)
        return result

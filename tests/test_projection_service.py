import pytest

from bucketbook.models.recurring_template import make_skeleton
from bucketbook.services.projection_service import ProjectionService


@pytest.fixture
def projections(service, template_dao):
    service.create(make_skeleton("expense", 1000, "Rent", bucket_id="housing"), "monthly", "2024-01-31")
    service.create(make_skeleton("income", 3000, "Salary"), "monthly", "2024-01-15")
    return ProjectionService(template_dao)


def test_project_between_keeps_month_end_anchor(projections):
    feb = projections.project_between("2024-02-01", "2024-02-29")
    assert [(p.date, p.description) for p in feb] == [
        ("2024-02-15", "Salary"),
        ("2024-02-29", "Rent"),
    ]
    assert feb[1].type == "expense"
    assert feb[1].bucket_id == "housing"


def test_projection_ignores_generation_state(projections, service):
    before = projections.project_between("2024-02-01", "2024-02-29")
    service.apply_due_templates("2024-02-20")
    after = projections.project_between("2024-02-01", "2024-02-29")
    assert [p.date for p in after] == [p.date for p in before]


def test_project_between_respects_end_date(service, template_dao):
    service.create(make_skeleton("expense", 9, "Trial"), "weekly", "2024-01-01", "2024-01-10")
    dates = [p.date for p in ProjectionService(template_dao).project_between("2024-01-01", "2024-01-31")]
    assert dates == ["2024-01-01", "2024-01-08"]


def test_occurrences_by_day(projections):
    by_day = projections.occurrences_by_day("2024-02-01", "2024-02-29")
    assert list(by_day) == ["2024-02-15", "2024-02-29"]
    assert [p.description for p in by_day["2024-02-15"]] == ["Salary"]


def test_monthly_totals(projections, service):
    service.create(make_skeleton("investment", 500, "Index fund"), "yearly", "2024-03-01")

    totals = projections.monthly_totals("2024-01", months=3)

    assert [row["month"] for row in totals] == ["2024-01", "2024-02", "2024-03"]
    assert totals[0] == {
        "month": "2024-01", "income": 3000.0, "expense": 1000.0, "investment": 0.0, "net": 2000.0,
    }
    assert totals[2]["investment"] == 500.0
    assert totals[2]["net"] == 1500.0


def test_monthly_totals_rejects_bad_month(projections):
    with pytest.raises(ValueError, match="Invalid month"):
        projections.monthly_totals("2024-13")

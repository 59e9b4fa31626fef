import pytest

from bucketbook.models.recurring_template import (
    ExpenseSkeleton,
    IncomeSkeleton,
    TransactionType,
    make_skeleton,
)


def test_make_skeleton_picks_variant():
    skeleton = make_skeleton("income", 3000, "Salary")
    assert isinstance(skeleton, IncomeSkeleton)
    assert skeleton.type == TransactionType.INCOME
    assert skeleton.bucket_id is None

    skeleton = make_skeleton("expense", "12.5", "Coffee", bucket_id="food", tags=["daily"])
    assert isinstance(skeleton, ExpenseSkeleton)
    assert skeleton.amount == 12.5
    assert skeleton.tags == ("daily",)


@pytest.mark.parametrize("type_, amount, description, message", [
    ("transfer", 10, "Move", "Type must be"),
    ("expense", "abc", "Coffee", "Amount must be a number"),
    ("expense", 0, "Coffee", "Amount must be positive"),
    ("expense", -5, "Coffee", "Amount must be positive"),
    ("expense", 5, "   ", "Description cannot be empty"),
])
def test_make_skeleton_rejects_bad_input(type_, amount, description, message):
    with pytest.raises(ValueError, match=message):
        make_skeleton(type_, amount, description)

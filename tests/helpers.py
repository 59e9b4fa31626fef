from bucketbook.models.recurring_template import Frequency, RecurringTemplate, make_skeleton


def make_template(**overrides) -> RecurringTemplate:
    fields = dict(
        id="tpl-1",
        skeleton=make_skeleton("expense", 25, "Gym membership", bucket_id="health"),
        frequency=Frequency.WEEKLY,
        start_date="2024-01-01",
        end_date="2024-01-22",
        last_applied=None,
    )
    fields.update(overrides)
    return RecurringTemplate(**fields)

from bucketbook.utils.template_status import TemplateStatus, classify


def test_single_day_window_is_active_on_that_day():
    assert classify("2024-05-01", "2024-05-01", "2024-05-01") == TemplateStatus.ACTIVE


def test_day_after_end_is_ended():
    assert classify("2024-05-02", "2024-05-01", "2024-05-01") == TemplateStatus.ENDED


def test_day_before_start_is_not_started():
    assert classify("2024-04-30", "2024-05-01", None) == TemplateStatus.NOT_STARTED


def test_open_ended_template_stays_active():
    assert classify("2099-01-01", "2024-05-01") == TemplateStatus.ACTIVE
    assert classify("2099-01-01", "2024-05-01", "garbage") == TemplateStatus.ACTIVE


def test_timestamps_are_compared_as_dates():
    assert classify("2024-05-01T23:59:00", "2024-05-01", "2024-05-01") == TemplateStatus.ACTIVE

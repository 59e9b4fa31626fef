from bucketbook.utils.date_helpers import (
    add_days,
    compare,
    end_of_month,
    end_of_week,
    end_of_year,
    enumerate_days_inclusive,
    max_date,
    min_date,
    month_range,
    next_month,
    normalize,
    parse_date,
    prev_month,
    start_of_month,
    start_of_week,
    start_of_year,
)


def test_normalize_strips_time_component():
    assert normalize("2024-01-31T10:20:00Z") == "2024-01-31"
    assert normalize("2024-01-31 10:20") == "2024-01-31"
    assert normalize("2024-01-31") == "2024-01-31"


def test_normalize_rejects_wrong_shape_but_not_day_range():
    assert normalize("2024/01/31") is None
    assert normalize("31-01-2024") is None
    assert normalize("") is None
    assert normalize(None) is None
    assert normalize("2024-02-30") == "2024-02-30"
    assert parse_date("2024-02-30") is None


def test_add_days_crosses_month_and_leap_day():
    assert add_days("2024-02-28", 1) == "2024-02-29"
    assert add_days("2024-02-29", 1) == "2024-03-01"
    assert add_days("2024-01-01", -1) == "2023-12-31"
    assert add_days("garbage", 1) is None


def test_compare_min_max():
    assert compare("2024-01-01", "2024-01-02") == -1
    assert compare("2024-01-02", "2024-01-02") == 0
    assert compare("2024-02-01", "2024-01-31") == 1
    assert compare("bad", "2024-01-01") is None
    assert min_date("2024-03-01", "bad", "2024-01-15") == "2024-01-15"
    assert max_date("2024-03-01", "bad", "2024-01-15") == "2024-03-01"
    assert min_date("bad") is None


def test_month_and_year_boundaries():
    assert start_of_month("2024-02-10") == "2024-02-01"
    assert end_of_month("2024-02-10") == "2024-02-29"
    assert end_of_month("2023-02-10") == "2023-02-28"
    assert start_of_year("2024-06-15") == "2024-01-01"
    assert end_of_year("2024-06-15") == "2024-12-31"
    assert end_of_month("nope") is None


def test_week_boundaries():
    # 2024-01-17 is a Wednesday
    assert start_of_week("2024-01-17") == "2024-01-15"
    assert end_of_week("2024-01-17") == "2024-01-21"
    assert start_of_week("2024-01-17", week_starts_on=6) == "2024-01-14"
    assert end_of_week("2024-01-17", week_starts_on=6) == "2024-01-20"
    assert start_of_week("2024-01-15") == "2024-01-15"


def test_enumerate_days_is_restartable():
    days = enumerate_days_inclusive("2024-02-27", "2024-03-01")
    expected = ["2024-02-27", "2024-02-28", "2024-02-29", "2024-03-01"]
    assert list(days) == expected
    assert list(days) == expected
    assert len(days) == 4


def test_enumerate_days_empty_when_reversed_or_invalid():
    assert list(enumerate_days_inclusive("2024-03-01", "2024-02-27")) == []
    assert len(enumerate_days_inclusive("2024-03-01", "2024-02-27")) == 0
    assert list(enumerate_days_inclusive("bad", "2024-02-27")) == []


def test_week_and_day_range_at_calendar_limits():
    # 0001-01-01 is a Monday; a Sunday-based week would start before it
    assert start_of_week("0001-01-01", week_starts_on=6) is None
    assert end_of_week("0001-01-01", week_starts_on=6) is None
    assert start_of_week("0001-01-01") == "0001-01-01"
    assert list(enumerate_days_inclusive("9999-12-30", "9999-12-31")) == ["9999-12-30", "9999-12-31"]
    assert len(enumerate_days_inclusive("9999-12-31", "9999-12-31")) == 1


def test_month_helpers():
    assert month_range("2024-02") == ("2024-02-01", "2024-02-29")
    assert next_month("2024-12") == "2025-01"
    assert prev_month("2024-01") == "2023-12"

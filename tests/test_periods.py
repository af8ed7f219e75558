from datetime import date

import pytest

from periods import (
    Period,
    budget_months,
    custom_period,
    month_period,
    months_in_period,
    resolve_period,
)


def test_month_period_covers_whole_month() -> None:
    assert month_period(2025, 2) == Period("month", date(2025, 2, 1), date(2025, 2, 28))
    assert month_period(2024, 2).end == date(2024, 2, 29)
    assert month_period(2025, 12) == Period(
        "month", date(2025, 12, 1), date(2025, 12, 31)
    )


def test_week_is_trailing_seven_days() -> None:
    period = resolve_period("week", today=date(2025, 3, 5))
    assert period.start == date(2025, 2, 26)
    assert period.end == date(2025, 3, 5)


def test_month_uses_current_month() -> None:
    period = resolve_period("month", today=date(2025, 4, 17))
    assert (period.start, period.end) == (date(2025, 4, 1), date(2025, 4, 30))


@pytest.mark.parametrize(
    "today, start, end",
    [
        (date(2025, 1, 10), date(2025, 1, 1), date(2025, 3, 31)),
        (date(2025, 3, 31), date(2025, 1, 1), date(2025, 3, 31)),
        (date(2025, 5, 2), date(2025, 4, 1), date(2025, 6, 30)),
        (date(2025, 12, 31), date(2025, 10, 1), date(2025, 12, 31)),
    ],
)
def test_quarter_blocks(today: date, start: date, end: date) -> None:
    period = resolve_period("quarter", today=today)
    assert (period.start, period.end) == (start, end)


def test_year_spans_calendar_year() -> None:
    period = resolve_period("year", today=date(2025, 7, 4))
    assert (period.start, period.end) == (date(2025, 1, 1), date(2025, 12, 31))


@pytest.mark.parametrize("tag", [None, "", "fortnight", "MONTH"])
def test_unknown_tags_fall_back_to_month(tag) -> None:
    today = date(2025, 11, 20)
    assert resolve_period(tag, today=today) == resolve_period("month", today=today)


def test_custom_period_validates_order() -> None:
    period = custom_period("2025-01-05", "2025-02-10")
    assert (period.start, period.end) == (date(2025, 1, 5), date(2025, 2, 10))
    with pytest.raises(ValueError):
        custom_period("2025-02-10", "2025-01-05")


def test_months_in_period_crosses_year_boundary() -> None:
    period = Period("custom", date(2024, 11, 15), date(2025, 2, 1))
    assert months_in_period(period) == [(2024, 11), (2024, 12), (2025, 1), (2025, 2)]


def test_short_periods_use_the_budgets_of_their_end_month() -> None:
    crossing = resolve_period("week", today=date(2025, 3, 5))
    inside = resolve_period("week", today=date(2025, 3, 15))
    assert budget_months(crossing) == [(2025, 3)]
    assert budget_months(inside) == [(2025, 3)]
    assert budget_months(custom_period("2025-01-25", "2025-02-10")) == [(2025, 2)]


def test_long_periods_use_every_month_they_touch() -> None:
    assert budget_months(month_period(2025, 2)) == [(2025, 2)]
    assert budget_months(resolve_period("quarter", today=date(2025, 5, 1))) == [
        (2025, 4),
        (2025, 5),
        (2025, 6),
    ]
    assert budget_months(custom_period("2025-01-20", "2025-02-28")) == [
        (2025, 1),
        (2025, 2),
    ]

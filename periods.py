from dataclasses import dataclass
from datetime import date, timedelta
from typing import Optional


@dataclass(frozen=True)
class Period:
    slug: str
    start: date
    end: date


RANGE_TAGS = ("week", "month", "quarter", "year")


def _month_end(year: int, month: int) -> date:
    if month == 12:
        return date(year + 1, 1, 1) - date.resolution
    return date(year, month + 1, 1) - date.resolution


def month_period(year: int, month: int) -> Period:
    return Period("month", date(year, month, 1), _month_end(year, month))


def resolve_period(range_tag: Optional[str], *, today: date) -> Period:
    """Turn a symbolic range into closed calendar bounds relative to ``today``.

    Unknown or missing tags resolve like ``"month"``.
    """
    if range_tag == "week":
        return Period("week", today - timedelta(days=7), today)
    if range_tag == "quarter":
        first_month = ((today.month - 1) // 3) * 3 + 1
        return Period(
            "quarter",
            date(today.year, first_month, 1),
            _month_end(today.year, first_month + 2),
        )
    if range_tag == "year":
        return Period("year", date(today.year, 1, 1), date(today.year, 12, 31))

    # this month
    return Period("month", today.replace(day=1), _month_end(today.year, today.month))


def custom_period(start: str, end: str) -> Period:
    start_date = date.fromisoformat(start)
    end_date = date.fromisoformat(end)
    if start_date > end_date:
        raise ValueError("Start date must be before end date")
    return Period("custom", start_date, end_date)


def months_in_period(period: Period) -> list[tuple[int, int]]:
    months: list[tuple[int, int]] = []
    year, month = period.start.year, period.start.month
    while (year, month) <= (period.end.year, period.end.month):
        months.append((year, month))
        if month == 12:
            year, month = year + 1, 1
        else:
            month += 1
    return months


def budget_months(period: Period) -> list[tuple[int, int]]:
    """Months whose budgets apply to ``period``.

    A period shorter than the month it ends in (a week, a short custom range)
    is measured against that single month's budgets, even when it starts in
    the previous month. Longer periods use every month they touch.
    """
    end = period.end
    days = (end - period.start).days + 1
    if days < _month_end(end.year, end.month).day:
        return [(end.year, end.month)]
    return months_in_period(period)

"""
stats.py
--------
Summary views over a user's expenses: total, count, per-category sums,
a fixed seven-day window and per-month sums.

Days are bucketed by their date ordinal (``date.toordinal()``), computed
once when an expense is created. The display string of a day is produced
by `format_day` only, both when an expense is stored and when the
seven-day keys are published.
"""

from collections import defaultdict
from datetime import date, datetime
from typing import Iterable, Optional

from config import DATE_DISPLAY_FORMAT

WINDOW_DAYS = 7


def day_index(moment) -> int:
    """Canonical day key for a date or datetime."""
    if isinstance(moment, datetime):
        moment = moment.date()
    return moment.toordinal()


def format_day(day: int) -> str:
    return date.fromordinal(day).strftime(DATE_DISPLAY_FORMAT)


def month_label(moment: datetime) -> str:
    return f"{moment.month}/{moment.year}"


def compute_stats(expenses: Iterable, today: Optional[date] = None) -> dict:
    """
    Aggregate expenses in a single pass.

    Args:
        expenses: Objects exposing ``amount``, ``category``, ``created_at``
            and ``day`` (see `day_index`).
        today: Last day of the seven-day window. Defaults to the local date.

    Returns:
        Dict with ``total``, ``count``, ``byCategory``, ``last7Days`` and
        ``byMonth``. ``last7Days`` always holds seven entries, oldest first,
        zero for days without spending.
    """
    today_key = day_index(today or date.today())
    window = range(today_key - WINDOW_DAYS + 1, today_key + 1)
    daily = {day: 0.0 for day in window}

    total = 0.0
    count = 0
    by_category = defaultdict(float)
    by_month = defaultdict(float)

    for expense in expenses:
        amount = expense.amount
        total += amount
        count += 1
        by_category[expense.category] += amount
        by_month[month_label(expense.created_at)] += amount
        if expense.day in daily:
            daily[expense.day] += amount

    return {
        "total": total,
        "count": count,
        "byCategory": dict(by_category),
        "last7Days": {format_day(day): daily[day] for day in window},
        "byMonth": dict(by_month),
    }

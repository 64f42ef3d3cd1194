from __future__ import annotations

from datetime import date, timedelta

from engine.constants import DAYS_PER_YEAR


def years_between(start: date, end: date) -> float:
    return (end - start).days / DAYS_PER_YEAR


def add_years(d: date, years: int) -> date:
    try:
        return d.replace(year=d.year + years)
    except ValueError:
        # Feb 29 into a non-leap year
        return d.replace(year=d.year + years, day=28)


def add_fractional_years(d: date, years: float) -> date:
    return d + timedelta(days=round(years * DAYS_PER_YEAR))

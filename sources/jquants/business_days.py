"""
Business date resolution for J-Quants requests.

Holidays are not modelled: a business day is any weekday.
"""

import datetime
from typing import Optional

SATURDAY = 5
SUNDAY = 6


def latest_weekday(day: datetime.date) -> datetime.date:
    """Roll a Saturday or Sunday back to the preceding Friday."""
    if day.weekday() == SUNDAY:
        return day - datetime.timedelta(days=2)
    if day.weekday() == SATURDAY:
        return day - datetime.timedelta(days=1)
    return day


def resolve_latest_business_date(
    delay_days: int = 0,
    today: Optional[datetime.date] = None,
    strict: bool = False,
) -> datetime.date:
    """
    Most recent date J-Quants can serve quotes for.

    The weekend roll-back happens once, before the plan delay is subtracted,
    so with strict=False a delay that is not a multiple of 7 can land on a
    weekend. strict=True rolls the delayed date back to a weekday again.

    Args:
        delay_days: Plan reporting lag in calendar days (84 on the free plan)
        today: Reference date (defaults to the local calendar date)
        strict: Re-apply the weekend roll-back after the delay

    Returns:
        The resolved calendar date
    """
    if delay_days < 0:
        raise ValueError(f"delay_days must be >= 0, got {delay_days}")

    today = today or datetime.date.today()
    resolved = latest_weekday(today) - datetime.timedelta(days=delay_days)
    if strict:
        resolved = latest_weekday(resolved)
    return resolved

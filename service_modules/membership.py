"""
Membership lifecycle - plan durations, expiry and read-time status.

The stored ``members.status`` column is only a cache of the last owner action.
Callers must go through ``classify_member_status`` to get the status a member
actually has today.
"""
import calendar
from datetime import date, datetime
from typing import Union

from .errors import ValidationError

PLAN_MONTHS = {
    "monthly": 1,
    "quarterly": 3,
    "yearly": 12,
}

MEMBER_STATUSES = ("active", "inactive", "expired")

DateLike = Union[date, datetime]


def add_months(start: DateLike, months: int) -> DateLike:
    """
    Add calendar months, clamping the day to the end of the target month
    (Jan 31 + 1 month => Feb 28/29, Feb 29 + 12 months => Feb 28).
    Time of day is kept when ``start`` is a datetime.
    """
    month_index = start.month - 1 + months
    year = start.year + month_index // 12
    month = month_index % 12 + 1
    day = min(start.day, calendar.monthrange(year, month)[1])
    return start.replace(year=year, month=month, day=day)


def compute_membership_end(start: DateLike, plan: str) -> DateLike:
    months = PLAN_MONTHS.get(plan)
    if months is None:
        raise ValidationError(f"Unknown membership plan '{plan}'. Expected one of: {', '.join(PLAN_MONTHS)}")
    try:
        return add_months(start, months)
    except (ValueError, OverflowError):
        raise ValidationError(f"membership_start {start.isoformat()} is out of range for a {plan} plan")


def _as_date(value: DateLike) -> date:
    return value.date() if isinstance(value, datetime) else value


def classify_member_status(today: DateLike, membership_end: DateLike, stored_status: str) -> str:
    """
    Effective status of a member.

    Past ``membership_end`` the member is ``expired``; an owner-set ``inactive``
    is an explicit override and survives expiry.
    """
    if stored_status == "inactive":
        return "inactive"
    if _as_date(membership_end) < _as_date(today):
        return "expired"
    return stored_status or "active"


def days_until(today: DateLike, membership_end: DateLike) -> int:
    return (_as_date(membership_end) - _as_date(today)).days


def is_expiring_soon(today: DateLike, membership_end: DateLike, threshold_days: int = 7) -> bool:
    return 0 <= days_until(today, membership_end) <= threshold_days

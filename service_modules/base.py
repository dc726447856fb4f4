"""
Base service utilities and shared imports.
All services should import from here for common functionality.
"""
import logging
from datetime import date, datetime, timedelta
from decimal import Decimal

from database import get_db_session
from models_orm import (
    UserORM, GymORM, BranchORM, MemberORM,
    PaymentORM, AttendanceORM, CommunicationORM
)
from .errors import Unauthorized, NotFound, ValidationError, Conflict, UpstreamError

# Re-export for convenience
__all__ = [
    'logging', 'date', 'datetime', 'timedelta', 'Decimal',
    'get_db_session',
    'UserORM', 'GymORM', 'BranchORM', 'MemberORM',
    'PaymentORM', 'AttendanceORM', 'CommunicationORM',
    'Unauthorized', 'NotFound', 'ValidationError', 'Conflict', 'UpstreamError',
    'money', 'to_local_naive',
]

logger = logging.getLogger("gym_app")

CENTS = Decimal("0.01")


def money(value) -> Decimal:
    """Normalise a DB aggregate (None, float, int or Decimal) to 2dp Decimal."""
    if value is None:
        return Decimal("0.00")
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return value.quantize(CENTS)


def to_local_naive(value):
    """Timestamps are stored as naive server-local time."""
    if value is not None and value.tzinfo is not None:
        return value.astimezone().replace(tzinfo=None)
    return value

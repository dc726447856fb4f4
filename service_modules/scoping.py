"""
Owner-scoped queries.

Every owner-facing read goes through ``OwnerScope.query``, which walks the
ownership chain (Payment -> Member -> Branch -> Gym -> owner) for the requested
entity. The join paths live in one table below, so a new query cannot forget a
link of the chain.
"""
from datetime import datetime, time, timedelta
from typing import Optional

from sqlalchemy.orm import Query, Session

from .base import (
    GymORM, BranchORM, MemberORM, PaymentORM, AttendanceORM, CommunicationORM,
    NotFound, Unauthorized, ValidationError, logger
)

# entity -> joins needed to reach GymORM.owner_id
_JOIN_PATHS = {
    GymORM: (),
    BranchORM: (
        (GymORM, BranchORM.gym_id == GymORM.id),
    ),
    MemberORM: (
        (BranchORM, MemberORM.branch_id == BranchORM.id),
        (GymORM, BranchORM.gym_id == GymORM.id),
    ),
    PaymentORM: (
        (MemberORM, PaymentORM.member_id == MemberORM.id),
        (BranchORM, MemberORM.branch_id == BranchORM.id),
        (GymORM, BranchORM.gym_id == GymORM.id),
    ),
    AttendanceORM: (
        (BranchORM, AttendanceORM.branch_id == BranchORM.id),
        (GymORM, BranchORM.gym_id == GymORM.id),
    ),
    CommunicationORM: (
        (BranchORM, CommunicationORM.branch_id == BranchORM.id),
        (GymORM, BranchORM.gym_id == GymORM.id),
    ),
}

# widest expiring-members window; keeps now + days inside datetime range
MAX_WINDOW_DAYS = 36500

_LABELS = {
    GymORM: "Gym",
    BranchORM: "Branch",
    MemberORM: "Member",
    PaymentORM: "Payment",
    AttendanceORM: "Attendance record",
    CommunicationORM: "Communication",
}


def day_bounds(now: datetime):
    """[local midnight today, local midnight tomorrow)"""
    start = datetime.combine(now.date(), time.min)
    return start, start + timedelta(days=1)


class OwnerScope:
    """Capability over one owner's data, bound to a DB session."""

    def __init__(self, db: Session, ctx):
        if ctx is None or not getattr(ctx, "owner_id", None):
            raise Unauthorized("Authentication required")
        self.db = db
        self.owner_id = ctx.owner_id

    def query(self, model, *columns) -> Query:
        """
        Query ``model`` restricted to this owner. Pass ``columns`` for
        aggregates, e.g. ``scope.query(MemberORM, func.count(MemberORM.id))``.
        """
        if columns:
            q = self.db.query(*columns).select_from(model)
        else:
            q = self.db.query(model)
        for target, onclause in _JOIN_PATHS[model]:
            q = q.join(target, onclause)
        return q.filter(GymORM.owner_id == self.owner_id)

    def get(self, model, entity_id: str):
        """Fetch one entity in scope. Out-of-scope rows are reported as missing."""
        obj = self.query(model).filter(model.id == entity_id).first()
        if obj is None:
            logger.warning(f"SCOPE: {_LABELS[model]} {entity_id} not found for owner {self.owner_id}")
            raise NotFound(f"{_LABELS[model]} not found")
        return obj

    # --- Collections ---

    def gyms(self) -> Query:
        return self.query(GymORM).order_by(GymORM.created_at.asc())

    def branches(self, gym_id: Optional[str] = None) -> Query:
        q = self.query(BranchORM)
        if gym_id:
            q = q.filter(BranchORM.gym_id == gym_id)
        return q.order_by(BranchORM.created_at.asc())

    def members(self, branch_id: Optional[str] = None) -> Query:
        q = self.query(MemberORM)
        if branch_id:
            q = q.filter(MemberORM.branch_id == branch_id)
        return q.order_by(MemberORM.created_at.desc())

    def expiring_members(self, within_days: int, now: datetime) -> Query:
        if within_days < 0 or within_days > MAX_WINDOW_DAYS:
            raise ValidationError(f"days must be between 0 and {MAX_WINDOW_DAYS}")
        return self.query(MemberORM).filter(
            MemberORM.membership_end >= now,
            MemberORM.membership_end <= now + timedelta(days=within_days)
        ).order_by(MemberORM.membership_end.asc())

    def payments(self, status: Optional[str] = None, member_id: Optional[str] = None) -> Query:
        q = self.query(PaymentORM)
        if status:
            q = q.filter(PaymentORM.status == status)
        if member_id:
            q = q.filter(PaymentORM.member_id == member_id)
        return q.order_by(PaymentORM.created_at.desc())

    def attendance_between(self, start: datetime, end: datetime, branch_id: Optional[str] = None) -> Query:
        q = self.query(AttendanceORM).filter(
            AttendanceORM.check_in_time >= start,
            AttendanceORM.check_in_time < end
        )
        if branch_id:
            q = q.filter(AttendanceORM.branch_id == branch_id)
        return q.order_by(AttendanceORM.check_in_time.desc())

    def today_attendance(self, now: datetime, branch_id: Optional[str] = None) -> Query:
        start, end = day_bounds(now)
        return self.attendance_between(start, end, branch_id)

    def communications(self, branch_id: Optional[str] = None) -> Query:
        q = self.query(CommunicationORM)
        if branch_id:
            q = q.filter(CommunicationORM.branch_id == branch_id)
        return q.order_by(CommunicationORM.sent_at.desc())

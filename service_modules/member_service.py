"""
Member Service - registration, owner-scoped listings and status changes.
"""
from typing import List, Optional

from sqlalchemy.exc import IntegrityError

from config import EXPIRING_SOON_DAYS
from models import CreateMemberRequest, Member
from .base import (
    datetime, get_db_session, BranchORM, MemberORM,
    NotFound, ValidationError, Conflict, logger, to_local_naive
)
from .membership import (
    MEMBER_STATUSES, compute_membership_end, classify_member_status, is_expiring_soon
)
from .qr_service import issue_member_qr_id
from .scoping import OwnerScope

QR_ID_ATTEMPTS = 5


def to_member(member: MemberORM, now: Optional[datetime] = None) -> Member:
    """ORM row -> DTO carrying the read-time status."""
    now = now or datetime.now()
    return Member.model_validate(member).model_copy(update={
        "status": classify_member_status(now, member.membership_end, member.status),
        "expiring_soon": is_expiring_soon(now, member.membership_end, EXPIRING_SOON_DAYS),
    })


class MemberService:
    """Service for gym members."""

    def create_member(self, data: CreateMemberRequest) -> Member:
        """
        Register a member at a branch. Public: used by the self-registration
        page reached through the branch QR code.
        """
        db = get_db_session()
        try:
            branch = db.query(BranchORM).filter(BranchORM.id == data.branch_id).first()
            if not branch:
                raise NotFound("Branch not found")
            if not branch.is_active:
                raise ValidationError("Branch is not accepting registrations")

            start = to_local_naive(data.membership_start) if data.membership_start else datetime.now()
            end = compute_membership_end(start, data.membership_plan)

            for attempt in range(1, QR_ID_ATTEMPTS + 1):
                member = MemberORM(
                    name=data.name.strip(),
                    email=data.email or None,
                    phone=data.phone.strip(),
                    age=data.age,
                    branch_id=branch.id,
                    membership_plan=data.membership_plan,
                    membership_start=start,
                    membership_end=end,
                    status="active",
                    qr_code_id=issue_member_qr_id(),
                )
                db.add(member)
                try:
                    db.commit()
                except IntegrityError:
                    db.rollback()
                    logger.warning(f"QR id collision on attempt {attempt} for branch {branch.id}, retrying")
                    continue

                logger.info(f"Registered member {member.id} at branch {branch.id} ({data.membership_plan})")
                return to_member(member)

            raise Conflict("Could not allocate a unique QR code, please retry")
        finally:
            db.close()

    def list_members(self, ctx, branch_id: Optional[str] = None) -> List[Member]:
        """All members of the owner's gyms, newest first."""
        db = get_db_session()
        try:
            scope = OwnerScope(db, ctx)
            now = datetime.now()
            return [to_member(m, now) for m in scope.members(branch_id).all()]
        finally:
            db.close()

    def list_expiring_members(self, ctx, days: int) -> List[Member]:
        """Members whose membership ends within ``days`` from now, soonest first."""
        db = get_db_session()
        try:
            scope = OwnerScope(db, ctx)
            now = datetime.now()
            return [to_member(m, now) for m in scope.expiring_members(days, now).all()]
        finally:
            db.close()

    def get_member(self, ctx, member_id: str) -> Member:
        db = get_db_session()
        try:
            scope = OwnerScope(db, ctx)
            return to_member(scope.get(MemberORM, member_id))
        finally:
            db.close()

    def update_member_status(self, ctx, member_id: str, status: str) -> Member:
        if status not in MEMBER_STATUSES:
            raise ValidationError(f"Invalid member status '{status}'")

        db = get_db_session()
        try:
            scope = OwnerScope(db, ctx)
            member = scope.get(MemberORM, member_id)
            member.status = status
            db.commit()
            logger.info(f"Member {member_id} status set to {status} by owner {scope.owner_id}")
            return to_member(member)
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()


# Singleton instance
member_service = MemberService()


def get_member_service() -> MemberService:
    """Dependency injection helper."""
    return member_service

"""
Attendance Service - QR check-in, manual check-in and check-out.

Check-ins are not de-duplicated: every scan creates a new attendance row.
"""
from typing import List, Optional

from models import Attendance, CheckInResult
from .base import (
    datetime, get_db_session, BranchORM, MemberORM, AttendanceORM,
    NotFound, ValidationError, Conflict, logger
)
from .member_service import to_member
from .scoping import OwnerScope


class AttendanceService:
    """Service for member attendance."""

    def check_in(self, qr_code_id: str) -> CheckInResult:
        """Resolve a scanned member QR code and record a check-in at their branch."""
        if not qr_code_id or not qr_code_id.strip():
            raise ValidationError("qr_code_id is required")

        db = get_db_session()
        try:
            member = db.query(MemberORM).filter(MemberORM.qr_code_id == qr_code_id.strip()).first()
            if not member:
                logger.info(f"Check-in rejected, unknown QR code {qr_code_id!r}")
                raise NotFound("Member not found")

            now = datetime.now()
            record = AttendanceORM(
                member_id=member.id,
                branch_id=member.branch_id,
                check_in_time=now,
            )
            db.add(record)
            db.commit()

            logger.info(f"Member {member.id} checked in at branch {member.branch_id}")
            return CheckInResult(
                attendance=Attendance.model_validate(record),
                member=to_member(member, now),
            )
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    def record_attendance(self, ctx, member_id: str) -> Attendance:
        """Manual check-in by the owner from the dashboard."""
        db = get_db_session()
        try:
            scope = OwnerScope(db, ctx)
            member = scope.get(MemberORM, member_id)
            record = AttendanceORM(
                member_id=member.id,
                branch_id=member.branch_id,
                check_in_time=datetime.now(),
            )
            db.add(record)
            db.commit()
            logger.info(f"Owner {scope.owner_id} recorded attendance for member {member.id}")
            return Attendance.model_validate(record)
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    def check_out(self, ctx, attendance_id: str) -> Attendance:
        db = get_db_session()
        try:
            scope = OwnerScope(db, ctx)
            record = scope.get(AttendanceORM, attendance_id)
            if record.check_out_time is not None:
                raise Conflict("Member already checked out")
            record.check_out_time = datetime.now()
            db.commit()
            return Attendance.model_validate(record)
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    def today_attendance(self, ctx, branch_id: Optional[str] = None) -> List[Attendance]:
        """Check-ins since local midnight across the owner's branches."""
        db = get_db_session()
        try:
            scope = OwnerScope(db, ctx)
            if branch_id:
                scope.get(BranchORM, branch_id)
            rows = scope.today_attendance(datetime.now(), branch_id).all()
            return [Attendance.model_validate(r) for r in rows]
        finally:
            db.close()

    def attendance_for_member(self, ctx, member_id: str) -> List[Attendance]:
        db = get_db_session()
        try:
            scope = OwnerScope(db, ctx)
            scope.get(MemberORM, member_id)
            rows = scope.query(AttendanceORM).filter(
                AttendanceORM.member_id == member_id
            ).order_by(AttendanceORM.check_in_time.desc()).all()
            return [Attendance.model_validate(r) for r in rows]
        finally:
            db.close()


# Singleton instance
attendance_service = AttendanceService()


def get_attendance_service() -> AttendanceService:
    """Dependency injection helper."""
    return attendance_service

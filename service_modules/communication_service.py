"""
Communication Service - log of WhatsApp/email/announcement messages.

Delivery happens outside this app; we only keep the record and its status.
"""
from typing import List, Optional

from models import CreateCommunicationRequest, Communication
from .base import (
    get_db_session, BranchORM, MemberORM, CommunicationORM,
    ValidationError, logger
)
from .scoping import OwnerScope

COMMUNICATION_TYPES = ("whatsapp", "email", "announcement")
COMMUNICATION_STATUSES = ("sent", "failed", "pending")


class CommunicationService:

    def create_communication(self, ctx, data: CreateCommunicationRequest) -> Communication:
        if data.type not in COMMUNICATION_TYPES:
            raise ValidationError(f"Invalid communication type '{data.type}'")
        if data.status not in COMMUNICATION_STATUSES:
            raise ValidationError(f"Invalid communication status '{data.status}'")

        db = get_db_session()
        try:
            scope = OwnerScope(db, ctx)
            branch = scope.get(BranchORM, data.branch_id)
            if data.member_id:
                member = scope.get(MemberORM, data.member_id)
                if member.branch_id != branch.id:
                    raise ValidationError("Member does not belong to this branch")

            comm = CommunicationORM(
                branch_id=branch.id,
                member_id=data.member_id,
                type=data.type,
                subject=data.subject,
                message=data.message,
                status=data.status,
            )
            db.add(comm)
            db.commit()

            logger.info(f"Logged {data.type} communication {comm.id} for branch {branch.id}")
            return Communication.model_validate(comm)
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    def communications(self, ctx, branch_id: Optional[str] = None) -> List[Communication]:
        """Owner's communications, newest first; optionally for one branch."""
        db = get_db_session()
        try:
            scope = OwnerScope(db, ctx)
            if branch_id:
                scope.get(BranchORM, branch_id)
            return [Communication.model_validate(c) for c in scope.communications(branch_id).all()]
        finally:
            db.close()


# Singleton instance
communication_service = CommunicationService()


def get_communication_service() -> CommunicationService:
    """Dependency injection helper."""
    return communication_service

"""
Metrics Service - dashboard figures per owner or per branch.
"""
from typing import Optional

from sqlalchemy import func

from models import Metrics
from .base import (
    datetime, timedelta, get_db_session, BranchORM, MemberORM, PaymentORM,
    logger, money
)
from .scoping import OwnerScope, day_bounds

REVENUE_WINDOW_DAYS = 30


class MetricsService:
    """
    All four figures come from the same owner scope, so they always describe
    the same set of members. A member counts as active when the stored status
    is ``active`` and the membership has not ended before today, matching the
    read-time status in ``membership.classify_member_status``.
    """

    def _compute(self, scope: OwnerScope, branch_id: Optional[str], now: datetime) -> Metrics:
        today_start, _ = day_bounds(now)

        members = scope.query(MemberORM, func.count(MemberORM.id))
        payments = scope.query(PaymentORM, func.sum(PaymentORM.amount))
        if branch_id:
            members = members.filter(MemberORM.branch_id == branch_id)
            payments = payments.filter(MemberORM.branch_id == branch_id)

        total = members.scalar() or 0
        active = members.filter(
            MemberORM.status == "active",
            MemberORM.membership_end >= today_start
        ).scalar() or 0

        revenue = payments.filter(
            PaymentORM.status == "paid",
            PaymentORM.paid_at >= now - timedelta(days=REVENUE_WINDOW_DAYS)
        ).scalar()
        pending = payments.filter(PaymentORM.status == "pending").scalar()

        return Metrics(
            total_members=total,
            active_members=active,
            monthly_revenue=money(revenue),
            pending_fees=money(pending),
        )

    def owner_metrics(self, ctx) -> Metrics:
        db = get_db_session()
        try:
            scope = OwnerScope(db, ctx)
            metrics = self._compute(scope, None, datetime.now())
            logger.debug(f"Metrics for owner {scope.owner_id}: {metrics}")
            return metrics
        finally:
            db.close()

    def branch_metrics(self, ctx, branch_id: str) -> Metrics:
        db = get_db_session()
        try:
            scope = OwnerScope(db, ctx)
            scope.get(BranchORM, branch_id)
            return self._compute(scope, branch_id, datetime.now())
        finally:
            db.close()


# Singleton instance
metrics_service = MetricsService()


def get_metrics_service() -> MetricsService:
    """Dependency injection helper."""
    return metrics_service

"""
Analytics Routes - dashboard metric cards.
"""
from fastapi import APIRouter, Depends

from auth import get_current_owner, OwnerContext
from models import Metrics
from service_modules.metrics_service import get_metrics_service, MetricsService

router = APIRouter()


@router.get("/api/analytics", response_model=Metrics)
def get_owner_metrics(
    owner: OwnerContext = Depends(get_current_owner),
    service: MetricsService = Depends(get_metrics_service)
):
    """Totals across every gym and branch of the owner."""
    return service.owner_metrics(owner)


@router.get("/api/branches/{branch_id}/analytics", response_model=Metrics)
def get_branch_metrics(
    branch_id: str,
    owner: OwnerContext = Depends(get_current_owner),
    service: MetricsService = Depends(get_metrics_service)
):
    return service.branch_metrics(owner, branch_id)

"""
Gym Routes - gyms, branches and branch registration QR codes.
"""
from fastapi import APIRouter, Depends
from typing import List, Optional

from auth import get_current_owner, OwnerContext
from models import CreateGymRequest, CreateBranchRequest, Gym, Branch, BranchQr
from service_modules.gym_service import get_gym_service, GymService
from service_modules.qr_service import get_qr_service, QrService

router = APIRouter()


@router.post("/api/gyms", response_model=Gym)
def create_gym(
    data: CreateGymRequest,
    owner: OwnerContext = Depends(get_current_owner),
    service: GymService = Depends(get_gym_service)
):
    return service.create_gym(owner, data)


@router.get("/api/gyms", response_model=List[Gym])
def list_gyms(
    owner: OwnerContext = Depends(get_current_owner),
    service: GymService = Depends(get_gym_service)
):
    return service.list_gyms(owner)


@router.post("/api/branches", response_model=Branch)
def create_branch(
    data: CreateBranchRequest,
    base_url: Optional[str] = None,
    owner: OwnerContext = Depends(get_current_owner),
    service: GymService = Depends(get_gym_service)
):
    """Create a branch; its registration QR code is generated straight away."""
    return service.create_branch(owner, data, base_url)


@router.get("/api/gyms/{gym_id}/branches", response_model=List[Branch])
def list_branches(
    gym_id: str,
    owner: OwnerContext = Depends(get_current_owner),
    service: GymService = Depends(get_gym_service)
):
    return service.list_branches(owner, gym_id)


@router.get("/api/branches/{branch_id}", response_model=Branch)
def get_branch(
    branch_id: str,
    owner: OwnerContext = Depends(get_current_owner),
    service: GymService = Depends(get_gym_service)
):
    return service.get_branch(owner, branch_id)


@router.post("/api/qr/generate/{branch_id}", response_model=BranchQr)
def generate_branch_qr(
    branch_id: str,
    base_url: Optional[str] = None,
    owner: OwnerContext = Depends(get_current_owner),
    service: QrService = Depends(get_qr_service)
):
    """Regenerate the branch's registration QR code, replacing the previous one."""
    return service.generate_branch_qr(owner, branch_id, base_url)

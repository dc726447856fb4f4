"""
Communication Routes - member messages and announcements log.
"""
from fastapi import APIRouter, Depends
from typing import List

from auth import get_current_owner, OwnerContext
from models import CreateCommunicationRequest, Communication
from service_modules.communication_service import get_communication_service, CommunicationService

router = APIRouter()


@router.post("/api/communications", response_model=Communication)
def create_communication(
    data: CreateCommunicationRequest,
    owner: OwnerContext = Depends(get_current_owner),
    service: CommunicationService = Depends(get_communication_service)
):
    return service.create_communication(owner, data)


@router.get("/api/communications", response_model=List[Communication])
def list_communications(
    owner: OwnerContext = Depends(get_current_owner),
    service: CommunicationService = Depends(get_communication_service)
):
    return service.communications(owner)


@router.get("/api/branches/{branch_id}/communications", response_model=List[Communication])
def list_branch_communications(
    branch_id: str,
    owner: OwnerContext = Depends(get_current_owner),
    service: CommunicationService = Depends(get_communication_service)
):
    return service.communications(owner, branch_id)

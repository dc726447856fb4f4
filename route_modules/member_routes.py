"""
Member Routes - public self-registration plus owner-scoped member views.
"""
from fastapi import APIRouter, Depends
from typing import List

from auth import get_current_owner, OwnerContext
from models import (
    CreateMemberRequest, UpdateMemberStatusRequest, Member, Payment, Attendance
)
from service_modules.member_service import get_member_service, MemberService
from service_modules.payment_service import get_payment_service, PaymentService
from service_modules.attendance_service import get_attendance_service, AttendanceService

router = APIRouter()


# --- PUBLIC ---

@router.post("/api/members", response_model=Member)
def create_member(
    data: CreateMemberRequest,
    service: MemberService = Depends(get_member_service)
):
    """Self-registration from the branch QR code. No login required."""
    return service.create_member(data)


# --- OWNER ---

@router.get("/api/members", response_model=List[Member])
def list_members(
    owner: OwnerContext = Depends(get_current_owner),
    service: MemberService = Depends(get_member_service)
):
    return service.list_members(owner)


@router.get("/api/members/expiring/{days}", response_model=List[Member])
def list_expiring_members(
    days: int,
    owner: OwnerContext = Depends(get_current_owner),
    service: MemberService = Depends(get_member_service)
):
    """Members whose plan ends within the next ``days`` days."""
    return service.list_expiring_members(owner, days)


@router.get("/api/branches/{branch_id}/members", response_model=List[Member])
def list_branch_members(
    branch_id: str,
    owner: OwnerContext = Depends(get_current_owner),
    service: MemberService = Depends(get_member_service)
):
    return service.list_members(owner, branch_id)


@router.get("/api/members/{member_id}", response_model=Member)
def get_member(
    member_id: str,
    owner: OwnerContext = Depends(get_current_owner),
    service: MemberService = Depends(get_member_service)
):
    return service.get_member(owner, member_id)


@router.patch("/api/members/{member_id}/status", response_model=Member)
def update_member_status(
    member_id: str,
    data: UpdateMemberStatusRequest,
    owner: OwnerContext = Depends(get_current_owner),
    service: MemberService = Depends(get_member_service)
):
    return service.update_member_status(owner, member_id, data.status)


@router.get("/api/members/{member_id}/payments", response_model=List[Payment])
def get_member_payments(
    member_id: str,
    owner: OwnerContext = Depends(get_current_owner),
    service: PaymentService = Depends(get_payment_service)
):
    return service.payments_for_member(owner, member_id)


@router.get("/api/members/{member_id}/attendance", response_model=List[Attendance])
def get_member_attendance(
    member_id: str,
    owner: OwnerContext = Depends(get_current_owner),
    service: AttendanceService = Depends(get_attendance_service)
):
    return service.attendance_for_member(owner, member_id)

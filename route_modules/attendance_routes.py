"""
Attendance Routes - kiosk QR check-in and owner attendance views.
"""
from fastapi import APIRouter, Depends
from typing import List, Optional

from auth import get_current_owner, OwnerContext
from models import CheckInRequest, RecordAttendanceRequest, Attendance, CheckInResult
from service_modules.attendance_service import get_attendance_service, AttendanceService

router = APIRouter()


@router.post("/api/attendance/checkin", response_model=CheckInResult)
def check_in(
    data: CheckInRequest,
    service: AttendanceService = Depends(get_attendance_service)
):
    """Scan of a member QR code at the front desk kiosk."""
    return service.check_in(data.qr_code_id)


@router.post("/api/attendance", response_model=Attendance)
def record_attendance(
    data: RecordAttendanceRequest,
    owner: OwnerContext = Depends(get_current_owner),
    service: AttendanceService = Depends(get_attendance_service)
):
    return service.record_attendance(owner, data.member_id)


@router.get("/api/attendance/today", response_model=List[Attendance])
def today_attendance(
    branch_id: Optional[str] = None,
    owner: OwnerContext = Depends(get_current_owner),
    service: AttendanceService = Depends(get_attendance_service)
):
    return service.today_attendance(owner, branch_id)


@router.post("/api/attendance/{attendance_id}/checkout", response_model=Attendance)
def check_out(
    attendance_id: str,
    owner: OwnerContext = Depends(get_current_owner),
    service: AttendanceService = Depends(get_attendance_service)
):
    return service.check_out(owner, attendance_id)

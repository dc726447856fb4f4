from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Optional, Literal
from datetime import datetime
from decimal import Decimal

MembershipPlan = Literal["monthly", "quarterly", "yearly"]
MemberStatus = Literal["active", "inactive", "expired"]
PaymentStatus = Literal["pending", "paid", "failed", "overdue"]
CommunicationType = Literal["whatsapp", "email", "announcement"]
CommunicationStatus = Literal["sent", "failed", "pending"]


def _normalize_email(v: str) -> str:
    v = v.strip().lower()
    if "@" not in v:
        raise ValueError("Invalid email address")
    return v


class _Record(BaseModel):
    model_config = ConfigDict(from_attributes=True)


# --- OWNERS / AUTH ---
class RegisterOwnerRequest(BaseModel):
    username: str = Field(min_length=3)
    email: str = Field(min_length=3)
    password: str = Field(min_length=6)
    name: str = Field(min_length=1)
    phone: Optional[str] = None

    @field_validator("email")
    @classmethod
    def email_has_at(cls, v: str) -> str:
        return _normalize_email(v)


class Owner(_Record):
    id: str
    username: str
    email: str
    name: str
    phone: Optional[str] = None
    created_at: Optional[datetime] = None


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"
    owner_id: str


# --- GYMS / BRANCHES ---
class CreateGymRequest(BaseModel):
    name: str = Field(min_length=1)
    address: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None


class Gym(_Record):
    id: str
    name: str
    owner_id: str
    address: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    created_at: Optional[datetime] = None


class CreateBranchRequest(BaseModel):
    name: str = Field(min_length=1)
    gym_id: str
    address: Optional[str] = None
    phone: Optional[str] = None


class Branch(_Record):
    id: str
    name: str
    gym_id: str
    address: Optional[str] = None
    phone: Optional[str] = None
    is_active: bool = True
    qr_code_url: Optional[str] = None
    registration_url: Optional[str] = None
    created_at: Optional[datetime] = None


class BranchQr(BaseModel):
    qr_image: str
    registration_url: str


# --- MEMBERS ---
class CreateMemberRequest(BaseModel):
    """Self-registration payload. membership_end is always derived server-side."""
    model_config = ConfigDict(extra="forbid")

    name: str = Field(min_length=1)
    phone: str = Field(min_length=3)
    email: Optional[str] = None
    age: Optional[int] = Field(default=None, gt=0, lt=130)
    branch_id: str
    membership_plan: MembershipPlan
    membership_start: Optional[datetime] = None

    @field_validator("email")
    @classmethod
    def email_has_at(cls, v: Optional[str]) -> Optional[str]:
        if v is None or not v.strip():
            return None
        return _normalize_email(v)


class UpdateMemberStatusRequest(BaseModel):
    status: MemberStatus


class Member(_Record):
    id: str
    name: str
    email: Optional[str] = None
    phone: str
    age: Optional[int] = None
    branch_id: str
    membership_plan: MembershipPlan
    membership_start: datetime
    membership_end: datetime
    status: MemberStatus
    qr_code_id: str
    expiring_soon: bool = False
    created_at: Optional[datetime] = None


# --- PAYMENTS ---
class CreatePaymentRequest(BaseModel):
    member_id: str
    amount: Decimal = Field(max_digits=10, decimal_places=2)
    status: PaymentStatus = "pending"
    payment_method: Optional[str] = None
    due_date: Optional[datetime] = None
    receipt_url: Optional[str] = None


class UpdatePaymentStatusRequest(BaseModel):
    status: PaymentStatus


class CreatePaymentIntentRequest(BaseModel):
    member_id: str
    amount: Decimal = Field(max_digits=10, decimal_places=2)


class Payment(_Record):
    id: str
    member_id: str
    amount: Decimal
    status: PaymentStatus
    payment_method: Optional[str] = None
    stripe_payment_intent_id: Optional[str] = None
    receipt_url: Optional[str] = None
    due_date: Optional[datetime] = None
    paid_at: Optional[datetime] = None
    created_at: Optional[datetime] = None


class PaymentIntent(BaseModel):
    payment: Payment
    client_secret: str


# --- ATTENDANCE ---
class CheckInRequest(BaseModel):
    qr_code_id: str = Field(min_length=1)


class RecordAttendanceRequest(BaseModel):
    member_id: str


class Attendance(_Record):
    id: str
    member_id: str
    branch_id: str
    check_in_time: datetime
    check_out_time: Optional[datetime] = None


class CheckInResult(BaseModel):
    message: str = "Check-in successful"
    attendance: Attendance
    member: Member


# --- COMMUNICATIONS ---
class CreateCommunicationRequest(BaseModel):
    branch_id: str
    member_id: Optional[str] = None
    type: CommunicationType
    subject: Optional[str] = None
    message: str = Field(min_length=1)
    status: CommunicationStatus = "sent"


class Communication(_Record):
    id: str
    branch_id: str
    member_id: Optional[str] = None
    type: CommunicationType
    subject: Optional[str] = None
    message: str
    status: CommunicationStatus
    sent_at: Optional[datetime] = None


# --- ANALYTICS ---
class Metrics(BaseModel):
    total_members: int
    active_members: int
    monthly_revenue: Decimal
    pending_fees: Decimal

from sqlalchemy import Column, String, Boolean, Integer, Numeric, DateTime, ForeignKey, Text
from sqlalchemy.orm import relationship
from database import Base
from datetime import datetime
import uuid


def _uuid() -> str:
    return str(uuid.uuid4())


# --- TENANCY CHAIN: owner -> gym -> branch ---

class UserORM(Base):
    """Gym owner account."""
    __tablename__ = "users"

    id = Column(String, primary_key=True, index=True, default=_uuid)
    username = Column(String, unique=True, index=True, nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    hashed_password = Column(String, nullable=False)
    name = Column(String, nullable=False)
    phone = Column(String, nullable=True)
    created_at = Column(DateTime, default=datetime.now)

    gyms = relationship("GymORM", back_populates="owner")


class GymORM(Base):
    __tablename__ = "gyms"

    id = Column(String, primary_key=True, index=True, default=_uuid)
    name = Column(String, nullable=False)
    owner_id = Column(String, ForeignKey("users.id"), index=True, nullable=False)
    address = Column(String, nullable=True)
    phone = Column(String, nullable=True)
    email = Column(String, nullable=True)
    created_at = Column(DateTime, default=datetime.now)

    owner = relationship("UserORM", back_populates="gyms")
    branches = relationship("BranchORM", back_populates="gym")


class BranchORM(Base):
    __tablename__ = "branches"

    id = Column(String, primary_key=True, index=True, default=_uuid)
    name = Column(String, nullable=False)
    gym_id = Column(String, ForeignKey("gyms.id"), index=True, nullable=False)
    address = Column(String, nullable=True)
    phone = Column(String, nullable=True)
    is_active = Column(Boolean, default=True)

    # Current registration QR only; regenerating overwrites both columns
    qr_code_url = Column(Text, nullable=True)  # PNG data URL
    registration_url = Column(String, nullable=True)

    created_at = Column(DateTime, default=datetime.now)

    gym = relationship("GymORM", back_populates="branches")


# --- MEMBERS & ACTIVITY ---

class MemberORM(Base):
    __tablename__ = "members"

    id = Column(String, primary_key=True, index=True, default=_uuid)
    name = Column(String, nullable=False)
    email = Column(String, nullable=True)
    phone = Column(String, nullable=False)
    age = Column(Integer, nullable=True)
    branch_id = Column(String, ForeignKey("branches.id"), index=True, nullable=False)

    membership_plan = Column(String, nullable=False)  # monthly, quarterly, yearly
    membership_start = Column(DateTime, nullable=False)
    membership_end = Column(DateTime, nullable=False, index=True)
    status = Column(String, default="active", index=True)  # active, inactive, expired (cache, see membership.py)

    qr_code_id = Column(String, unique=True, index=True, nullable=False)
    stripe_customer_id = Column(String, nullable=True)
    created_at = Column(DateTime, default=datetime.now, index=True)

    branch = relationship("BranchORM")


class PaymentORM(Base):
    __tablename__ = "payments"

    id = Column(String, primary_key=True, index=True, default=_uuid)
    member_id = Column(String, ForeignKey("members.id"), index=True, nullable=False)
    amount = Column(Numeric(10, 2), nullable=False)
    status = Column(String, default="pending", index=True)  # pending, paid, failed, overdue
    payment_method = Column(String, nullable=True)  # cash, card, upi, stripe ...

    # Stripe integration
    stripe_payment_intent_id = Column(String, nullable=True, unique=True)
    receipt_url = Column(String, nullable=True)

    due_date = Column(DateTime, nullable=True)
    paid_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=datetime.now)


class AttendanceORM(Base):
    __tablename__ = "attendance"

    id = Column(String, primary_key=True, index=True, default=_uuid)
    member_id = Column(String, ForeignKey("members.id"), index=True, nullable=False)
    branch_id = Column(String, ForeignKey("branches.id"), index=True, nullable=False)
    check_in_time = Column(DateTime, default=datetime.now, index=True)
    check_out_time = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=datetime.now)


class CommunicationORM(Base):
    __tablename__ = "communications"

    id = Column(String, primary_key=True, index=True, default=_uuid)
    branch_id = Column(String, ForeignKey("branches.id"), index=True, nullable=False)
    member_id = Column(String, ForeignKey("members.id"), index=True, nullable=True)
    type = Column(String, nullable=False)  # whatsapp, email, announcement
    subject = Column(String, nullable=True)
    message = Column(Text, nullable=False)
    status = Column(String, default="sent")  # sent, failed, pending
    sent_at = Column(DateTime, default=datetime.now, index=True)

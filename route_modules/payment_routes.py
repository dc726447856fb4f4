"""
Payment Routes - member fees and the Stripe payment flow.
"""
from fastapi import APIRouter, Depends, Header, Request
from fastapi.concurrency import run_in_threadpool
from typing import List, Optional

from auth import get_current_owner, OwnerContext
from models import (
    CreatePaymentRequest, UpdatePaymentStatusRequest, CreatePaymentIntentRequest,
    Payment, PaymentIntent
)
from service_modules.payment_service import get_payment_service, PaymentService

router = APIRouter()


@router.post("/api/payments", response_model=Payment)
def create_payment(
    data: CreatePaymentRequest,
    owner: OwnerContext = Depends(get_current_owner),
    service: PaymentService = Depends(get_payment_service)
):
    return service.create_payment(owner, data)


@router.get("/api/payments/pending", response_model=List[Payment])
def list_pending_payments(
    branch_id: Optional[str] = None,
    owner: OwnerContext = Depends(get_current_owner),
    service: PaymentService = Depends(get_payment_service)
):
    return service.pending_payments(owner, branch_id)


@router.patch("/api/payments/{payment_id}/status", response_model=Payment)
def update_payment_status(
    payment_id: str,
    data: UpdatePaymentStatusRequest,
    owner: OwnerContext = Depends(get_current_owner),
    service: PaymentService = Depends(get_payment_service)
):
    return service.update_payment_status(owner, payment_id, data.status)


@router.post("/api/payments/intent", response_model=PaymentIntent)
def create_payment_intent(
    data: CreatePaymentIntentRequest,
    owner: OwnerContext = Depends(get_current_owner),
    service: PaymentService = Depends(get_payment_service)
):
    """Start a card payment; the client secret goes to Stripe.js on the dashboard."""
    return service.create_payment_intent(owner, data.member_id, data.amount)


@router.post("/api/payments/webhook")
async def stripe_webhook(
    request: Request,
    stripe_signature: Optional[str] = Header(None, alias="stripe-signature"),
    service: PaymentService = Depends(get_payment_service)
):
    """Stripe calls this with payment_intent.* events."""
    payload = await request.body()
    return await run_in_threadpool(service.handle_webhook, payload, stripe_signature)

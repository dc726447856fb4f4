"""
Payment Service - member fees, status transitions and Stripe payment intents.
"""
from typing import List, Optional

from models import CreatePaymentRequest, Payment, PaymentIntent
from .base import (
    Decimal, datetime, get_db_session, MemberORM, PaymentORM,
    ValidationError, logger, money, to_local_naive
)
from .payment_gateway import payment_gateway
from .scoping import OwnerScope

PAYMENT_STATUSES = ("pending", "paid", "failed", "overdue")

# Stripe event type -> payment status
WEBHOOK_STATUSES = {
    "payment_intent.succeeded": "paid",
    "payment_intent.payment_failed": "failed",
}


def _validate_amount(amount) -> Decimal:
    if amount is None:
        raise ValidationError("amount is required")
    amount = Decimal(str(amount))
    if amount <= 0:
        raise ValidationError("amount must be greater than zero")
    return money(amount)


def apply_status(payment: PaymentORM, status: str, now: Optional[datetime] = None) -> None:
    """Set the status; paid_at is stamped only on the first move to paid."""
    if status not in PAYMENT_STATUSES:
        raise ValidationError(f"Invalid payment status '{status}'")
    payment.status = status
    if status == "paid" and payment.paid_at is None:
        payment.paid_at = now or datetime.now()


class PaymentService:
    """Service for member payments."""

    def __init__(self, gateway=payment_gateway):
        self.gateway = gateway

    def create_payment(self, ctx, data: CreatePaymentRequest) -> Payment:
        amount = _validate_amount(data.amount)
        if data.status not in PAYMENT_STATUSES:
            raise ValidationError(f"Invalid payment status '{data.status}'")

        db = get_db_session()
        try:
            scope = OwnerScope(db, ctx)
            member = scope.get(MemberORM, data.member_id)

            payment = PaymentORM(
                member_id=member.id,
                amount=amount,
                payment_method=data.payment_method,
                receipt_url=data.receipt_url,
                due_date=to_local_naive(data.due_date),
            )
            apply_status(payment, data.status)
            db.add(payment)
            db.commit()

            logger.info(f"Recorded {payment.status} payment {payment.id} of {amount} for member {member.id}")
            return Payment.model_validate(payment)
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    def update_payment_status(self, ctx, payment_id: str, status: str) -> Payment:
        if status not in PAYMENT_STATUSES:
            raise ValidationError(f"Invalid payment status '{status}'")

        db = get_db_session()
        try:
            scope = OwnerScope(db, ctx)
            payment = scope.get(PaymentORM, payment_id)
            previous = payment.status
            apply_status(payment, status)
            db.commit()

            logger.info(f"Payment {payment_id}: {previous} -> {status}")
            return Payment.model_validate(payment)
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    def pending_payments(self, ctx, branch_id: Optional[str] = None) -> List[Payment]:
        db = get_db_session()
        try:
            scope = OwnerScope(db, ctx)
            q = scope.payments(status="pending")
            if branch_id:
                q = q.filter(MemberORM.branch_id == branch_id)
            return [Payment.model_validate(p) for p in q.all()]
        finally:
            db.close()

    def payments_for_member(self, ctx, member_id: str) -> List[Payment]:
        db = get_db_session()
        try:
            scope = OwnerScope(db, ctx)
            scope.get(MemberORM, member_id)
            return [Payment.model_validate(p) for p in scope.payments(member_id=member_id).all()]
        finally:
            db.close()

    # --- STRIPE ---

    def create_payment_intent(self, ctx, member_id: str, amount) -> PaymentIntent:
        """
        Create a Stripe PaymentIntent for a member and record it as a pending
        payment. The final status arrives later through the webhook.
        """
        amount = _validate_amount(amount)

        db = get_db_session()
        try:
            scope = OwnerScope(db, ctx)
            member = scope.get(MemberORM, member_id)

            intent = self.gateway.create_intent(amount, member.id)

            payment = PaymentORM(
                member_id=member.id,
                amount=amount,
                status="pending",
                payment_method="stripe",
                stripe_payment_intent_id=intent["intent_id"],
            )
            db.add(payment)
            db.commit()

            logger.info(f"Created payment intent {intent['intent_id']} for member {member.id}")
            return PaymentIntent(payment=Payment.model_validate(payment), client_secret=intent["client_secret"])
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    def handle_webhook(self, payload: bytes, signature: str) -> dict:
        """Handle Stripe webhook events."""
        event = self.gateway.parse_webhook(payload, signature)

        status = WEBHOOK_STATUSES.get(event["type"])
        if status is None:
            return {"status": "ignored"}

        intent_id = event["data"]["object"]["id"]
        db = get_db_session()
        try:
            payment = db.query(PaymentORM).filter(
                PaymentORM.stripe_payment_intent_id == intent_id
            ).first()
            if not payment:
                logger.warning(f"Webhook {event['type']} for unknown payment intent {intent_id}")
                return {"status": "ignored"}

            apply_status(payment, status)
            db.commit()
            logger.info(f"Payment {payment.id} marked {status} from webhook")
            return {"status": "success"}
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()


# Singleton instance
payment_service = PaymentService()


def get_payment_service() -> PaymentService:
    """Dependency injection helper."""
    return payment_service

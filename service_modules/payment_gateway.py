"""
Payment gateway bridge (Stripe).

Only two things cross this boundary: creating a PaymentIntent for the
dashboard's card form, and verifying webhook events that report its outcome.
"""
from decimal import Decimal

import stripe

from config import STRIPE_SECRET_KEY, STRIPE_WEBHOOK_SECRET, PAYMENT_CURRENCY
from .base import logger
from .errors import GymDeskError, UpstreamError, ValidationError

# Configure Stripe
stripe.api_key = STRIPE_SECRET_KEY


def is_stripe_configured():
    """Check if Stripe API key is configured (not a placeholder)."""
    api_key = stripe.api_key
    return bool(api_key) and not api_key.startswith("your_") and len(api_key) > 20


def to_minor_units(amount: Decimal) -> int:
    return int((amount * 100).to_integral_value())


class PaymentGateway:

    def __init__(self, currency: str = PAYMENT_CURRENCY, webhook_secret: str = STRIPE_WEBHOOK_SECRET):
        self.currency = currency
        self.webhook_secret = webhook_secret

    def create_intent(self, amount: Decimal, member_id: str) -> dict:
        """Returns ``{"intent_id", "client_secret"}``; raises UpstreamError on any gateway failure."""
        if not is_stripe_configured():
            logger.error("Payment intent requested but Stripe is not configured")
            raise UpstreamError("Payment gateway not configured")

        try:
            intent = stripe.PaymentIntent.create(
                amount=to_minor_units(amount),
                currency=self.currency,
                metadata={"member_id": member_id},
            )
        except stripe.StripeError as e:
            logger.error(f"Stripe error creating payment intent for member {member_id}: {e}")
            raise UpstreamError(f"Payment gateway error: {getattr(e, 'user_message', None) or str(e)}")

        return {"intent_id": intent.id, "client_secret": intent.client_secret}

    def parse_webhook(self, payload: bytes, signature: str):
        if not self.webhook_secret:
            raise GymDeskError("Stripe webhook secret not configured")

        try:
            return stripe.Webhook.construct_event(payload, signature, self.webhook_secret)
        except ValueError:
            raise ValidationError("Invalid payload")
        except stripe.SignatureVerificationError:
            raise ValidationError("Invalid signature")


# Singleton instance
payment_gateway = PaymentGateway()

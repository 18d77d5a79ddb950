"""
Stripe Checkout gateway.

Only the parts of the checkout flow the server needs: opening a hosted
checkout session, reading it back, and verifying webhook events.
"""
import logging
from dataclasses import dataclass
from typing import Optional

import stripe

from utils.exceptions import UpstreamError, ValidationError

logger = logging.getLogger(__name__)


@dataclass
class CheckoutSession:
    session_id: str
    url: Optional[str]
    amount: float
    currency: str


@dataclass
class SessionState:
    session_id: str
    paid: bool
    payment_intent_id: Optional[str] = None


def to_minor_units(amount):
    return int(round(float(amount) * 100))


class StripeGateway:

    def __init__(self, secret_key, client_url, currency="usd", webhook_secret=None):
        self.secret_key = secret_key
        self.client_url = client_url.rstrip('/')
        self.currency = currency
        self.webhook_secret = webhook_secret

    @classmethod
    def from_config(cls, config):
        return cls(
            secret_key=config.get("STRIPE_SECRET_KEY"),
            client_url=config.get("CLIENT_URL", ""),
            currency=config.get("PAYMENT_CURRENCY", "usd"),
            webhook_secret=config.get("STRIPE_WEBHOOK_SECRET"),
        )

    def create_checkout_session(self, contest, user_email) -> CheckoutSession:
        try:
            session = stripe.checkout.Session.create(
                api_key=self.secret_key,
                mode="payment",
                customer_email=user_email,
                line_items=[{
                    "quantity": 1,
                    "price_data": {
                        "currency": self.currency,
                        "unit_amount": to_minor_units(contest["price"]),
                        "product_data": {"name": contest.get("title") or "Contest entry"},
                    },
                }],
                metadata={"contestId": contest["id"], "userEmail": user_email},
                success_url=f"{self.client_url}/payment-success?session_id={{CHECKOUT_SESSION_ID}}",
                cancel_url=f"{self.client_url}/contests/{contest['id']}",
            )
        except stripe.StripeError as e:
            logger.error("Stripe checkout creation failed: %s", e)
            raise UpstreamError("Payment provider error")
        return CheckoutSession(
            session_id=session.id,
            url=session.url,
            amount=float(contest["price"]),
            currency=self.currency,
        )

    def retrieve_session(self, session_id) -> SessionState:
        try:
            session = stripe.checkout.Session.retrieve(session_id, api_key=self.secret_key)
        except stripe.InvalidRequestError:
            raise ValidationError("Unknown checkout session")
        except stripe.StripeError as e:
            logger.error("Stripe session lookup failed: %s", e)
            raise UpstreamError("Payment provider error")
        return SessionState(
            session_id=session.id,
            paid=session.payment_status == "paid",
            payment_intent_id=session.payment_intent,
        )

    def parse_webhook(self, payload, signature):
        """Return ``(event_type, session_id)`` for a verified webhook payload."""
        if not self.webhook_secret:
            raise ValidationError("Webhook secret not configured")
        try:
            event = stripe.Webhook.construct_event(payload, signature, self.webhook_secret)
        except (ValueError, stripe.SignatureVerificationError):
            raise ValidationError("Invalid webhook payload")
        return event.type, event.data.object.id

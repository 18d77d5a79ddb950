"""
Checkout creation and payment reconciliation.

Confirmation is two guarded steps keyed by the checkout session id:
admit the user to the contest if absent, then mark the session paid if
still pending. Each step is atomic and a no-op once applied, so callers
(the success page, the webhook, a retry) may confirm the same session
any number of times.
"""
import logging
from datetime import datetime, timezone

from functions.participation_functions import participant_updates
from models.Contest import participant_emails
from models.PaymentSession import PaymentSession, PAYMENT_PAID
from utils.exceptions import ValidationError, NotFoundError, ConflictError

logger = logging.getLogger(__name__)


def create_checkout(store, gateway, user_email, contest_id):
    contest = store.get_contest(contest_id)
    if contest is None:
        raise NotFoundError("Contest not found")
    if user_email in participant_emails(contest):
        raise ConflictError("Already registered for this contest")
    if not contest.get('price') or float(contest['price']) <= 0:
        raise ValidationError("This contest is free; register directly")

    checkout = gateway.create_checkout_session(contest, user_email)
    payment = PaymentSession(
        session_id=checkout.session_id,
        user_email=user_email,
        contest_id=contest_id,
        amount=checkout.amount,
        currency=checkout.currency,
        created_at=datetime.now(timezone.utc)
    )
    store.create_payment(payment.to_dict())

    logger.info("Checkout session %s opened for %s on contest %s",
                checkout.session_id, user_email, contest_id)
    return {"checkoutUrl": checkout.url, "sessionId": checkout.session_id}

def confirm_payment(store, gateway, session_id):
    if not session_id:
        raise ValidationError("Session id is required")

    payment = store.get_payment(session_id)
    if payment is None:
        raise NotFoundError("Payment session not found")

    state = gateway.retrieve_session(session_id)
    if not state.paid:
        raise ValidationError("Payment not completed")

    paid_at = datetime.now(timezone.utc)
    entry = {
        'email': payment['userEmail'],
        'paymentStatus': PAYMENT_PAID,
        'paymentIntentId': state.payment_intent_id,
        'paidAt': paid_at
    }
    store.mutate_contest(payment['contestId'], lambda contest: participant_updates(contest, entry))

    def mark_paid(current):
        if current.get('status') == PAYMENT_PAID:
            return None
        return {'status': PAYMENT_PAID, 'paidAt': paid_at, 'paymentIntentId': state.payment_intent_id}

    payment = store.mutate_payment(session_id, mark_paid)
    logger.info("Payment session %s confirmed for %s", session_id, payment['userEmail'])
    return payment

def handle_webhook(store, gateway, payload, signature):
    event_type, session_id = gateway.parse_webhook(payload, signature)
    if event_type != 'checkout.session.completed':
        logger.debug("Ignoring webhook event %s", event_type)
        return None
    return confirm_payment(store, gateway, session_id)

def payment_history(store, user_email):
    return store.list_payments(user_email)

PAYMENT_PENDING = "pending"
PAYMENT_PAID = "paid"


class PaymentSession:
    def __init__(self, session_id, user_email, contest_id, amount, currency, created_at=None):
        self.session_id = session_id
        self.user_email = user_email
        self.contest_id = contest_id
        self.amount = amount
        self.currency = currency
        self.status = PAYMENT_PENDING
        self.payment_intent_id = None
        self.created_at = created_at
        self.paid_at = None

    def to_dict(self):
        return {
            "sessionId": self.session_id,
            "userEmail": self.user_email,
            "contestId": self.contest_id,
            "amount": self.amount,
            "currency": self.currency,
            "status": self.status,
            "paymentIntentId": self.payment_intent_id,
            "createdAt": self.created_at,
            "paidAt": self.paid_at
        }

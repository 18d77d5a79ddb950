import json
import unittest
from datetime import datetime, timezone

from main import create_app
from services.identity_service import Principal
from services.memory_store import InMemoryContestStore
from services.payment_gateway import CheckoutSession, SessionState
from utils.exceptions import ForbiddenError, ValidationError

FUTURE_DEADLINE = "2030-01-01T00:00:00Z"


class FakeIdentity:
    """Maps opaque tokens to principals."""

    def __init__(self):
        self.tokens = {}

    def add(self, token, email, name=None, photo_url=None):
        self.tokens[token] = Principal(email=email, name=name, photo_url=photo_url)

    def verify(self, token):
        if token not in self.tokens:
            raise ForbiddenError("Invalid token")
        return self.tokens[token]


class FakeGateway:
    """Records checkout sessions; tests flip them to paid."""

    def __init__(self):
        self.sessions = {}
        self.created = 0

    def create_checkout_session(self, contest, user_email):
        self.created += 1
        session_id = f"cs_test_{self.created}"
        self.sessions[session_id] = SessionState(
            session_id=session_id,
            paid=False,
        )
        return CheckoutSession(
            session_id=session_id,
            url=f"https://checkout.example/{session_id}",
            amount=float(contest["price"]),
            currency="usd",
        )

    def mark_paid(self, session_id, payment_intent_id="pi_test"):
        state = self.sessions[session_id]
        state.paid = True
        state.payment_intent_id = payment_intent_id

    def retrieve_session(self, session_id):
        if session_id not in self.sessions:
            raise ValidationError("Unknown checkout session")
        return self.sessions[session_id]

    def parse_webhook(self, payload, signature):
        if signature != "valid":
            raise ValidationError("Invalid webhook payload")
        event = json.loads(payload)
        return event["type"], event["data"]["object"]["id"]


class ContestHubTestCase(unittest.TestCase):

    def setUp(self):
        self.store = InMemoryContestStore()
        self.identity = FakeIdentity()
        self.gateway = FakeGateway()
        self.app = create_app(
            {"TESTING": True, "LOG_LEVEL": "WARNING"},
            store=self.store,
            identity=self.identity,
            payments=self.gateway,
        )
        self.client = self.app.test_client()

    def add_user(self, email, role="user", name=None, photo_url=None):
        """Store a user with ``role`` and return a bearer token for it."""
        name = name or email.split("@")[0]
        self.store.create_user({
            "email": email,
            "name": name,
            "photoURL": photo_url,
            "role": role,
            "bio": "",
            "createdAt": datetime.now(timezone.utc),
        })
        token = f"token-{email}"
        self.identity.add(token, email, name=name, photo_url=photo_url)
        return token

    def headers(self, token):
        return {"Authorization": f"Bearer {token}"}

    def create_contest(self, token, **fields):
        body = {
            "title": "Logo Design",
            "deadline": FUTURE_DEADLINE,
            "contestType": "Logo Design",
            "price": 10,
            "prizeMoney": 100,
        }
        body.update(fields)
        response = self.client.post("/contests", json=body, headers=self.headers(token))
        self.assertEqual(response.status_code, 201, response.get_json())
        return response.get_json()["contestId"]

    def approve(self, admin_token, contest_id, status="approved"):
        response = self.client.patch(
            f"/admin/contests/{contest_id}", json={"status": status}, headers=self.headers(admin_token)
        )
        self.assertEqual(response.status_code, 200, response.get_json())

    def register(self, token, contest_id):
        return self.client.patch(f"/contests/register/{contest_id}", headers=self.headers(token))

    def submit(self, token, contest_id, link="http://img/1"):
        return self.client.post(
            f"/contests/{contest_id}/submit-task", json={"taskLink": link}, headers=self.headers(token)
        )

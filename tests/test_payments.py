import json
import unittest

from tests.support import ContestHubTestCase


class PaymentReconciliationTests(ContestHubTestCase):

    def setUp(self):
        super().setUp()
        self.creator = self.add_user("c@x.com", role="creator")
        self.user = self.add_user("a@x.com")
        self.contest_id = self.create_contest(self.creator, price=12.5)

    def checkout(self, token=None, contest_id=None):
        return self.client.post(
            "/create-checkout-session",
            json={"contestId": contest_id or self.contest_id},
            headers=self.headers(token or self.user),
        )

    def confirm(self, session_id):
        return self.client.post("/payments/confirm", json={"sessionId": session_id})

    def test_checkout_records_pending_session(self):
        response = self.checkout()
        self.assertEqual(response.status_code, 200)
        body = response.get_json()
        self.assertTrue(body["checkoutUrl"].startswith("https://checkout.example/"))

        payment = self.store.payments[body["sessionId"]]
        self.assertEqual(payment["status"], "pending")
        self.assertEqual(payment["userEmail"], "a@x.com")
        self.assertEqual(payment["contestId"], self.contest_id)
        self.assertEqual(payment["amount"], 12.5)

    def test_checkout_requires_token(self):
        response = self.client.post("/create-checkout-session", json={"contestId": self.contest_id})
        self.assertEqual(response.status_code, 401)

    def test_checkout_when_registered_conflicts(self):
        self.register(self.user, self.contest_id)
        self.assertEqual(self.checkout().status_code, 409)
        self.assertEqual(self.store.payments, {})

    def test_checkout_unknown_contest(self):
        self.assertEqual(self.checkout(contest_id="nope").status_code, 404)

    def test_checkout_free_contest_is_rejected(self):
        free = self.create_contest(self.creator, price=0)
        self.assertEqual(self.checkout(contest_id=free).status_code, 400)

    def test_confirm_unpaid_session_is_rejected(self):
        session_id = self.checkout().get_json()["sessionId"]
        self.assertEqual(self.confirm(session_id).status_code, 400)
        self.assertEqual(self.store.contests[self.contest_id]["participants"], [])

    def test_confirm_unknown_session(self):
        self.assertEqual(self.confirm("cs_missing").status_code, 404)
        self.assertEqual(self.client.post("/payments/confirm", json={}).status_code, 400)

    def test_confirm_twice_admits_once(self):
        session_id = self.checkout().get_json()["sessionId"]
        self.gateway.mark_paid(session_id, "pi_123")

        first = self.confirm(session_id)
        self.assertEqual(first.status_code, 200)
        self.assertEqual(first.get_json()["status"], "paid")
        paid_at = self.store.payments[session_id]["paidAt"]

        second = self.confirm(session_id)
        self.assertEqual(second.status_code, 200)

        contest = self.store.contests[self.contest_id]
        self.assertEqual(len(contest["participants"]), 1)
        participant = contest["participants"][0]
        self.assertEqual(participant["email"], "a@x.com")
        self.assertEqual(participant["paymentStatus"], "paid")
        self.assertEqual(participant["paymentIntentId"], "pi_123")

        payment = self.store.payments[session_id]
        self.assertEqual(payment["status"], "paid")
        self.assertEqual(payment["paymentIntentId"], "pi_123")
        self.assertEqual(payment["paidAt"], paid_at)

    def test_paid_participant_can_submit(self):
        session_id = self.checkout().get_json()["sessionId"]
        self.gateway.mark_paid(session_id)
        self.confirm(session_id)
        self.assertEqual(self.submit(self.user, self.contest_id).status_code, 201)

    def test_webhook_confirms_completed_session(self):
        session_id = self.checkout().get_json()["sessionId"]
        self.gateway.mark_paid(session_id)
        payload = json.dumps({"type": "checkout.session.completed", "data": {"object": {"id": session_id}}})

        response = self.client.post(
            "/payments/webhook", data=payload, headers={"Stripe-Signature": "valid"},
            content_type="application/json",
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(self.store.payments[session_id]["status"], "paid")

    def test_webhook_rejects_bad_signature(self):
        response = self.client.post(
            "/payments/webhook", data="{}", headers={"Stripe-Signature": "forged"},
            content_type="application/json",
        )
        self.assertEqual(response.status_code, 400)

    def test_webhook_ignores_other_events(self):
        payload = json.dumps({"type": "payment_intent.created", "data": {"object": {"id": "pi_1"}}})
        response = self.client.post(
            "/payments/webhook", data=payload, headers={"Stripe-Signature": "valid"},
            content_type="application/json",
        )
        self.assertEqual(response.status_code, 200)

    def test_history_lists_own_sessions(self):
        session_id = self.checkout().get_json()["sessionId"]
        other = self.add_user("b@x.com")
        self.checkout(token=other)

        response = self.client.get("/payments/history", headers=self.headers(self.user))
        self.assertEqual([p["sessionId"] for p in response.get_json()], [session_id])


if __name__ == "__main__":
    unittest.main()

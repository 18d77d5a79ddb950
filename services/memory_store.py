"""
In-process store used by the test-suite and by ``STORE_BACKEND=memory``.
"""
import copy
import threading
import uuid

from services.contest_store import ContestStore, CREATED_AT
from utils.exceptions import NotFoundError


def _sort_key(order_by):
    # None sorts below any value
    return lambda doc: tuple((doc.get(f) is not None, doc.get(f)) for f in order_by)


class InMemoryContestStore(ContestStore):

    def __init__(self):
        self._lock = threading.RLock()
        self.reset()

    def reset(self):
        with self._lock:
            self.users = {}
            self.contests = {}
            self.payments = {}

    def create_user(self, user_data):
        email = user_data['email']
        with self._lock:
            if email in self.users:
                return False, copy.deepcopy(self.users[email])
            self.users[email] = dict(copy.deepcopy(user_data), id=email)
            return True, copy.deepcopy(self.users[email])

    def get_user(self, email):
        with self._lock:
            return copy.deepcopy(self.users.get(email))

    def update_user(self, email, fields):
        with self._lock:
            user = self.users.get(email)
            if user is None:
                return None
            user.update(copy.deepcopy(fields))
            return copy.deepcopy(user)

    def list_users(self):
        with self._lock:
            users = copy.deepcopy(list(self.users.values()))
        return sorted(users, key=_sort_key((CREATED_AT,)), reverse=True)

    def add_contest(self, contest_data):
        contest_id = uuid.uuid4().hex
        with self._lock:
            self.contests[contest_id] = dict(copy.deepcopy(contest_data), id=contest_id)
            return copy.deepcopy(self.contests[contest_id])

    def get_contest(self, contest_id):
        with self._lock:
            return copy.deepcopy(self.contests.get(contest_id))

    def list_contests(self, status=None, creator_email=None, participant_email=None,
                      winner_email=None, order_by=(CREATED_AT,), limit=None):
        with self._lock:
            contests = copy.deepcopy(list(self.contests.values()))
        if status:
            contests = [c for c in contests if c.get('status') == status]
        if creator_email:
            contests = [c for c in contests if c.get('creatorEmail') == creator_email]
        if participant_email:
            contests = [c for c in contests if participant_email in (c.get('participantEmails') or [])]
        if winner_email:
            contests = [c for c in contests if c.get('winnerEmail') == winner_email]
        contests.sort(key=_sort_key(order_by), reverse=True)
        return contests[:limit] if limit else contests

    def _mutate(self, collection, key, mutation, missing_message):
        with self._lock:
            current = collection.get(key)
            if current is None:
                raise NotFoundError(missing_message)
            updates = mutation(copy.deepcopy(current))
            if updates:
                current.update(copy.deepcopy(updates))
            return copy.deepcopy(current)

    def mutate_contest(self, contest_id, mutation):
        return self._mutate(self.contests, contest_id, mutation, "Contest not found")

    def delete_contest(self, contest_id, guard=None):
        with self._lock:
            current = self.contests.get(contest_id)
            if current is None:
                raise NotFoundError("Contest not found")
            if guard is not None:
                guard(copy.deepcopy(current))
            del self.contests[contest_id]

    def create_payment(self, payment_data):
        session_id = payment_data['sessionId']
        with self._lock:
            if session_id in self.payments:
                return False
            self.payments[session_id] = dict(copy.deepcopy(payment_data), id=session_id)
            return True

    def get_payment(self, session_id):
        with self._lock:
            return copy.deepcopy(self.payments.get(session_id))

    def mutate_payment(self, session_id, mutation):
        return self._mutate(self.payments, session_id, mutation, "Payment session not found")

    def list_payments(self, user_email):
        with self._lock:
            payments = [copy.deepcopy(p) for p in self.payments.values() if p.get('userEmail') == user_email]
        return sorted(payments, key=_sort_key((CREATED_AT,)), reverse=True)

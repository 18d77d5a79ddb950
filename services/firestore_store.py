import logging

from firebase_admin import firestore
from google.api_core.exceptions import AlreadyExists

from services.contest_store import ContestStore, CREATED_AT
from utils.exceptions import NotFoundError

logger = logging.getLogger(__name__)

USERS = 'users'
CONTESTS = 'contests'
PAYMENTS = 'payments'


def _to_dict(snapshot):
    data = snapshot.to_dict()
    data['id'] = snapshot.id
    return data


class FirestoreContestStore(ContestStore):
    """Cloud Firestore backend.

    Users are keyed by email and payment sessions by the gateway session
    id, so create-if-absent is a single ``DocumentReference.create``.
    Contest queries that combine a filter with an ordering need the
    matching composite indexes in the Firebase project.
    """

    def __init__(self, db):
        self.db = db
        self.users = db.collection(USERS)
        self.contests = db.collection(CONTESTS)
        self.payments = db.collection(PAYMENTS)

    @classmethod
    def from_app(cls, firebase_app):
        return cls(firestore.client(firebase_app))

    def create_user(self, user_data):
        ref = self.users.document(user_data['email'])
        try:
            ref.create(user_data)
        except AlreadyExists:
            return False, _to_dict(ref.get())
        return True, _to_dict(ref.get())

    def get_user(self, email):
        doc = self.users.document(email).get()
        return _to_dict(doc) if doc.exists else None

    def update_user(self, email, fields):
        ref = self.users.document(email)
        if not ref.get().exists:
            return None
        ref.update(fields)
        return _to_dict(ref.get())

    def list_users(self):
        query = self.users.order_by(CREATED_AT, direction=firestore.Query.DESCENDING)
        return [_to_dict(doc) for doc in query.stream()]

    def add_contest(self, contest_data):
        _, doc_ref = self.contests.add(contest_data)
        return _to_dict(doc_ref.get())

    def get_contest(self, contest_id):
        doc = self.contests.document(contest_id).get()
        return _to_dict(doc) if doc.exists else None

    def list_contests(self, status=None, creator_email=None, participant_email=None,
                      winner_email=None, order_by=(CREATED_AT,), limit=None):
        query = self.contests
        if status:
            query = query.where('status', '==', status)
        if creator_email:
            query = query.where('creatorEmail', '==', creator_email)
        if participant_email:
            query = query.where('participantEmails', 'array_contains', participant_email)
        if winner_email:
            query = query.where('winnerEmail', '==', winner_email)
        for field in order_by:
            query = query.order_by(field, direction=firestore.Query.DESCENDING)
        if limit:
            query = query.limit(limit)
        return [_to_dict(doc) for doc in query.stream()]

    def _mutate(self, ref, mutation, missing_message):
        transaction = self.db.transaction()

        @firestore.transactional
        def apply(transaction):
            snapshot = ref.get(transaction=transaction)
            if not snapshot.exists:
                raise NotFoundError(missing_message)
            current = _to_dict(snapshot)
            updates = mutation(dict(current))
            if updates:
                transaction.update(ref, updates)
                current.update(updates)
            return current

        return apply(transaction)

    def mutate_contest(self, contest_id, mutation):
        return self._mutate(self.contests.document(contest_id), mutation, "Contest not found")

    def delete_contest(self, contest_id, guard=None):
        ref = self.contests.document(contest_id)
        transaction = self.db.transaction()

        @firestore.transactional
        def apply(transaction):
            snapshot = ref.get(transaction=transaction)
            if not snapshot.exists:
                raise NotFoundError("Contest not found")
            if guard is not None:
                guard(_to_dict(snapshot))
            transaction.delete(ref)

        apply(transaction)

    def create_payment(self, payment_data):
        try:
            self.payments.document(payment_data['sessionId']).create(payment_data)
        except AlreadyExists:
            logger.info("Payment session %s already recorded", payment_data['sessionId'])
            return False
        return True

    def get_payment(self, session_id):
        doc = self.payments.document(session_id).get()
        return _to_dict(doc) if doc.exists else None

    def mutate_payment(self, session_id, mutation):
        return self._mutate(self.payments.document(session_id), mutation, "Payment session not found")

    def list_payments(self, user_email):
        query = self.payments \
            .where('userEmail', '==', user_email) \
            .order_by(CREATED_AT, direction=firestore.Query.DESCENDING)
        return [_to_dict(doc) for doc in query.stream()]

"""
Storage interface for users, contests and payment sessions.

Every check-then-write the business rules need (duplicate registration,
duplicate submission, pending-only edits, payment transitions) goes
through ``mutate_contest``/``mutate_payment``: the callback receives the
current document and returns the fields to write, and the backend runs
read, callback and write as one atomic step. Raising inside the callback
aborts the write.
"""
from abc import ABC, abstractmethod

CREATED_AT = "createdAt"
POPULARITY = ("participantCount", "createdAt")


class ContestStore(ABC):

    # users

    @abstractmethod
    def create_user(self, user_data):
        """Insert ``user_data`` unless its email exists. Returns ``(created, user)``."""

    @abstractmethod
    def get_user(self, email):
        """Return the user keyed by ``email`` or None."""

    @abstractmethod
    def update_user(self, email, fields):
        """Merge ``fields`` into the user. Returns the updated user or None."""

    @abstractmethod
    def list_users(self):
        """All users, newest first."""

    # contests

    @abstractmethod
    def add_contest(self, contest_data):
        """Insert a contest under a generated id and return it with ``id``."""

    @abstractmethod
    def get_contest(self, contest_id):
        """Return the contest or None."""

    @abstractmethod
    def list_contests(self, status=None, creator_email=None, participant_email=None,
                      winner_email=None, order_by=(CREATED_AT,), limit=None):
        """Contests matching every given filter, sorted descending on ``order_by``."""

    @abstractmethod
    def mutate_contest(self, contest_id, mutation):
        """Atomically apply ``mutation`` to a contest.

        ``mutation(contest)`` returns a dict of fields to write, or None to
        leave the document untouched. Returns the contest as stored
        afterwards. Raises NotFoundError for an unknown id.
        """

    @abstractmethod
    def delete_contest(self, contest_id, guard=None):
        """Delete a contest, calling ``guard(contest)`` first in the same atomic step.

        Raises NotFoundError for an unknown id.
        """

    # payment sessions

    @abstractmethod
    def create_payment(self, payment_data):
        """Insert a payment session keyed by ``sessionId`` if absent. Returns True if inserted."""

    @abstractmethod
    def get_payment(self, session_id):
        """Return the payment session or None."""

    @abstractmethod
    def mutate_payment(self, session_id, mutation):
        """Same contract as ``mutate_contest`` for payment sessions."""

    @abstractmethod
    def list_payments(self, user_email):
        """Payment sessions of one user, newest first."""

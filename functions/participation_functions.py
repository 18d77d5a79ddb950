"""
Registration, submission and winner rules for a single contest.

A user moves ``unregistered -> registered -> submitted`` independently of
the contest's moderation status. Every check below runs inside the
store's atomic mutation, so two concurrent requests for the same user
cannot both append.
"""
import logging
from datetime import datetime, timezone

from models.Contest import participant_emails, find_submission
from models.User import ROLE_ADMIN
from utils.exceptions import ValidationError, ForbiddenError, ConflictError, NotFoundError

logger = logging.getLogger(__name__)

UNKNOWN_WINNER_NAME = "Unknown"


def participant_updates(contest, entry):
    """Fields that append ``entry`` to the participant list, or None if already present"""
    emails = participant_emails(contest)
    if entry['email'] in emails:
        return None
    participants = list(contest.get('participants') or []) + [entry]
    return {
        'participants': participants,
        'participantEmails': emails + [entry['email']],
        'participantCount': len(participants),
        'updatedAt': datetime.now(timezone.utc)
    }

def register(store, user_email, contest_id):
    def mutation(contest):
        updates = participant_updates(contest, {'email': user_email})
        if updates is None:
            raise ConflictError("Already registered for this contest")
        return updates

    contest = store.mutate_contest(contest_id, mutation)
    logger.info("%s registered for contest %s", user_email, contest_id)
    return contest

def submit_task(store, principal, contest_id, task_link):
    task_link = (task_link or '').strip()
    if not task_link:
        raise ValidationError("Task link is required")

    submission = {
        'email': principal.email,
        'name': principal.name,
        'image': principal.photo_url,
        'taskLink': task_link,
        'submittedAt': datetime.now(timezone.utc)
    }

    def mutation(contest):
        if principal.email not in participant_emails(contest):
            raise ForbiddenError("Register for the contest before submitting")
        if find_submission(contest, principal.email) is not None:
            raise ConflictError("You have already submitted a task")
        return {
            'submissions': list(contest.get('submissions') or []) + [submission],
            'updatedAt': datetime.now(timezone.utc)
        }

    store.mutate_contest(contest_id, mutation)
    logger.info("%s submitted a task for contest %s", principal.email, contest_id)
    return submission

def declare_winner(store, creator_email, contest_id, winner_email):
    if not winner_email:
        raise ValidationError("Winner email is required")

    # Directory lookup happens outside the transaction; it only feeds display fields
    winner_user = store.get_user(winner_email)

    def mutation(contest):
        if contest.get('creatorEmail') != creator_email:
            raise ForbiddenError("Only the contest creator can declare a winner")
        if winner_email not in participant_emails(contest):
            raise ValidationError("Winner must be a registered participant")

        submission = find_submission(contest, winner_email) or {}
        name = (winner_user or {}).get('name') or submission.get('name') or UNKNOWN_WINNER_NAME
        image = (winner_user or {}).get('photoURL') or submission.get('image')
        return {
            'winnerEmail': winner_email,
            'winnerName': name,
            'winnerImage': image,
            'updatedAt': datetime.now(timezone.utc)
        }

    contest = store.mutate_contest(contest_id, mutation)
    logger.info("Contest %s winner declared: %s", contest_id, winner_email)
    return contest

def list_participated(store, email):
    return store.list_contests(participant_email=email)

def list_won(store, email):
    return store.list_contests(winner_email=email)

def list_submissions(store, actor_email, actor_role, contest_id):
    contest = store.get_contest(contest_id)
    if contest is None:
        raise NotFoundError("Contest not found")
    if actor_role != ROLE_ADMIN and contest.get('creatorEmail') != actor_email:
        raise ForbiddenError("Only the contest creator can view submissions")
    return contest.get('submissions') or []

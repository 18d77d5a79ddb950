import logging
import math
from datetime import datetime, timezone

from models.Contest import Contest, EDITABLE_FIELDS, STATUSES, STATUS_APPROVED, STATUS_PENDING
from models.User import ROLE_CREATOR
from services.contest_store import POPULARITY
from utils.exceptions import ValidationError, NotFoundError, ForbiddenError, ConflictError

logger = logging.getLogger(__name__)

DEFAULT_POPULAR_LIMIT = 5


def parse_deadline(value):
    if isinstance(value, datetime):
        return value
    try:
        deadline = datetime.fromisoformat(str(value).replace('Z', '+00:00'))
    except ValueError:
        raise ValidationError("Deadline must be an ISO 8601 date")
    if deadline.tzinfo is None:
        deadline = deadline.replace(tzinfo=timezone.utc)
    return deadline

def parse_amount(data, key):
    value = data.get(key)
    if value in (None, ''):
        return 0.0
    try:
        amount = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{key} must be a number")
    if not math.isfinite(amount):
        raise ValidationError(f"{key} must be a finite number")
    if amount < 0:
        raise ValidationError(f"{key} cannot be negative")
    return amount

def _clean_fields(data):
    fields = {key: data[key] for key in EDITABLE_FIELDS if key in data}
    if 'title' in fields and not fields['title']:
        raise ValidationError("Title cannot be empty")
    if 'deadline' in fields:
        fields['deadline'] = parse_deadline(fields['deadline'])
    for key in ('price', 'prizeMoney'):
        if key in fields:
            fields[key] = parse_amount(fields, key)
    return fields

def create_contest(store, principal, data):
    """Store a new pending contest owned by the authenticated creator.

    The body is validated before the caller's role is looked up, so a
    malformed request is a 400 whoever sends it.
    """
    if not data.get('title') or not data.get('deadline'):
        raise ValidationError("Title and deadline are required")
    price = parse_amount(data, 'price')
    prize_money = parse_amount(data, 'prizeMoney')
    deadline = parse_deadline(data['deadline'])

    user = store.get_user(principal.email)
    if user is None or user.get('role') != ROLE_CREATOR:
        raise ForbiddenError("Only creators can create contests")

    contest = Contest(
        title=data['title'],
        image=data.get('image'),
        description=data.get('description', ''),
        task_instruction=data.get('taskInstruction', ''),
        contest_type=data.get('contestType', ''),
        price=price,
        prize_money=prize_money,
        deadline=deadline,
        creator_email=principal.email,
        creator_name=principal.name,
        created_at=datetime.now(timezone.utc)
    )
    stored = store.add_contest(contest.to_dict())
    logger.info("Contest %s created by %s", stored['id'], principal.email)
    return stored

def list_approved(store):
    return store.list_contests(status=STATUS_APPROVED)

def list_popular(store, limit=DEFAULT_POPULAR_LIMIT):
    return store.list_contests(status=STATUS_APPROVED, order_by=POPULARITY, limit=limit)

def search(store, contest_type):
    """Approved contests whose type contains ``contest_type``, ignoring case"""
    needle = (contest_type or '').strip().lower()
    contests = store.list_contests(status=STATUS_APPROVED)
    if not needle:
        return contests
    return [c for c in contests if needle in (c.get('contestType') or '').lower()]

def get_contest(store, contest_id):
    contest = store.get_contest(contest_id)
    if contest is None:
        raise NotFoundError("Contest not found")
    return contest

def list_by_creator(store, creator_email):
    return store.list_contests(creator_email=creator_email)

def _pending_owned_by(actor_email):
    def guard(contest):
        if contest.get('creatorEmail') != actor_email:
            raise ForbiddenError("You can only modify your own contests")
        if contest.get('status') != STATUS_PENDING:
            raise ConflictError("Only pending contests can be modified")
    return guard

def edit_contest(store, actor_email, contest_id, data):
    fields = _clean_fields(data)
    guard = _pending_owned_by(actor_email)

    def mutation(contest):
        guard(contest)
        return dict(fields, updatedAt=datetime.now(timezone.utc))

    contest = store.mutate_contest(contest_id, mutation)
    logger.info("Contest %s edited by %s", contest_id, actor_email)
    return contest

def delete_contest(store, actor_email, contest_id):
    store.delete_contest(contest_id, guard=_pending_owned_by(actor_email))
    logger.info("Contest %s deleted by %s", contest_id, actor_email)

# Admin operations

def list_all(store):
    return store.list_contests()

def set_status(store, contest_id, status):
    if status not in STATUSES:
        raise ValidationError(f"Status must be one of: {', '.join(STATUSES)}")

    contest = store.mutate_contest(
        contest_id,
        lambda contest: {"status": status, "updatedAt": datetime.now(timezone.utc)}
    )
    logger.info("Contest %s status set to %s", contest_id, status)
    return contest

def admin_delete(store, contest_id):
    store.delete_contest(contest_id)
    logger.info("Contest %s deleted by admin", contest_id)

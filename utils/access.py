"""
Identity gate and role resolver.

``ACCESS_POLICY`` maps Flask endpoints to the rule protecting them.
Endpoints missing from the table are public. ``enforce_access_policy``
runs before every request, verifies the bearer token, re-reads the
caller's role from the store and checks self-only path arguments.
"""
import logging
from collections import namedtuple

from flask import request

from models.User import ROLE_ADMIN, ROLE_CREATOR
from utils.backends import get_identity, get_store
from utils.exceptions import ForbiddenError, UnauthorizedError

logger = logging.getLogger(__name__)

# roles: None means any authenticated principal
# owner_arg: path argument that must equal the principal's email
AccessRule = namedtuple('AccessRule', ['roles', 'owner_arg'])

AUTHENTICATED = AccessRule(roles=None, owner_arg=None)
SELF_ONLY = AccessRule(roles=None, owner_arg='email')
CREATOR = AccessRule(roles=(ROLE_CREATOR,), owner_arg=None)
ADMIN = AccessRule(roles=(ROLE_ADMIN,), owner_arg=None)

ACCESS_POLICY = {
    'users.update_user': SELF_ONLY,
    'users.participated_contests': SELF_ONLY,
    'users.winning_contests': SELF_ONLY,

    'contests.create_contest': AUTHENTICATED,
    'contests.creator_contests': AccessRule(roles=(ROLE_CREATOR,), owner_arg='email'),
    'contests.edit_contest': CREATOR,
    'contests.delete_contest': CREATOR,
    'contests.register': AUTHENTICATED,
    'contests.submit_task': AUTHENTICATED,
    'contests.contest_submissions': AccessRule(roles=(ROLE_CREATOR, ROLE_ADMIN), owner_arg=None),
    'contests.declare_winner': CREATOR,

    'admin.all_contests': ADMIN,
    'admin.update_contest_status': ADMIN,
    'admin.delete_contest': ADMIN,
    'admin.all_users': ADMIN,
    'admin.update_user_role': ADMIN,

    'payments.create_checkout_session': AUTHENTICATED,
    'payments.payment_history': AUTHENTICATED,
}


def authenticate(auth_header):
    """Return the principal for an ``Authorization`` header value."""
    if not auth_header or not auth_header.startswith('Bearer '):
        raise UnauthorizedError("Authentication token required")
    token = auth_header[len('Bearer '):].strip()
    if not token:
        raise UnauthorizedError("Authentication token required")
    return get_identity().verify(token)


def authorize(email, roles):
    """Return the stored user if its role is one of ``roles``."""
    user = get_store().get_user(email)
    if user is None or user.get('role') not in roles:
        logger.warning("Denied %s: role %s not in %s", email, user and user.get('role'), roles)
        raise ForbiddenError("Insufficient role")
    return user


def enforce_access_policy():
    rule = ACCESS_POLICY.get(request.endpoint)
    if rule is None or request.method == 'OPTIONS':
        return None

    principal = authenticate(request.headers.get('Authorization'))
    request.user = principal
    request.user_role = None

    if rule.owner_arg is not None:
        owner = (request.view_args or {}).get(rule.owner_arg)
        if owner != principal.email:
            raise ForbiddenError("You can only access your own data")

    if rule.roles is not None:
        request.user_role = authorize(principal.email, rule.roles).get('role')
    return None

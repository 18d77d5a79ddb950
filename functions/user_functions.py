import logging
from datetime import datetime, timezone

from models.User import User, ROLES, PROFILE_FIELDS
from utils.exceptions import ValidationError, NotFoundError, ForbiddenError

logger = logging.getLogger(__name__)


def create_user(store, data):
    """Create a user unless the email is already registered"""
    email = (data.get('email') or '').strip()
    if not email:
        raise ValidationError("Email is required")

    user = User(
        email=email,
        name=data.get('name'),
        photo_url=data.get('photoURL'),
        created_at=datetime.now(timezone.utc)
    )
    created, stored = store.create_user(user.to_dict())
    if not created:
        return False, {"message": "User already exists"}

    logger.info("User %s created", email)
    return True, stored

def get_user(store, email):
    user = store.get_user(email)
    if user is None:
        raise NotFoundError("User not found")
    return user

def update_profile(store, actor_email, target_email, data):
    """Overwrite name, photo and bio of the caller's own profile"""
    if actor_email != target_email:
        raise ForbiddenError("You can only update your own profile")

    fields = {key: data.get(key) for key in PROFILE_FIELDS if key in data}
    fields['updatedAt'] = datetime.now(timezone.utc)

    user = store.update_user(target_email, fields)
    if user is None:
        raise NotFoundError("User not found")
    return user

def set_role(store, user_id, role):
    """Admin only: change a user's role"""
    if role not in ROLES:
        raise ValidationError(f"Role must be one of: {', '.join(ROLES)}")

    user = store.update_user(user_id, {"role": role, "updatedAt": datetime.now(timezone.utc)})
    if user is None:
        raise NotFoundError("User not found")

    logger.info("User %s role set to %s", user_id, role)
    return user

def list_users(store):
    return store.list_users()

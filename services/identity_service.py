import logging
from dataclasses import dataclass
from typing import Optional

from firebase_admin import auth

from utils.exceptions import ForbiddenError, UpstreamError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Principal:
    """Identity taken from a verified ID token."""
    email: str
    name: Optional[str] = None
    photo_url: Optional[str] = None


class FirebaseIdentityVerifier:
    """Verifies Firebase Authentication ID tokens."""

    def __init__(self, firebase_app=None, check_revoked=False):
        self.firebase_app = firebase_app
        self.check_revoked = check_revoked

    def verify(self, token) -> Principal:
        try:
            claims = auth.verify_id_token(token, app=self.firebase_app, check_revoked=self.check_revoked)
        except auth.ExpiredIdTokenError:
            raise ForbiddenError("Token expired")
        except auth.RevokedIdTokenError:
            raise ForbiddenError("Token revoked")
        except (auth.InvalidIdTokenError, ValueError):
            raise ForbiddenError("Invalid token")
        except auth.CertificateFetchError:
            logger.exception("Could not fetch token signing certificates")
            raise UpstreamError("Identity provider unavailable")

        email = claims.get('email')
        if not email:
            raise ForbiddenError("Token carries no email")
        return Principal(email=email, name=claims.get('name'), photo_url=claims.get('picture'))

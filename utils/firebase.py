import logging
import os
from pathlib import Path

import firebase_admin
from firebase_admin import credentials

logger = logging.getLogger(__name__)

DEFAULT_TOKEN_URI = "https://oauth2.googleapis.com/token"


def _load_credentials(cred_path):
    """Service account from a key file, else from ``FIREBASE_*`` variables."""
    if cred_path and Path(cred_path).exists():
        return credentials.Certificate(cred_path)

    private_key = os.environ.get("FIREBASE_PRIVATE_KEY")
    if not private_key:
        raise ValueError("FIREBASE_PRIVATE_KEY not found and no credentials file at %s" % cred_path)

    # The other key-file fields are not read by Certificate().
    return credentials.Certificate({
        "type": "service_account",
        "project_id": os.environ.get("FIREBASE_PROJECT_ID"),
        "client_email": os.environ.get("FIREBASE_CLIENT_EMAIL"),
        "private_key": private_key.replace('\\n', '\n'),
        "token_uri": os.environ.get("FIREBASE_TOKEN_URI", DEFAULT_TOKEN_URI),
    })


def initialize_firebase(cred_path=None):
    """Return the default Firebase app, creating it on first use."""
    try:
        return firebase_admin.get_app()
    except ValueError:
        pass

    try:
        app = firebase_admin.initialize_app(_load_credentials(cred_path))
    except Exception:
        logger.exception("Error initializing Firebase")
        raise
    logger.info("Firebase app initialized for project %s", app.project_id)
    return app

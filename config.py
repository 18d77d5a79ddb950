import os


def _split(value):
    return [item.strip() for item in value.split(',') if item.strip()]


class Config:
    """Settings read from the environment (and .env via python-dotenv)."""

    FIREBASE_CREDENTIALS_PATH = os.getenv("FIREBASE_CREDENTIALS_PATH", "serviceAccountKey.json")

    # memory | firestore
    STORE_BACKEND = os.getenv("STORE_BACKEND", "firestore")

    STRIPE_SECRET_KEY = os.getenv("STRIPE_SECRET_KEY", "")
    STRIPE_WEBHOOK_SECRET = os.getenv("STRIPE_WEBHOOK_SECRET", "")
    PAYMENT_CURRENCY = os.getenv("PAYMENT_CURRENCY", "usd")
    CLIENT_URL = os.getenv("CLIENT_URL", "http://localhost:5173")

    ALLOWED_ORIGINS = _split(os.getenv(
        "ALLOWED_ORIGINS",
        "http://localhost:5173,http://localhost:3000"
    ))

    POPULAR_LIMIT = int(os.getenv("POPULAR_LIMIT", "5"))
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

import logging
import os

from dotenv import load_dotenv
from flask import Flask, jsonify
from flask_cors import CORS
from werkzeug.exceptions import HTTPException

load_dotenv()

from config import Config
from routes.admin_routes import admin_bp
from routes.contest_routes import contest_bp
from routes.payment_routes import payment_bp
from routes.user_routes import user_bp
from utils.access import enforce_access_policy
from utils.backends import Backends, EXTENSION_KEY, init_backends
from utils.exceptions import handle_error, ContestHubError

logger = logging.getLogger(__name__)


def _build_backends(app, store=None, identity=None, payments=None):
    """Construct whichever collaborators the caller did not inject."""
    if identity is None or (store is None and app.config['STORE_BACKEND'] != 'memory'):
        from utils.firebase import initialize_firebase
        firebase_app = initialize_firebase(app.config['FIREBASE_CREDENTIALS_PATH'])
    else:
        firebase_app = None

    if store is None:
        if app.config['STORE_BACKEND'] == 'memory':
            from services.memory_store import InMemoryContestStore
            store = InMemoryContestStore()
        else:
            from services.firestore_store import FirestoreContestStore
            store = FirestoreContestStore.from_app(firebase_app)

    if identity is None:
        from services.identity_service import FirebaseIdentityVerifier
        identity = FirebaseIdentityVerifier(firebase_app)

    if payments is None:
        from services.payment_gateway import StripeGateway
        payments = StripeGateway.from_config(app.config)

    return Backends(store=store, identity=identity, payments=payments)


def create_app(overrides=None, store=None, identity=None, payments=None):
    app = Flask(__name__)
    app.config.from_object(Config)
    if overrides:
        app.config.update(overrides)

    logging.basicConfig(
        level=app.config['LOG_LEVEL'],
        format='%(asctime)s %(levelname)s %(name)s: %(message)s'
    )

    CORS(
        app,
        resources={
            r"/*": {
                "origins": app.config['ALLOWED_ORIGINS'],
                "allow_headers": ["Content-Type", "Authorization"],
                "methods": ["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
                "supports_credentials": True
            }
        }
    )

    init_backends(app, _build_backends(app, store, identity, payments))
    app.before_request(enforce_access_policy)

    # Register blueprints
    app.register_blueprint(user_bp)
    app.register_blueprint(contest_bp, url_prefix='/contests')
    app.register_blueprint(admin_bp, url_prefix='/admin')
    app.register_blueprint(payment_bp)

    @app.route('/')
    def index():
        return "ContestHub Server Running"

    @app.route('/health')
    def health():
        return jsonify({"status": "healthy"}), 200

    @app.errorhandler(ContestHubError)
    def handle_contesthub_error(e):
        return handle_error(e)

    @app.errorhandler(HTTPException)
    def handle_http_error(e):
        return handle_error(e)

    @app.errorhandler(Exception)
    def handle_unexpected_error(e):
        return handle_error(e)

    logger.info("ContestHub app created with %s store", type(app.extensions[EXTENSION_KEY].store).__name__)
    return app


if __name__ == '__main__':
    create_app().run(host='0.0.0.0', port=int(os.environ.get('PORT', 3000)), debug=True)

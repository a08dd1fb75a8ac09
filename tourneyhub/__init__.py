"""Initialize the Flask app and its extensions."""

import json
import os

import firebase_admin
from firebase_admin import credentials
from flask import Flask
from werkzeug.middleware.proxy_fix import ProxyFix

from .core.constants import (
    REPAIR_MAX_WORKERS,
    SESSION_READY_TIMEOUT,
    STORE_MAX_RETRIES,
    STORE_RETRY_BACKOFF,
    TOURNAMENTS_PATH,
)
from .extensions import EXTENSION_KEY, csrf


def _load_credentials(app):
    """Find Firebase credentials: env JSON, then a local file, then ADC."""
    cred = None
    project_id = None

    # First, try to load from environment variable (for production)
    cred_json = os.environ.get("FIREBASE_CREDENTIALS_JSON")
    if cred_json:
        try:
            cred_info = json.loads(cred_json)
            project_id = cred_info.get("project_id")
            cred = credentials.Certificate(cred_info)
        except (json.JSONDecodeError, ValueError) as e:
            app.logger.error(f"Error parsing FIREBASE_CREDENTIALS_JSON: {e}")

    # If env var fails or is not present, try loading from file (for local dev)
    if not cred:
        cred_path = os.path.join(
            os.path.dirname(os.path.dirname(__file__)), "firebase_credentials.json"
        )
        if os.path.exists(cred_path):
            try:
                with open(cred_path, "r") as f:
                    cred_info = json.load(f)
                project_id = cred_info.get("project_id")
                cred = credentials.Certificate(cred_path)
            except (json.JSONDecodeError, ValueError) as e:
                app.logger.error(f"Error loading credentials from file: {e}")

    # If both methods fail, fallback to default credentials
    if not cred:
        try:
            cred = credentials.ApplicationDefault()
            project_id = os.environ.get("FIREBASE_PROJECT_ID")
        except Exception as e:
            app.logger.error(
                f"Could not find any valid credentials (env, file, or default): {e}"
            )

    return cred, project_id


def _init_firebase(app):
    """Initialize the Firebase Admin SDK with the Realtime Database URL."""
    cred, project_id = _load_credentials(app)
    if not cred or firebase_admin._apps:
        return

    database_url = app.config.get("FIREBASE_DATABASE_URL")
    if not database_url and project_id:
        database_url = f"https://{project_id}-default-rtdb.firebaseio.com"

    firebase_options = {"databaseURL": database_url}
    if project_id:
        firebase_options["projectId"] = project_id
    try:
        firebase_admin.initialize_app(cred, firebase_options)
    except ValueError:
        # This can happen if the app is already initialized, which is fine.
        app.logger.info("Firebase app already initialized.")


def create_app(test_config=None, store=None):
    """Create and configure an instance of the Flask application.

    ``store`` replaces the Realtime Database store, mainly for tests.
    """
    app = Flask(__name__, instance_relative_config=True)

    # Load configuration
    app.config.from_mapping(
        SECRET_KEY=os.environ.get("SECRET_KEY") or "dev",
        FIREBASE_DATABASE_URL=os.environ.get("FIREBASE_DATABASE_URL"),
        TOURNAMENTS_PATH=os.environ.get("TOURNAMENTS_PATH") or TOURNAMENTS_PATH,
        STORE_MAX_RETRIES=int(os.environ.get("STORE_MAX_RETRIES") or STORE_MAX_RETRIES),
        STORE_RETRY_BACKOFF=float(
            os.environ.get("STORE_RETRY_BACKOFF") or STORE_RETRY_BACKOFF
        ),
        REPAIR_MAX_WORKERS=int(os.environ.get("REPAIR_MAX_WORKERS") or REPAIR_MAX_WORKERS),
        SESSION_READY_TIMEOUT=float(
            os.environ.get("SESSION_READY_TIMEOUT") or SESSION_READY_TIMEOUT
        ),
    )

    if test_config:
        app.config.update(test_config)

    # Initialize Firebase Admin SDK only if not in testing mode
    if not app.config.get("TESTING"):
        _init_firebase(app)

    # Initialize extensions
    csrf.init_app(app)

    from .session import TournamentSession
    from .store import RealtimeDatabaseStore
    from .tournament.repair import RepairService

    if store is None and not app.config.get("TESTING"):
        store = RealtimeDatabaseStore(
            max_retries=app.config["STORE_MAX_RETRIES"],
            retry_backoff=app.config["STORE_RETRY_BACKOFF"],
        )

    tournament_session = None
    if store is not None:
        collection = app.config["TOURNAMENTS_PATH"]
        repair_service = RepairService(
            store, collection, max_workers=app.config["REPAIR_MAX_WORKERS"]
        )
        tournament_session = TournamentSession(store, repair_service, collection)
        tournament_session.start()

    app.extensions[EXTENSION_KEY] = {"store": store, "session": tournament_session}

    # Register blueprints
    from . import auth as auth_bp

    app.register_blueprint(auth_bp.bp)

    from . import tournament as tournament_bp

    app.register_blueprint(tournament_bp.bp)

    from . import error_handlers

    app.register_blueprint(error_handlers.error_handlers_bp)

    from .identity import load_identity

    app.before_request(load_identity)

    app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1, x_host=1, x_prefix=1)

    return app

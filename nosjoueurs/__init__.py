"""Initialize the Flask app and its extensions."""

import json
import os

import firebase_admin
from firebase_admin import credentials
from flask import Flask, request
from werkzeug.middleware.proxy_fix import ProxyFix

from . import constants
from .extensions import throttle
from .utils import apply_cors_headers


def _int_env(name, default):
    value = os.environ.get(name)
    return int(value) if value else default


def _load_credentials(app):
    """Return ``(credential, project_id)`` for the Firebase Admin SDK.

    Sources, in order: the ``FIREBASE_CREDENTIALS_JSON`` variable used in
    production, a ``firebase_credentials.json`` next to the package for local
    runs, then application-default credentials.
    """
    cred_json = os.environ.get("FIREBASE_CREDENTIALS_JSON")
    if cred_json:
        try:
            cred_info = json.loads(cred_json)
            return credentials.Certificate(cred_info), cred_info.get("project_id")
        except (json.JSONDecodeError, ValueError) as e:
            app.logger.error(f"Invalid FIREBASE_CREDENTIALS_JSON: {e}")

    cred_path = os.path.join(
        os.path.dirname(os.path.dirname(__file__)), "firebase_credentials.json"
    )
    if os.path.exists(cred_path):
        try:
            with open(cred_path, "r") as f:
                project_id = json.load(f).get("project_id")
            return credentials.Certificate(cred_path), project_id
        except (json.JSONDecodeError, ValueError) as e:
            app.logger.error(f"Invalid credentials file {cred_path}: {e}")

    try:
        return credentials.ApplicationDefault(), os.environ.get("FIREBASE_PROJECT_ID")
    except Exception as e:
        app.logger.error(f"No Firebase credentials available: {e}")
        return None, None


def _init_firebase(app):
    """Initialize the Firebase Admin SDK backing the remote store."""
    cred, project_id = _load_credentials(app)
    if cred is None or firebase_admin._apps:
        return

    try:
        options = {"projectId": project_id} if project_id else None
        firebase_admin.initialize_app(cred, options)
    except ValueError:
        app.logger.info("Firebase app already initialized.")


def create_app(test_config=None):
    """Create and configure an instance of the Flask application."""
    app = Flask(__name__, instance_relative_config=True)

    # Load configuration
    app.config.from_mapping(
        SECRET_KEY=os.environ.get("SECRET_KEY") or "dev",
        SYNC_SECRET=os.environ.get("SYNC_SECRET") or constants.DEFAULT_SYNC_SECRET,
        FFE_HOST=os.environ.get("FFE_HOST") or constants.FFE_HOST,
        SCRAPE_TIMEOUT=_int_env("SCRAPE_TIMEOUT", constants.SCRAPE_TIMEOUT),
        SCRAPE_MIN_HTML_LENGTH=_int_env(
            "SCRAPE_MIN_HTML_LENGTH", constants.SCRAPE_MIN_HTML_LENGTH
        ),
        SCRAPE_RATE_LIMIT=_int_env("SCRAPE_RATE_LIMIT", constants.SCRAPE_RATE_LIMIT),
        SCRAPE_RATE_WINDOW=_int_env(
            "SCRAPE_RATE_WINDOW", constants.SCRAPE_RATE_WINDOW
        ),
        EVENTS_RATE_LIMIT=_int_env("EVENTS_RATE_LIMIT", constants.EVENTS_RATE_LIMIT),
        EVENTS_RATE_WINDOW=_int_env(
            "EVENTS_RATE_WINDOW", constants.EVENTS_RATE_WINDOW
        ),
    )

    if test_config:
        app.config.update(test_config)

    # Initialize Firebase Admin SDK only if not in testing mode
    if not app.config.get("TESTING"):
        _init_firebase(app)

    # Initialize extensions
    throttle.init_app(app)

    # Register blueprints
    from . import scrape as scrape_bp

    app.register_blueprint(scrape_bp.bp)

    from . import events as events_bp

    app.register_blueprint(events_bp.bp)

    from . import error_handlers

    app.register_blueprint(error_handlers.error_handlers_bp)

    @app.after_request
    def add_cors_headers(response):
        """Open every API response to cross-origin callers."""
        if request.path.startswith("/api/"):
            apply_cors_headers(response)
        return response

    app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1, x_host=1, x_prefix=1)

    return app

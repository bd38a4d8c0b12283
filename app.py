"""
ChurchOS application factory.
Wires configuration, the database, the group chat core and the Socket.IO live channel.
"""

import logging
import os
from flask import Flask, jsonify, request
from werkzeug.exceptions import HTTPException

from backend.utils.config import init_app
from backend.utils.logger import setup_logging
from backend.models import configure_engine, init_db, seed_demo_data
from backend.chat import MessageStore, MembershipAuthority, MessageIngress
from backend.websockets import ChannelRegistry, BroadcastDispatcher, init_socketio
from backend.auth.session_auth import session_auth_bp
from backend.routes.groups import groups_bp
from backend.routes.branches import branches_bp
from backend.routes.events import events_bp
from backend.routes.prayer import prayer_bp
from backend.routes.stats import stats_bp
from backend.routes.admin import admin_bp


logger = logging.getLogger(__name__)


def register_error_handlers(app):
    """JSON errors for API routes"""

    @app.errorhandler(HTTPException)
    def handle_http_error(e):
        if not request.path.startswith("/api"):
            return e
        return jsonify({"error": e.description}), e.code

    @app.errorhandler(Exception)
    def handle_unexpected_error(e):
        logger.exception("Unhandled error on %s %s", request.method, request.path)
        return jsonify({"error": "Internal server error"}), 500


def create_app(overrides=None):
    """Build the Flask app. ``overrides`` are applied on top of the environment config."""
    setup_logging((overrides or {}).get("LOG_LEVEL") or os.getenv("LOG_LEVEL", "INFO"))

    app = Flask(__name__, static_folder="frontend", static_url_path="")
    app.cache = init_app(app, overrides)

    configure_engine(app.config["DATABASE_URL"])
    init_db()
    if app.config["SEED_DEMO_DATA"]:
        seed_demo_data()

    # Group chat core, composed explicitly so tests can swap any piece
    app.channel_registry = ChannelRegistry()
    app.message_store = MessageStore()
    app.membership = MembershipAuthority()
    app.message_ingress = MessageIngress(app.message_store, BroadcastDispatcher(app.channel_registry))

    app.register_blueprint(session_auth_bp)
    app.register_blueprint(groups_bp)
    app.register_blueprint(branches_bp)
    app.register_blueprint(events_bp)
    app.register_blueprint(prayer_bp)
    app.register_blueprint(stats_bp)
    app.register_blueprint(admin_bp)
    register_error_handlers(app)

    @app.route("/health")
    def health():
        return jsonify(status="ok")

    app.socketio = init_socketio(app, app.channel_registry)
    return app


if __name__ == "__main__":
    app = create_app()
    port = int(os.getenv("PORT", "8000"))
    app.socketio.run(app, host="0.0.0.0", port=port, allow_unsafe_werkzeug=True)

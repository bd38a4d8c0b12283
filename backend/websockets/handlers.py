"""
Socket.IO event handlers for ChurchOS.
Handles the receive-only live channel of each group chat.
"""

import logging
from flask import current_app, request
from flask_socketio import SocketIO
from backend.auth.session_auth import current_user
from .broadcast import SocketIOConnection
from .registry import parse_group_id


logger = logging.getLogger(__name__)


def init_socketio(app, registry):
    """Initialize Socket.IO with the Flask app and wire it to ``registry``"""
    socketio = SocketIO(
        app,
        cors_allowed_origins=app.config.get("SOCKETIO_CORS_ALLOWED_ORIGINS", "*"),
        ping_timeout=120,
        ping_interval=30,
        max_http_buffer_size=16384,
        manage_session=False,  # Let Flask handle sessions
        cookie=False,
        engineio_logger=False,
        logger=False,
        async_mode=app.config.get("SOCKETIO_ASYNC_MODE", "threading"),
    )

    register_handlers(socketio, registry)

    return socketio


def register_handlers(socketio, registry):
    """Register all Socket.IO event handlers"""

    @socketio.on("connect")
    def handle_connect(auth=None):
        """Attach the client to the group named by its ``groupId`` query parameter.

        Only signed-in members of the group, or elevated roles, are attached.
        Everyone else is accepted but receives nothing.
        """
        raw_group_id = request.args.get("groupId")
        group_id = parse_group_id(raw_group_id)
        if group_id is None:
            logger.info("[CONNECTION] %s connected without a valid groupId (%r)", request.sid, raw_group_id)
            return

        user = current_user()
        if user is None:
            logger.info("[CONNECTION] %s not signed in, not attached to group %s", request.sid, group_id)
            return

        membership = current_app.membership
        if not membership.is_elevated(user["role"]) and not membership.is_member(user["id"], group_id):
            logger.info("[CONNECTION] user %s is not a member of group %s, not attached", user["id"], group_id)
            return

        registry.attach(group_id, SocketIOConnection(socketio, request.sid))
        logger.info("[CONNECTION] %s (user %s) joined group %s", request.sid, user["id"], group_id)


    @socketio.on("disconnect")
    def handle_disconnect(reason=None):
        """Detach the client from its group"""
        connection = SocketIOConnection(socketio, request.sid)
        registry.detach(parse_group_id(request.args.get("groupId")), connection)
        logger.info("[DISCONNECTION] %s disconnected (reason: %s)", request.sid, reason)


    @socketio.on_error_default
    def default_error_handler(e):
        """Default error handler for all events"""
        logger.error("[SOCKET ERROR] %s on event %s", e, getattr(request, "event", None))
        return False

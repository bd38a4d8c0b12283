"""
Session routes for ChurchOS.
Identity lives in the signed server-side session; request parameters are
never trusted for user id or role.
"""

import logging
from functools import wraps
from flask import Blueprint, current_app, g, jsonify, session
from backend.models.models import get_db, User
from backend.utils.request_body import json_object


logger = logging.getLogger(__name__)

session_auth_bp = Blueprint('session_auth', __name__)


def current_user():
    """The signed-in user as a dict, or None"""
    if "current_user" in g:
        return g.current_user

    user = None
    user_id = session.get("user_id")
    if user_id is not None:
        with get_db() as db:
            record = db.get(User, user_id)
            if record is not None:
                user = record.to_dict()
            else:
                session.clear()

    g.current_user = user
    return user


def sign_in(user):
    session.clear()
    session["user_id"] = user["id"]
    session.permanent = True
    g.current_user = user
    logger.info("Signed in %s (%s)", user["email"], user["role"])


def login_required(view):
    """Reject the request with 401 unless a user is signed in"""
    @wraps(view)
    def wrapped(*args, **kwargs):
        if current_user() is None:
            return jsonify({"error": "Authentication required"}), 401
        return view(*args, **kwargs)
    return wrapped


def _find_user_by_email(email):
    with get_db() as db:
        record = db.query(User).filter(User.email == email).first()
        return record.to_dict() if record else None


@session_auth_bp.route("/api/session", methods=["POST"])
def create_session():
    """Sign in as the user with the given email"""
    data = json_object()
    email = data.get("email")
    if not isinstance(email, str) or not email.strip():
        return jsonify({"error": "email is required"}), 400
    email = email.strip().lower()

    user = _find_user_by_email(email)
    if user is None:
        return jsonify({"error": "Unknown user"}), 404

    sign_in(user)
    return jsonify(user)


@session_auth_bp.route("/api/me")
def me():
    """Current user. Falls back to the configured fixed user when nobody is signed in."""
    user = current_user()
    if user is None:
        auto_login_email = current_app.config.get("AUTO_LOGIN_EMAIL")
        if auto_login_email:
            user = _find_user_by_email(auto_login_email)
            if user is not None:
                sign_in(user)
    if user is None:
        return jsonify({"error": "Authentication required"}), 401
    return jsonify(user)


@session_auth_bp.route("/api/logout", methods=["POST"])
def logout():
    session.clear()
    g.pop("current_user", None)
    return jsonify({"status": "success"})

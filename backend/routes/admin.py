"""
Administration routes for ChurchOS.
User directory, branch creation and role changes, for super admins only.
"""

import logging
from functools import wraps
from flask import Blueprint, current_app, jsonify
from backend.auth.session_auth import current_user, login_required
from backend.utils.request_body import json_object
from backend.models.models import get_db, ROLES, Branch, Church, User


logger = logging.getLogger(__name__)

admin_bp = Blueprint('admin', __name__, url_prefix='/api/admin')


def admin_required(view):
    """Reject the request with 403 unless the signed-in user holds an elevated role"""
    @wraps(view)
    @login_required
    def wrapped(*args, **kwargs):
        if not current_app.membership.is_elevated(current_user()["role"]):
            return jsonify({"error": "Admin access required"}), 403
        return view(*args, **kwargs)
    return wrapped


@admin_bp.route("/users")
@admin_required
def list_users():
    """Every user with the name of their branch"""
    with get_db() as db:
        rows = (
            db.query(User, Branch.name)
            .outerjoin(Branch, User.branch_id == Branch.id)
            .order_by(User.id)
            .all()
        )
        users = []
        for user, branch_name in rows:
            data = user.to_dict()
            data["branch_name"] = branch_name
            users.append(data)
    return jsonify(users)


@admin_bp.route("/branches", methods=["POST"])
@admin_required
def create_branch():
    data = json_object()
    name = data.get("name")
    if not isinstance(name, str) or not name.strip():
        return jsonify({"error": "Branch name is required"}), 400
    location = data.get("location")
    if location is not None and not isinstance(location, str):
        return jsonify({"error": "location must be a string"}), 400
    church_id = data.get("church_id")

    with get_db() as db:
        if church_id is None:
            # Single-church installs: default to the admin's own church
            own_branch_id = current_user()["branch_id"]
            own_branch = db.get(Branch, own_branch_id) if own_branch_id is not None else None
            church_id = own_branch.church_id if own_branch is not None else None
            if church_id is None:
                return jsonify({"error": "church_id is required"}), 400
        elif isinstance(church_id, bool) or not isinstance(church_id, int):
            return jsonify({"error": "church_id must be an integer"}), 400
        elif db.get(Church, church_id) is None:
            return jsonify({"error": "Church not found"}), 404

        branch = Branch(church_id=church_id, name=name.strip(), location=location)
        db.add(branch)
        db.flush()
        branch_id = branch.id

    current_app.cache.delete("stats:all")
    logger.info("Created branch %s (%s)", branch_id, name.strip())
    return jsonify({"id": branch_id})


@admin_bp.route("/users/<int:user_id>/role", methods=["POST"])
@admin_required
def change_role(user_id):
    """Change a user's role. Takes effect on the user's next request."""
    data = json_object()
    role = data.get("role")
    if role not in ROLES:
        return jsonify({"error": f"role must be one of: {', '.join(ROLES)}"}), 400

    with get_db() as db:
        user = db.get(User, user_id)
        if user is None:
            return jsonify({"error": "User not found"}), 404
        previous = user.role
        user.role = role

    logger.info("User %s role changed from %s to %s by user %s", user_id, previous, role, current_user()["id"])
    return jsonify({"success": True})

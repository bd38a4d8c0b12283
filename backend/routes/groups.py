"""
Small group routes for ChurchOS.
Handles the group directory, group detail with chat history, and posting chat messages.
"""

from flask import Blueprint, current_app, jsonify
from sqlalchemy import func
from backend.auth.session_auth import current_user, login_required
from backend.utils.request_body import json_object
from backend.chat import ChatError, read_history, require_id
from backend.models.models import get_db, Branch, Group, GroupMember


groups_bp = Blueprint('groups', __name__, url_prefix='/api')


@groups_bp.route("/groups")
@login_required
def list_groups():
    """Groups with branch name and member count; non super-admins see their own branch"""
    user = current_user()
    with get_db() as db:
        query = (
            db.query(Group, Branch.name, func.count(GroupMember.user_id))
            .join(Branch, Group.branch_id == Branch.id)
            .outerjoin(GroupMember, GroupMember.group_id == Group.id)
            .group_by(Group.id, Branch.name)
            .order_by(Group.id)
        )
        if not current_app.membership.is_elevated(user["role"]):
            query = query.filter(Group.branch_id == user["branch_id"])

        groups = []
        for group, branch_name, count in query.all():
            data = group.to_dict()
            data["branch_name"] = branch_name
            data["member_count"] = count
            groups.append(data)
    return jsonify(groups)


@groups_bp.route("/groups/<int:group_id>")
@login_required
def group_detail(group_id):
    """Group metadata, roster and, for members and elevated roles, the chat history"""
    user = current_user()
    with get_db() as db:
        group = db.get(Group, group_id)
        if group is None:
            return jsonify({"error": "Group not found"}), 404
        data = group.to_dict()

    membership = current_app.membership
    data["members"] = membership.members_of(group_id)
    data["messages"] = read_history(
        current_app.message_store, membership, group_id, user["id"], user["role"]
    )
    data["is_member"] = membership.is_member(user["id"], group_id)
    return jsonify(data)


@groups_bp.route("/messages", methods=["POST"])
@login_required
def create_message():
    """Store a chat message and push it to everyone connected to the group"""
    user = current_user()
    data = json_object()

    try:
        sender_id = data.get("sender_id")
        if sender_id is not None and require_id(sender_id, "sender_id") != user["id"]:
            return jsonify({"error": "Cannot post as another user"}), 403
        message_id = current_app.message_ingress.post_message(
            data.get("group_id"), sender_id, data.get("content")
        )
    except ChatError as e:
        return jsonify(e.to_dict()), e.status_code

    return jsonify({"id": message_id})

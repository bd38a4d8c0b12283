"""
Event routes for ChurchOS.
Handles the role-scoped event calendar, attendance and meeting notes.
"""

from flask import Blueprint, current_app, jsonify
from sqlalchemy import or_, select
from backend.auth.session_auth import current_user, login_required
from backend.utils.request_body import json_object
from backend.models.models import get_db, Branch, Event, Group, GroupMember, MeetingAttendance


events_bp = Blueprint('events', __name__, url_prefix='/api')


def _isoformat(value):
    return value.isoformat() if value else None


@events_bp.route("/events")
@login_required
def list_events():
    """Events in the user's branch, in groups they belong to, or church-wide"""
    user = current_user()
    with get_db() as db:
        query = (
            db.query(Event, Branch.name, Group.name)
            .join(Branch, Event.branch_id == Branch.id)
            .outerjoin(Group, Event.group_id == Group.id)
        )
        if not current_app.membership.is_elevated(user["role"]):
            member_groups = select(GroupMember.group_id).where(GroupMember.user_id == user["id"])
            query = query.filter(or_(
                Event.branch_id == user["branch_id"],
                Event.group_id.in_(member_groups),
                Event.group_id.is_(None),
            ))

        events = []
        for event, branch_name, group_name in query.order_by(Event.start_time.asc(), Event.id.asc()).all():
            events.append({
                "id": event.id,
                "branch_id": event.branch_id,
                "group_id": event.group_id,
                "title": event.title,
                "description": event.description,
                "start_time": _isoformat(event.start_time),
                "location": event.location,
                "meeting_url": event.meeting_url,
                "meeting_notes": event.meeting_notes,
                "branch_name": branch_name,
                "group_name": group_name,
            })
    return jsonify(events)


@events_bp.route("/events/<int:event_id>/attendance", methods=["POST"])
@login_required
def record_attendance(event_id):
    """Record that the signed-in user joined the meeting"""
    user = current_user()
    with get_db() as db:
        if db.get(Event, event_id) is None:
            return jsonify({"error": "Event not found"}), 404
        db.add(MeetingAttendance(event_id=event_id, user_id=user["id"]))
    return jsonify({"success": True})


@events_bp.route("/events/<int:event_id>/notes", methods=["POST"])
@login_required
def save_notes(event_id):
    data = json_object()
    notes = data.get("notes")
    if notes is None:
        return jsonify({"error": "notes is required"}), 400
    if not isinstance(notes, str):
        return jsonify({"error": "notes must be a string"}), 400

    with get_db() as db:
        event = db.get(Event, event_id)
        if event is None:
            return jsonify({"error": "Event not found"}), 404
        event.meeting_notes = notes
    return jsonify({"success": True})

"""
Prayer request routes for ChurchOS.
"""

from flask import Blueprint, jsonify
from backend.auth.session_auth import current_user, login_required
from backend.utils.request_body import json_object
from backend.models.models import get_db, PrayerRequest, User


prayer_bp = Blueprint('prayer', __name__, url_prefix='/api')


@prayer_bp.route("/prayer-requests")
@login_required
def list_prayer_requests():
    """Newest first; the author's name is withheld on anonymous requests"""
    with get_db() as db:
        rows = (
            db.query(PrayerRequest, User.name)
            .outerjoin(User, PrayerRequest.user_id == User.id)
            .order_by(PrayerRequest.timestamp.desc(), PrayerRequest.id.desc())
            .all()
        )
        return jsonify([
            {
                "id": prayer.id,
                "user_id": None if prayer.is_anonymous else prayer.user_id,
                "user_name": None if prayer.is_anonymous else user_name,
                "branch_id": prayer.branch_id,
                "content": prayer.content,
                "is_anonymous": prayer.is_anonymous,
                "timestamp": prayer.timestamp.isoformat() if prayer.timestamp else None,
            }
            for prayer, user_name in rows
        ])


@prayer_bp.route("/prayer-requests", methods=["POST"])
@login_required
def create_prayer_request():
    user = current_user()
    data = json_object()
    content = data.get("content")
    if not isinstance(content, str) or not content.strip():
        return jsonify({"error": "Prayer request cannot be empty"}), 400

    with get_db() as db:
        prayer = PrayerRequest(
            user_id=user["id"],
            branch_id=user["branch_id"],
            content=content.strip(),
            is_anonymous=bool(data.get("is_anonymous")),
        )
        db.add(prayer)
        db.flush()
        prayer_id = prayer.id
    return jsonify({"id": prayer_id})

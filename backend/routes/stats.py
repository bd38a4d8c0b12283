"""
Dashboard statistics routes for ChurchOS.
"""

import logging
from flask import Blueprint, current_app, jsonify
from backend.auth.session_auth import current_user, login_required
from backend.models.models import get_db, Branch, Event, Group, User


logger = logging.getLogger(__name__)

stats_bp = Blueprint('stats', __name__, url_prefix='/api')


def compute_stats(branch_id=None):
    """Member, group, event and branch counts, optionally limited to one branch"""
    with get_db() as db:
        users = db.query(User)
        groups = db.query(Group)
        events = db.query(Event)
        branches = db.query(Branch)
        if branch_id is not None:
            users = users.filter(User.branch_id == branch_id)
            groups = groups.filter(Group.branch_id == branch_id)
            events = events.filter(Event.branch_id == branch_id)
            branches = branches.filter(Branch.id == branch_id)
        return {
            "members": users.count(),
            "groups": groups.count(),
            "events": events.count(),
            "branches": branches.count(),
        }


@stats_bp.route("/stats")
@login_required
def dashboard_stats():
    user = current_user()
    branch_id = None if current_app.membership.is_elevated(user["role"]) else user["branch_id"]
    cache_key = f"stats:{branch_id if branch_id is not None else 'all'}"

    stats = current_app.cache.get(cache_key)
    if stats is None:
        stats = compute_stats(branch_id)
        current_app.cache.set(cache_key, stats, timeout=current_app.config.get("STATS_CACHE_TIMEOUT", 60))
    else:
        logger.debug("Serving %s from cache", cache_key)
    return jsonify(stats)

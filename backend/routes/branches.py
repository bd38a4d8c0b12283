"""
Branch routes for ChurchOS.
"""

from flask import Blueprint, current_app, jsonify
from backend.auth.session_auth import current_user, login_required
from backend.models.models import get_db, Branch


branches_bp = Blueprint('branches', __name__, url_prefix='/api')


@branches_bp.route("/branches")
@login_required
def list_branches():
    """All branches for super admins, otherwise the user's own branch"""
    user = current_user()
    with get_db() as db:
        query = db.query(Branch).order_by(Branch.id)
        if not current_app.membership.is_elevated(user["role"]):
            query = query.filter(Branch.id == user["branch_id"])
        return jsonify([branch.to_dict() for branch in query.all()])

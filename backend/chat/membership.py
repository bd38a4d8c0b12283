"""
Membership and role lookups used to gate access to group history.
"""

from backend.models.models import get_db, User, GroupMember


# Roles with unrestricted read access across all groups
ELEVATED_ROLES = frozenset({"super_admin"})


class MembershipAuthority:

    def is_member(self, user_id, group_id):
        if user_id is None or group_id is None:
            return False
        with get_db() as db:
            return (
                db.query(GroupMember)
                .filter(GroupMember.user_id == user_id, GroupMember.group_id == group_id)
                .first()
                is not None
            )

    def role_of(self, user_id):
        if user_id is None:
            return None
        with get_db() as db:
            user = db.get(User, user_id)
            return user.role if user else None

    def is_elevated(self, role):
        return role in ELEVATED_ROLES

    def members_of(self, group_id):
        """Group roster: id, name, role and role in group for each member"""
        with get_db() as db:
            rows = (
                db.query(User.id, User.name, User.role, GroupMember.role_in_group)
                .join(GroupMember, GroupMember.user_id == User.id)
                .filter(GroupMember.group_id == group_id)
                .order_by(User.id)
                .all()
            )
            return [
                {"id": user_id, "name": name, "role": role, "role_in_group": role_in_group}
                for user_id, name, role, role_in_group in rows
            ]

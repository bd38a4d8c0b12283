"""
Membership-gated read of a group's message history.
"""


def read_history(store, membership, group_id, user_id, role):
    """Return the ordered history of ``group_id`` if the requester may see it.

    Elevated roles always see the history. Everyone else must hold a
    membership row for the group; otherwise an empty list comes back so
    the rest of the group detail can still render.
    """
    if membership.is_elevated(role) or membership.is_member(user_id, group_id):
        return store.select_by_group(group_id)
    return []

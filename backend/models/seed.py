"""
Demo data for a fresh ChurchOS database.
"""

import logging
from datetime import datetime
from .database_config import get_db
from .church_models import Church, Branch, User, Group, GroupMember
from .chat_models import Message
from .event_models import Event, PrayerRequest


logger = logging.getLogger(__name__)


def seed_demo_data():
    """Load the demo church when the database is empty. Returns True if anything was written."""
    with get_db() as db:
        if db.query(Church).count():
            return False

        church = Church(name="Grace Community Church")
        db.add(church)
        db.flush()

        branch = Branch(church_id=church.id, name="Main Campus", location="Downtown")
        db.add(branch)
        db.flush()

        admin = User(name="John Doe", email="admin@church.org", role="super_admin", branch_id=branch.id)
        leader = User(name="Jane Smith", email="jane@church.org", role="group_leader", branch_id=branch.id)
        member = User(name="Bob Wilson", email="bob@church.org", role="member", branch_id=branch.id)
        db.add_all([admin, leader, member])
        db.flush()

        group = Group(
            branch_id=branch.id,
            name="Worship Team",
            type="Ministry",
            description="Praise and worship coordination",
            meeting_url="https://meet.google.com/abc-defg-hij",
        )
        db.add(group)
        db.flush()

        db.add_all([
            GroupMember(user_id=leader.id, group_id=group.id, role_in_group="Leader"),
            GroupMember(user_id=member.id, group_id=group.id, role_in_group="Vocalist"),
        ])
        db.add(Message(group_id=group.id, sender_id=leader.id, content="Hi team, rehearsal is at 6 PM tomorrow!"))
        db.add(Event(
            branch_id=branch.id,
            group_id=group.id,
            title="Sunday Service",
            description="Weekly worship service",
            start_time=datetime(2026, 2, 22, 9, 0),
            location="Main Sanctuary",
            meeting_url="https://meet.google.com/xyz-pdq-rst",
        ))
        db.add(PrayerRequest(
            user_id=member.id,
            branch_id=branch.id,
            content="Please pray for my family this week.",
        ))

    logger.info("Seeded demo church data")
    return True

"""
Consolidated models import for ChurchOS.
"""

from .database_config import Base, SessionLocal, configure_engine, init_db, drop_db, get_db
from .church_models import ROLES, Church, Branch, User, Group, GroupMember
from .chat_models import Message
from .event_models import Event, MeetingAttendance, PrayerRequest

__all__ = [
    'Base', 'SessionLocal', 'configure_engine', 'init_db', 'drop_db', 'get_db',
    'ROLES', 'Church', 'Branch', 'User', 'Group', 'GroupMember',
    'Message', 'Event', 'MeetingAttendance', 'PrayerRequest',
]

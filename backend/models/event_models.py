"""
Event, attendance and prayer request models for ChurchOS.
"""

from datetime import datetime, timezone
from sqlalchemy import Column, Integer, String, DateTime, Text, Boolean, ForeignKey
from .database_config import Base


class Event(Base):
    __tablename__ = "events"

    id = Column(Integer, primary_key=True, index=True)
    branch_id = Column(Integer, ForeignKey("branches.id"))
    group_id = Column(Integer, ForeignKey("groups.id"), nullable=True)
    title = Column(String, nullable=False)
    description = Column(Text)
    start_time = Column(DateTime)
    location = Column(String)
    meeting_url = Column(String)
    meeting_notes = Column(Text)

    def __repr__(self):
        return f"<Event {self.title}>"


class MeetingAttendance(Base):
    __tablename__ = "meeting_attendance"

    id = Column(Integer, primary_key=True, index=True)
    event_id = Column(Integer, ForeignKey("events.id"), nullable=False)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    joined_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))


class PrayerRequest(Base):
    __tablename__ = "prayer_requests"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"))
    branch_id = Column(Integer, ForeignKey("branches.id"))
    content = Column(Text, nullable=False)
    is_anonymous = Column(Boolean, default=False, nullable=False)
    timestamp = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))

    def __repr__(self):
        return f"<PrayerRequest {self.id}>"

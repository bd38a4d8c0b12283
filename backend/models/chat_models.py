"""
Group chat models for ChurchOS.
"""

from datetime import datetime, timezone
from sqlalchemy import Column, Integer, DateTime, Text, ForeignKey, Index
from .database_config import Base


class Message(Base):
    __tablename__ = "messages"
    __table_args__ = (Index("ix_messages_group_timestamp", "group_id", "timestamp"),)

    id = Column(Integer, primary_key=True, index=True)
    group_id = Column(Integer, ForeignKey("groups.id"), nullable=False)
    sender_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    content = Column(Text, nullable=False)
    timestamp = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))

    def __repr__(self):
        return f"<Message {self.id} in group {self.group_id}>"

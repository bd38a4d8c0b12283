"""
Append-only message store backed by the relational database.
"""

import logging
from datetime import timezone
from sqlalchemy.exc import SQLAlchemyError
from backend.models.models import get_db, Message, User
from .errors import StoreError


logger = logging.getLogger(__name__)


def _isoformat(timestamp):
    if timestamp is None:
        return None
    # timestamptz comes back in the connection time zone; SQLite drops the
    # zone entirely. Values are always written in UTC.
    if timestamp.tzinfo is None:
        return timestamp.replace(tzinfo=timezone.utc).isoformat()
    return timestamp.astimezone(timezone.utc).isoformat()


def serialize_message(message, sender_name):
    return {
        "id": message.id,
        "group_id": message.group_id,
        "sender_id": message.sender_id,
        "sender_name": sender_name,
        "content": message.content,
        "timestamp": _isoformat(message.timestamp),
    }


class MessageStore:
    """Persists chat messages and reads them back in group order.

    Identity and timestamp are always assigned here, never by the caller.
    Messages are never updated or deleted.
    """

    def insert(self, group_id, sender_id, content):
        """Insert a message and return ``{"id", "timestamp"}``.

        Raises:
            StoreError: on constraint violations (unknown group or sender)
                or when the database is unavailable.
        """
        try:
            with get_db() as db:
                message = Message(group_id=group_id, sender_id=sender_id, content=content)
                db.add(message)
                db.flush()
                message_id = message.id
                timestamp = message.timestamp
        except SQLAlchemyError as e:
            logger.warning("Message insert failed for group %s sender %s: %s", group_id, sender_id, e)
            raise StoreError("Failed to store message") from e

        return {"id": message_id, "timestamp": _isoformat(timestamp)}

    def select_by_group(self, group_id):
        """All messages for ``group_id``, oldest first, ties broken by id."""
        with get_db() as db:
            rows = (
                db.query(Message, User.name)
                .join(User, Message.sender_id == User.id)
                .filter(Message.group_id == group_id)
                .order_by(Message.timestamp.asc(), Message.id.asc())
                .all()
            )
            return [serialize_message(message, sender_name) for message, sender_name in rows]

    def select_by_id(self, message_id):
        with get_db() as db:
            row = (
                db.query(Message, User.name)
                .join(User, Message.sender_id == User.id)
                .filter(Message.id == message_id)
                .first()
            )
            if row is None:
                return None
            message, sender_name = row
            return serialize_message(message, sender_name)

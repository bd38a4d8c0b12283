"""
Message ingress: persist a posted message, then fan it out to the group.
"""

import logging
import threading
from .errors import ValidationError


logger = logging.getLogger(__name__)

NEW_MESSAGE = "NEW_MESSAGE"


def new_message_event(message):
    return {"type": NEW_MESSAGE, "message": message}


def require_id(value, field):
    """Coerce a posted reference to a positive int.

    Accepts an int or a string of digits. Floats, booleans and anything
    else are rejected rather than truncated.
    """
    if value is None or value == "":
        raise ValidationError(f"{field} is required")
    if isinstance(value, str) and value.isascii() and value.isdigit():
        value = int(value)
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ValidationError(f"{field} must be a positive integer")
    return value


class MessageIngress:
    """Single entry point for new chat messages.

    The store write always completes, and the persisted row is read back,
    before the broadcast starts, so a live push never carries an id that
    history cannot return. Writes and their broadcasts are serialized so
    pushes for a group leave in store order.
    """

    def __init__(self, store, dispatcher):
        self.store = store
        self.dispatcher = dispatcher
        self._lock = threading.Lock()

    def post_message(self, group_id, sender_id, content):
        """Store and broadcast a message, returning its assigned id.

        Raises:
            ValidationError: content is blank or a reference is missing.
            StoreError: the insert failed; nothing is broadcast.
        """
        group_id = require_id(group_id, "group_id")
        sender_id = require_id(sender_id, "sender_id")
        if not isinstance(content, str) or not content.strip():
            raise ValidationError("Message cannot be empty")
        content = content.strip()

        with self._lock:
            inserted = self.store.insert(group_id, sender_id, content)
            message_id = inserted["id"]
            message = self.store.select_by_id(message_id)

            try:
                delivered = self.dispatcher.broadcast(group_id, new_message_event(message))
                logger.debug("Message %s delivered to %s connection(s) in group %s", message_id, delivered, group_id)
            except Exception:
                # The row is already durable; clients catch up from history
                logger.exception("Broadcast failed for message %s in group %s", message_id, group_id)

        return message_id

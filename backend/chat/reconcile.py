"""
Client-side reconciliation of a group's message list with live pushes.

A client loads history once, then applies every pushed event. The message
id is the only deduplication key, so a client receiving its own broadcast,
or a push for a message it already has from history, keeps a single copy.
Nothing is reordered on receipt; after a reconnect the client reloads
history instead of trusting the live stream to fill gaps.
"""

from .ingress import NEW_MESSAGE


def merge_message(messages, message):
    """Return ``messages`` with ``message`` appended unless its id is already present"""
    if any(existing["id"] == message["id"] for existing in messages):
        return messages
    return messages + [message]


class GroupChatView:
    """Ordered local view of one group's messages"""

    def __init__(self, group_id, messages=None):
        self.group_id = group_id
        self.messages = []
        self._seen = set()
        if messages:
            self.load_history(messages)

    def load_history(self, messages):
        """Replace the view with a freshly fetched history"""
        self.messages = []
        self._seen = set()
        for message in messages:
            self._append(message)

    def apply_event(self, event):
        """Apply one pushed event. Returns True if the view changed."""
        if not event or event.get("type") != NEW_MESSAGE:
            return False
        message = event.get("message") or {}
        if message.get("group_id") != self.group_id:
            return False
        return self._append(message)

    def _append(self, message):
        if message["id"] in self._seen:
            return False
        self._seen.add(message["id"])
        self.messages.append(message)
        return True

    @property
    def message_ids(self):
        return [message["id"] for message in self.messages]

"""
Fan-out of chat events to every live connection of a group.
"""

import logging


logger = logging.getLogger(__name__)


class SocketIOConnection:
    """Handle for one Socket.IO client, keyed by its sid"""

    def __init__(self, socketio, sid, namespace="/"):
        self.socketio = socketio
        self.sid = sid
        self.namespace = namespace

    def is_open(self):
        return self.socketio.server.manager.is_connected(self.sid, self.namespace)

    def send(self, event):
        self.socketio.emit("message", event, to=self.sid, namespace=self.namespace)

    def __eq__(self, other):
        if not isinstance(other, SocketIOConnection):
            return NotImplemented
        return (self.sid, self.namespace) == (other.sid, other.namespace)

    def __hash__(self):
        return hash((self.sid, self.namespace))

    def __repr__(self):
        return f"<SocketIOConnection {self.sid}>"


class BroadcastDispatcher:
    """Delivers one event to all open connections attached to a group.

    Delivery is best effort: connections that are not open are skipped and a
    failing send is logged and dropped without affecting the others. The
    message store, not the live channel, is the durable record.
    """

    def __init__(self, registry):
        self.registry = registry

    def broadcast(self, group_id, event):
        """Send ``event`` to the group and return how many connections got it"""
        delivered = 0
        for connection in self.registry.connections_for(group_id):
            try:
                if not connection.is_open():
                    logger.debug("Skipping closed connection %s in group %s", connection, group_id)
                    continue
                connection.send(event)
                delivered += 1
            except Exception as e:
                logger.warning("Dropped push to %s in group %s: %s", connection, group_id, e)
        return delivered

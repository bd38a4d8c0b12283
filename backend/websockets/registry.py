"""
Group channel registry: which live connections want pushes for which group.
"""

import logging
import threading


logger = logging.getLogger(__name__)


def parse_group_id(raw):
    """Parse a group id from a query parameter. Anything but a positive integer gives None."""
    if raw is None or isinstance(raw, bool):
        return None
    try:
        group_id = int(raw)
    except (TypeError, ValueError):
        return None
    return group_id if group_id > 0 else None


class ChannelRegistry:
    """Thread-safe map from group id to the set of attached connections.

    A connection belongs to at most one group at a time. Connections must be
    hashable; the dispatcher only ever sees snapshots returned by
    ``connections_for`` so a detach during a broadcast is harmless.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._channels = {}
        self._group_of = {}

    def attach(self, group_id, connection):
        """Register ``connection`` for ``group_id``. Returns False if the id is invalid."""
        group_id = parse_group_id(group_id)
        if group_id is None:
            return False

        with self._lock:
            previous = self._group_of.get(connection)
            if previous is not None and previous != group_id:
                self._discard(previous, connection)
            self._channels.setdefault(group_id, set()).add(connection)
            self._group_of[connection] = group_id
            logger.info("Attached %s to group %s (%d connected)", connection, group_id, len(self._channels[group_id]))
        return True

    def detach(self, group_id, connection):
        """Remove ``connection`` from ``group_id``. Detaching an absent connection is a no-op."""
        group_id = parse_group_id(group_id)
        if group_id is None:
            return False

        with self._lock:
            if self._group_of.get(connection) != group_id:
                return False
            self._discard(group_id, connection)
            del self._group_of[connection]
            logger.info("Detached %s from group %s", connection, group_id)
        return True

    def connections_for(self, group_id):
        """Snapshot of the connections attached to ``group_id``"""
        with self._lock:
            return frozenset(self._channels.get(group_id, ()))

    def group_of(self, connection):
        with self._lock:
            return self._group_of.get(connection)

    def _discard(self, group_id, connection):
        connections = self._channels.get(group_id)
        if connections is None:
            return
        connections.discard(connection)
        if not connections:
            del self._channels[group_id]

"""
Live group channels for ChurchOS.
"""

from .registry import ChannelRegistry, parse_group_id
from .broadcast import BroadcastDispatcher, SocketIOConnection
from .handlers import init_socketio

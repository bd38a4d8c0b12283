"""
Group chat core for ChurchOS: message store, membership checks,
message ingress and client-side reconciliation.
"""

from .errors import ChatError, ValidationError, StoreError
from .store import MessageStore, serialize_message
from .membership import MembershipAuthority, ELEVATED_ROLES
from .ingress import MessageIngress, require_id
from .history import read_history
from .reconcile import GroupChatView, merge_message

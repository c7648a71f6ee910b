"""
Social graph services

Connections, privacy, suggestions, notifications, content and moderation.
Every service takes the request's SQLAlchemy Session in its constructor.
"""
from .user_directory import UserDirectory
from .connection_graph import ConnectionGraph, derive_connection_state
from .privacy import PrivacyGate, is_visible
from .suggestions import SuggestionEngine
from .notifications import NotificationFanout, NotificationInbox, extract_mentions
from .content import ContentService
from .profiles import ProfileService
from .admin import AdminService, average_growth_rate

__all__ = [
    'UserDirectory',
    'ConnectionGraph',
    'derive_connection_state',
    'PrivacyGate',
    'is_visible',
    'SuggestionEngine',
    'NotificationFanout',
    'NotificationInbox',
    'extract_mentions',
    'ContentService',
    'ProfileService',
    'AdminService',
    'average_growth_rate',
]

"""
Enums

Defines the enumerated values stored on users, settings, content and notifications.
"""
from enum import Enum


class Role(str, Enum):
    """Account role."""
    USER = "USER"
    ADMIN = "ADMIN"


class PrivacyOption(str, Enum):
    """Who may see a class of a user's content."""
    PUBLIC = "public"
    FOLLOWERS = "followers"  # Accepted connections only
    PRIVATE = "private"  # Owner only


class Theme(str, Enum):
    LIGHT = "light"
    DARK = "dark"


class ContentStatus(str, Enum):
    """Lifecycle status of posts and comments."""
    ACTIVE = "ACTIVE"
    REPORTED = "REPORTED"
    ARCHIVED = "ARCHIVED"


class ConnectionState(str, Enum):
    """Relationship of one user towards another, from the first user's side."""
    ADD = "ADD"  # No relationship
    REQUEST = "REQUEST"  # Outgoing request awaiting the other party
    ACCEPT = "ACCEPT"  # Incoming request awaiting this user
    CONNECTED = "CONNECTED"


class NotificationType(str, Enum):
    POST_LIKED = "POST_LIKED"
    POST_COMMENTED = "POST_COMMENTED"
    MENTIONED_IN_COMMENT = "MENTIONED_IN_COMMENT"
    POST_REPORTED = "POST_REPORTED"
    COMMENT_REPORTED = "COMMENT_REPORTED"
    POST_ARCHIVED = "POST_ARCHIVED"
    POST_APPROVED = "POST_APPROVED"
    COMMENT_ARCHIVED = "COMMENT_ARCHIVED"
    COMMENT_APPROVED = "COMMENT_APPROVED"
    NEW_FOLLOWER = "NEW_FOLLOWER"
    SYSTEM_ANNOUNCEMENT = "SYSTEM_ANNOUNCEMENT"
    ACCOUNT_WARNING = "ACCOUNT_WARNING"

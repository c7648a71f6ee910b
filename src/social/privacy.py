"""
Privacy Filter

Decides whether a viewer may see a class of content owned by another user.

Each user has three privacy fields, one per content class:
- posts_privacy        -> the user's posts
- connections_privacy  -> the user's connection list
- details_privacy      -> profile details (email, bio, gender)
"""
from typing import Optional

from model.enums import PrivacyOption
from src.social.connection_graph import ConnectionGraph
from src.social.user_directory import UserDirectory


def is_visible(
    owner_id: int,
    viewer_id: Optional[int],
    setting: Optional[PrivacyOption],
    viewer_is_connected: bool,
) -> bool:
    """
    Visibility rule for one piece of content.

    Args:
        owner_id: Owner of the content
        viewer_id: Requesting user, or None for an anonymous viewer
        setting: Owner's privacy value for this content class (None means public)
        viewer_is_connected: Accepted connection between viewer and owner, either direction

    Returns:
        True if the viewer may see the content
    """
    if viewer_id is not None and owner_id == viewer_id:
        return True

    setting = PrivacyOption(setting) if setting is not None else PrivacyOption.PUBLIC
    if setting == PrivacyOption.PUBLIC:
        return True
    if setting == PrivacyOption.FOLLOWERS:
        return viewer_id is not None and viewer_is_connected
    return False


class PrivacyGate:
    """Resolves owner settings and connection status from the store, then applies is_visible()."""

    def __init__(self, directory: UserDirectory, graph: ConnectionGraph):
        self.directory = directory
        self.graph = graph

    def can_view(self, owner_id: int, viewer_id: Optional[int], field: str) -> bool:
        setting = self.directory.privacy_for(owner_id, field)

        # Connection lookup only matters for followers-only content
        connected = False
        if setting == PrivacyOption.FOLLOWERS and viewer_id is not None and viewer_id != owner_id:
            connected = self.graph.is_connected(owner_id, viewer_id)

        return is_visible(owner_id, viewer_id, setting, connected)

    def can_view_posts(self, owner_id: int, viewer_id: Optional[int]) -> bool:
        return self.can_view(owner_id, viewer_id, "posts_privacy")

    def can_view_connections(self, owner_id: int, viewer_id: Optional[int]) -> bool:
        return self.can_view(owner_id, viewer_id, "connections_privacy")

    def can_view_details(self, owner_id: int, viewer_id: Optional[int]) -> bool:
        return self.can_view(owner_id, viewer_id, "details_privacy")

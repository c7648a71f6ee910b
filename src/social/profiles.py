"""
Profile Service

A user's profile as seen by a given viewer. Identity and counts are always
shown; details, posts and connections each follow the owner's privacy setting.
"""
from typing import Optional

from sqlalchemy.orm import Session

from schema.user import ProfileOut
from src.social.connection_graph import ConnectionGraph
from src.social.content import ContentService
from src.social.privacy import PrivacyGate
from src.social.user_directory import UserDirectory


class ProfileService:

    def __init__(self, db: Session):
        self.directory = UserDirectory(db)
        self.graph = ConnectionGraph(db)
        self.privacy = PrivacyGate(self.directory, self.graph)
        self.content = ContentService(db)

    def get_profile(self, username: str, viewer_id: Optional[int]) -> ProfileOut:
        owner = self.directory.get_user_by_username(username)
        card = self.graph.build_user_cards([owner])[owner.id]

        profile = ProfileOut(
            id=owner.id,
            username=owner.username,
            full_name=owner.full_name,
            profile_image=owner.profile_image,
            created_at=owner.created_at,
            connection_count=card.connection_count,
            posts_count=card.posts_count,
        )
        if viewer_id is not None:
            profile.connection_state = self.graph.get_connection_state(viewer_id, owner.id)

        if self.privacy.can_view_details(owner.id, viewer_id):
            profile.email = owner.email
            profile.bio = owner.bio
            profile.gender = owner.gender

        if self.privacy.can_view_posts(owner.id, viewer_id):
            profile.posts = self.content.get_user_posts(owner.id, viewer_id)

        if self.privacy.can_view_connections(owner.id, viewer_id):
            profile.connections = self.graph.get_connections(owner.id)

        return profile

"""
User Directory

Lookups of user identity, profile fields and settings.
"""
import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from config.settings import DEFAULT_LANGUAGE, DEFAULT_THEME
from model.enums import PrivacyOption, Role
from model.user import Users, UserSettings
from src.errors import BadRequestError, NotFoundError

logger = logging.getLogger(__name__)

PRIVACY_FIELDS = ("details_privacy", "connections_privacy", "posts_privacy")
SETTINGS_FIELDS = ("theme", "language") + PRIVACY_FIELDS
PROFILE_FIELDS = ("full_name", "bio", "gender", "profile_image")


def search_clause(search: str):
    """Case-insensitive substring match on full name or username."""
    needle = search.lower()
    return or_(
        func.lower(Users.full_name).contains(needle, autoescape=True),
        func.lower(Users.username).contains(needle, autoescape=True),
    )


class UserDirectory:
    """Read access to users and their settings; lazy creation of settings."""

    def __init__(self, db: Session):
        self.db = db

    # -----------------------------------------------------------------
    # Users
    # -----------------------------------------------------------------

    def get_user(self, user_id: int) -> Users:
        user = self.db.get(Users, user_id)
        if not user:
            raise NotFoundError(f"User {user_id} not found")
        return user

    def get_user_by_username(self, username: str) -> Users:
        user = self.db.scalar(select(Users).where(Users.username == username))
        if not user:
            raise NotFoundError(f"User {username} not found")
        return user

    def find_by_usernames(self, usernames: List[str]) -> List[Users]:
        if not usernames:
            return []
        return list(self.db.scalars(select(Users).where(Users.username.in_(usernames))))

    def search_users(self, search: Optional[str] = None) -> List[Users]:
        query = select(Users).order_by(Users.id)
        if search:
            query = query.where(search_clause(search))
        return list(self.db.scalars(query))

    def get_users(self, user_ids: Optional[List[int]] = None) -> List[Users]:
        query = select(Users).order_by(Users.id)
        if user_ids is not None:
            query = query.where(Users.id.in_(user_ids))
        return list(self.db.scalars(query))

    def get_admins(self) -> List[Users]:
        return list(self.db.scalars(select(Users).where(Users.role == Role.ADMIN).order_by(Users.id)))

    def update_profile(self, user_id: int, changes: Dict[str, Any]) -> Users:
        user = self.get_user(user_id)
        for field, value in changes.items():
            if field in PROFILE_FIELDS and value is not None:
                setattr(user, field, value)
        self.db.commit()
        self.db.refresh(user)
        logger.info(f"Updated profile of user {user_id}: {sorted(changes)}")
        return user

    # -----------------------------------------------------------------
    # Settings
    # -----------------------------------------------------------------

    def _find_settings(self, user_id: int) -> Optional[UserSettings]:
        return self.db.scalar(select(UserSettings).where(UserSettings.user_id == user_id))

    def get_settings(self, user_id: int) -> UserSettings:
        """Return the user's settings, creating the defaults if absent."""
        settings = self._find_settings(user_id)
        if settings:
            return settings
        return self.upsert_settings(user_id, {})

    def upsert_settings(self, user_id: int, changes: Dict[str, Any]) -> UserSettings:
        self.get_user(user_id)
        settings = self._find_settings(user_id)
        if settings is None:
            settings = UserSettings(
                user_id=user_id,
                theme=DEFAULT_THEME,
                language=DEFAULT_LANGUAGE,
                details_privacy=PrivacyOption.PUBLIC,
                connections_privacy=PrivacyOption.PUBLIC,
                posts_privacy=PrivacyOption.PUBLIC,
            )
            self.db.add(settings)
        for field, value in changes.items():
            if field in SETTINGS_FIELDS and value is not None:
                setattr(settings, field, value)
        try:
            self.db.commit()
        except IntegrityError:
            # A concurrent request created the row first; apply on top of it.
            self.db.rollback()
            settings = self._find_settings(user_id)
            for field, value in changes.items():
                if field in SETTINGS_FIELDS and value is not None:
                    setattr(settings, field, value)
            self.db.commit()
        self.db.refresh(settings)
        return settings

    def privacy_for(self, user_id: int, field: str) -> PrivacyOption:
        """
        Return one privacy field of the owner's settings.

        Owners without a settings row are public; the row is not created here.
        """
        if field not in PRIVACY_FIELDS:
            raise BadRequestError(f"Unknown privacy field: {field}")
        settings = self._find_settings(user_id)
        if settings is None or getattr(settings, field) is None:
            return PrivacyOption.PUBLIC
        return PrivacyOption(getattr(settings, field))

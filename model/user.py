# model/user.py
from sqlalchemy import (
    Column, Integer, String, Text, TIMESTAMP, ForeignKey, Index
)
from sqlalchemy.orm import relationship
from sqlalchemy import Enum as SAEnum
from sqlalchemy.sql import func

from model.base import Base
from model.enums import Role, PrivacyOption, Theme


def _enum_values(enum_cls):
    return [member.value for member in enum_cls]


class Users(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(64), unique=True, nullable=False, index=True)
    full_name = Column(String(160), nullable=False)
    email = Column(String(255), unique=True, nullable=False)
    profile_image = Column(String(512), nullable=False, default="")
    bio = Column(Text, nullable=True)
    gender = Column(String(32), nullable=True)
    role = Column(
        SAEnum(Role, name="user_role", values_callable=_enum_values),
        nullable=False,
        default=Role.USER,
    )
    created_at = Column(TIMESTAMP, server_default=func.current_timestamp(), nullable=False)
    updated_at = Column(TIMESTAMP, server_default=func.current_timestamp(), onupdate=func.current_timestamp(), nullable=False)

    __table_args__ = (
        Index("ix_users_role", "role"),
    )

    settings = relationship("UserSettings", uselist=False, back_populates="user", passive_deletes=True)
    posts = relationship("Post", back_populates="user", passive_deletes=True)

    def __repr__(self):
        return f"<Users(id={self.id}, username={self.username!r}, role={self.role})>"


class UserSettings(Base):
    """
    Per-user preferences and privacy policy.

    Created lazily the first time a user's settings are read; every privacy
    field defaults to public.
    """
    __tablename__ = "settings"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False)
    theme = Column(String(16), nullable=False, default=Theme.DARK.value)
    language = Column(String(8), nullable=False, default="en")
    details_privacy = Column(
        SAEnum(PrivacyOption, name="privacy_option", values_callable=_enum_values),
        nullable=False,
        default=PrivacyOption.PUBLIC,
    )
    connections_privacy = Column(
        SAEnum(PrivacyOption, name="privacy_option", values_callable=_enum_values),
        nullable=False,
        default=PrivacyOption.PUBLIC,
    )
    posts_privacy = Column(
        SAEnum(PrivacyOption, name="privacy_option", values_callable=_enum_values),
        nullable=False,
        default=PrivacyOption.PUBLIC,
    )

    user = relationship("Users", back_populates="settings")

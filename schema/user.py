from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field

from model.enums import ConnectionState, PrivacyOption, Role, Theme
from schema.connection import ConnectionOut
from schema.social import PostOut


class UserBase(BaseModel):
    id: int
    username: str
    full_name: str
    profile_image: str = ""


class UserOut(UserBase):
    email: str
    bio: Optional[str] = None
    gender: Optional[str] = None
    role: Role = Role.USER
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class UserUpdate(BaseModel):
    full_name: Optional[str] = Field(default=None, min_length=1, max_length=160)
    bio: Optional[str] = Field(default=None, max_length=2000)
    gender: Optional[str] = Field(default=None, max_length=32)
    profile_image: Optional[str] = Field(default=None, max_length=512)


# ------------------------------------------------------------
# Settings
# ------------------------------------------------------------
class SettingsOut(BaseModel):
    user_id: int
    theme: Theme
    language: str
    details_privacy: PrivacyOption
    connections_privacy: PrivacyOption
    posts_privacy: PrivacyOption

    model_config = ConfigDict(from_attributes=True)


class SettingsUpdate(BaseModel):
    theme: Optional[Theme] = None
    language: Optional[str] = Field(default=None, min_length=2, max_length=8)
    details_privacy: Optional[PrivacyOption] = None
    connections_privacy: Optional[PrivacyOption] = None
    posts_privacy: Optional[PrivacyOption] = None


# ------------------------------------------------------------
# Profile as seen by another user
# ------------------------------------------------------------
class ProfileOut(UserBase):
    """Fields a viewer may not see are left as None."""
    email: Optional[str] = None
    bio: Optional[str] = None
    gender: Optional[str] = None
    created_at: Optional[datetime] = None
    connection_count: int = 0
    posts_count: int = 0
    connection_state: ConnectionState = ConnectionState.ADD
    posts: Optional[List[PostOut]] = None
    connections: Optional[List[ConnectionOut]] = None

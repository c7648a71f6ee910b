from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict

from model.enums import ConnectionState


# ------------------------------------------------------------
# User projections
# ------------------------------------------------------------
class UserDetails(BaseModel):
    """Identity fields shown next to any piece of content."""
    id: int
    username: str
    full_name: str
    profile_image: Optional[str] = ""

    model_config = ConfigDict(from_attributes=True)


class ConnectionUser(UserDetails):
    """User card in connection lists and suggestions."""
    connection_count: int = 0
    posts_count: int = 0


# ------------------------------------------------------------
# Connection results
# ------------------------------------------------------------
class ConnectionOut(BaseModel):
    user: ConnectionUser
    user_id: int
    pending: bool


class ConnectionRequestOut(BaseModel):
    user: UserDetails
    requester_id: int
    target_id: int


class ConnectionStateOut(BaseModel):
    state: ConnectionState
    user_id: int
    other_id: int


class SuggestionOut(BaseModel):
    user: ConnectionUser
    connection_state: ConnectionState


__all__ = [
    "UserDetails",
    "ConnectionUser",
    "ConnectionOut",
    "ConnectionRequestOut",
    "ConnectionStateOut",
    "SuggestionOut",
]

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from model.enums import ContentStatus
from schema.connection import UserDetails


# ------------------------------------------------------------
# Posts
# ------------------------------------------------------------
class PostCreate(BaseModel):
    title: str = Field(default="", max_length=255)
    content: str = Field(min_length=1, max_length=10000)
    image: Optional[str] = None


class PostUpdate(BaseModel):
    title: Optional[str] = Field(default=None, max_length=255)
    content: Optional[str] = Field(default=None, min_length=1, max_length=10000)
    image: Optional[str] = None


# ------------------------------------------------------------
# Comments
# ------------------------------------------------------------
class CommentCreate(BaseModel):
    text: str = Field(min_length=1, max_length=5000)


class CommentOut(BaseModel):
    id: int
    text: str
    author: str
    user_id: int
    post_id: int
    status: ContentStatus
    is_edited: bool = False
    created_at: datetime
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


# ------------------------------------------------------------
# Likes
# ------------------------------------------------------------
class LikeOut(BaseModel):
    id: int
    user_id: int
    post_id: int

    model_config = ConfigDict(from_attributes=True)


class LikeStatusOut(BaseModel):
    post_id: int
    liked: bool


# ------------------------------------------------------------
# Post responses
# ------------------------------------------------------------
class PostOut(BaseModel):
    id: int
    title: str
    content: str
    image: Optional[str] = None
    status: ContentStatus
    created_at: datetime
    updated_at: Optional[datetime] = None
    user_id: int
    user: UserDetails
    comments: List[CommentOut] = []
    likes: List[LikeOut] = []

    model_config = ConfigDict(from_attributes=True)


# ------------------------------------------------------------
# Reports
# ------------------------------------------------------------
class ReportCreate(BaseModel):
    reason: str = Field(min_length=1, max_length=500)


class ReportOut(BaseModel):
    id: int
    user_id: int
    post_id: int
    comment_id: Optional[int] = None
    reason: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


__all__ = [
    "PostCreate",
    "PostUpdate",
    "PostOut",
    "CommentCreate",
    "CommentOut",
    "LikeOut",
    "LikeStatusOut",
    "ReportCreate",
    "ReportOut",
]

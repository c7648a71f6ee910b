# social/models.py
from __future__ import annotations

from sqlalchemy import (
    Column,
    Integer,
    String,
    Text,
    Boolean,
    TIMESTAMP,
    ForeignKey,
    Index,
    UniqueConstraint,
)
from sqlalchemy import Enum as SAEnum
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from model.base import Base
from model.enums import ContentStatus


def _status_column():
    return Column(
        SAEnum(ContentStatus, name="content_status", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=ContentStatus.ACTIVE,
        index=True,
    )


# ---------------------------------------------------------------------------
# Posts: owned by one user; status drives moderation visibility.
# ---------------------------------------------------------------------------
class Post(Base):
    __tablename__ = "posts"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(255), nullable=False, default="")
    content = Column(Text, nullable=False)
    image = Column(String(512), nullable=True)
    status = _status_column()
    created_at = Column(TIMESTAMP, nullable=False, server_default=func.current_timestamp())
    updated_at = Column(TIMESTAMP, nullable=True, onupdate=func.current_timestamp())

    user = relationship("Users", back_populates="posts")
    comments = relationship("Comment", back_populates="post", cascade="all, delete-orphan")
    likes = relationship("Like", back_populates="post", cascade="all, delete-orphan")
    reports = relationship("Report", back_populates="post", cascade="all, delete-orphan")

    __table_args__ = (
        Index("idx_posts_user", "user_id", "created_at"),
    )


# ---------------------------------------------------------------------------
# Comments: flat discussion on a post; `author` keeps the display name.
# ---------------------------------------------------------------------------
class Comment(Base):
    __tablename__ = "comments"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    post_id = Column(Integer, ForeignKey("posts.id", ondelete="CASCADE"), nullable=False)
    text = Column(Text, nullable=False)
    author = Column(String(160), nullable=False, default="")
    status = _status_column()
    is_edited = Column(Boolean, nullable=False, default=False)
    created_at = Column(TIMESTAMP, nullable=False, server_default=func.current_timestamp())
    updated_at = Column(TIMESTAMP, nullable=True, onupdate=func.current_timestamp())

    post = relationship("Post", back_populates="comments")
    user = relationship("Users")
    reports = relationship("Report", back_populates="comment", cascade="all, delete-orphan")

    __table_args__ = (
        Index("idx_comments_post", "post_id", "created_at"),
        Index("idx_comments_user", "user_id", "created_at"),
    )


# ---------------------------------------------------------------------------
# Likes: one per (user, post).
# ---------------------------------------------------------------------------
class Like(Base):
    __tablename__ = "likes"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    post_id = Column(Integer, ForeignKey("posts.id", ondelete="CASCADE"), nullable=False)
    created_at = Column(TIMESTAMP, server_default=func.current_timestamp(), nullable=False)

    post = relationship("Post", back_populates="likes")

    __table_args__ = (
        UniqueConstraint("user_id", "post_id", name="uq_like_user_post"),
        Index("idx_likes_post", "post_id", "created_at"),
    )


# ---------------------------------------------------------------------------
# Reports: against a post, or a comment on that post (comment_id set).
# ---------------------------------------------------------------------------
class Report(Base):
    __tablename__ = "reports"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    post_id = Column(Integer, ForeignKey("posts.id", ondelete="CASCADE"), nullable=False, index=True)
    comment_id = Column(Integer, ForeignKey("comments.id", ondelete="CASCADE"), nullable=True, index=True)
    reason = Column(String(500), nullable=False)
    created_at = Column(TIMESTAMP, server_default=func.current_timestamp(), nullable=False)

    reporter = relationship("Users")
    post = relationship("Post", back_populates="reports")
    comment = relationship("Comment", back_populates="reports")


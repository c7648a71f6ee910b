# model/connection.py
"""
Connection model for tracking user-to-user follow relationships.
A pending row is a follow request; an accepted row is an active connection.
"""

from sqlalchemy import Column, Integer, Boolean, TIMESTAMP, ForeignKey, CheckConstraint, UniqueConstraint
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship

from model.base import Base


class Connection(Base):
    """
    Directed follow edge between two users.

    Example:
        - User A (id=1) asks to follow User B (id=2)
          -> follower_id=1, following_id=2, pending=True
        - B accepts -> pending=False
    """
    __tablename__ = "connections"

    # Primary key
    id = Column(Integer, primary_key=True, autoincrement=True)

    # Foreign keys to users table
    follower_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="User who requested the connection"
    )

    following_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
        comment="User who has to accept the connection"
    )

    pending = Column(Boolean, nullable=False, default=True)

    # Timestamp
    created_at = Column(
        TIMESTAMP,
        server_default=func.current_timestamp(),
        nullable=False
    )

    follower = relationship("Users", foreign_keys=[follower_id])
    following = relationship("Users", foreign_keys=[following_id])

    # Constraints
    __table_args__ = (
        # A user can only request another user once
        UniqueConstraint(
            'follower_id',
            'following_id',
            name='uq_connection_follower_following'
        ),
        # Users cannot connect with themselves
        CheckConstraint(
            'follower_id != following_id',
            name='ck_no_self_connection'
        ),
    )

    def __repr__(self):
        return (
            f"<Connection(id={self.id}, follower={self.follower_id}, "
            f"following={self.following_id}, pending={self.pending})>"
        )

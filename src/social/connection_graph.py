"""
Connection Graph

Relationship queries over the directed Connection edge set.

A relationship between A and B is stored as a single row in either ordering,
(A -> B) or (B -> A). Every lookup here searches both orderings; callers never
query the connections table directly.
"""
import logging
from typing import Dict, Iterable, List, Optional, Set, TYPE_CHECKING

from sqlalchemy import and_, case, func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from config.settings import DEFAULT_CONNECTIONS_LIMIT
from model.connection import Connection
from model.enums import ConnectionState, ContentStatus
from model.social.models import Post
from model.user import Users
from schema.connection import ConnectionOut, ConnectionRequestOut, ConnectionUser, UserDetails
from src.errors import ConflictError, NotFoundError
from src.social.user_directory import search_clause

if TYPE_CHECKING:
    from src.social.notifications import NotificationFanout

logger = logging.getLogger(__name__)


def derive_connection_state(connection: Optional[Connection], user_id: int) -> ConnectionState:
    """Connection state of `user_id` given the row linking it to another user."""
    if connection is None or user_id not in (connection.follower_id, connection.following_id):
        return ConnectionState.ADD
    if not connection.pending:
        return ConnectionState.CONNECTED
    if connection.following_id == user_id:
        return ConnectionState.ACCEPT
    return ConnectionState.REQUEST


def _touching(user_id: int):
    return or_(Connection.follower_id == user_id, Connection.following_id == user_id)


def _between(user_id: int, other_id: int):
    return or_(
        and_(Connection.follower_id == user_id, Connection.following_id == other_id),
        and_(Connection.follower_id == other_id, Connection.following_id == user_id),
    )


class ConnectionGraph:
    """Follower/following relationships and the connection state derived from them."""

    def __init__(self, db: Session, fanout: Optional["NotificationFanout"] = None):
        self.db = db
        self.fanout = fanout

    # -----------------------------------------------------------------
    # Lookups
    # -----------------------------------------------------------------

    def find_between(self, user_id: int, other_id: int) -> Optional[Connection]:
        """Row linking the two users in either ordering, if any."""
        return self.db.scalar(select(Connection).where(_between(user_id, other_id)))

    def is_connected(self, user_id: int, other_id: int) -> bool:
        connection = self.find_between(user_id, other_id)
        return connection is not None and not connection.pending

    def touching_user_ids(self, user_id: int) -> Set[int]:
        """Users linked to `user_id` by any row, pending or accepted."""
        rows = self.db.execute(
            select(Connection.follower_id, Connection.following_id).where(_touching(user_id))
        )
        return {following if follower == user_id else follower for follower, following in rows}

    def connected_user_ids(self, user_id: int) -> Set[int]:
        """Users linked to `user_id` by an accepted row."""
        rows = self.db.execute(
            select(Connection.follower_id, Connection.following_id).where(
                _touching(user_id), Connection.pending.is_(False)
            )
        )
        return {following if follower == user_id else follower for follower, following in rows}

    def count_connections(self, user_id: int) -> int:
        return self.db.scalar(
            select(func.count(Connection.id)).where(_touching(user_id), Connection.pending.is_(False))
        ) or 0

    def get_connection_state(self, user_id: int, other_id: int) -> ConnectionState:
        return derive_connection_state(self.find_between(user_id, other_id), user_id)

    # -----------------------------------------------------------------
    # Lists
    # -----------------------------------------------------------------

    def get_connections(
        self,
        user_id: int,
        search: Optional[str] = None,
        limit: int = DEFAULT_CONNECTIONS_LIMIT,
    ) -> List[ConnectionOut]:
        """
        Accepted connections of a user, in either direction.

        Args:
            user_id: User whose connections to list
            search: Optional substring matched against the other user's name/username
            limit: Maximum number of results

        Returns:
            One ConnectionOut per connected user, newest connection first
        """
        other_id = case(
            (Connection.follower_id == user_id, Connection.following_id),
            else_=Connection.follower_id,
        )
        query = (
            select(Connection, Users)
            .join(Users, Users.id == other_id)
            .where(_touching(user_id), Connection.pending.is_(False))
            .order_by(Connection.created_at.desc(), Connection.id.desc())
            .limit(limit)
        )
        if search:
            query = query.where(search_clause(search))

        rows = self.db.execute(query).all()
        cards = self.build_user_cards([user for _, user in rows])

        return [
            ConnectionOut(user=cards[user.id], user_id=user_id, pending=connection.pending)
            for connection, user in rows
        ]

    def get_connection_requests(self, user_id: int) -> List[ConnectionRequestOut]:
        """Pending requests awaiting a decision from `user_id`."""
        rows = self.db.execute(
            select(Connection, Users)
            .join(Users, Users.id == Connection.follower_id)
            .where(Connection.following_id == user_id, Connection.pending.is_(True))
            .order_by(Connection.created_at.desc(), Connection.id.desc())
        ).all()

        return [
            ConnectionRequestOut(
                user=UserDetails.model_validate(requester),
                requester_id=connection.follower_id,
                target_id=connection.following_id,
            )
            for connection, requester in rows
        ]

    def build_user_cards(self, users: Iterable[Users]) -> Dict[int, ConnectionUser]:
        """Attach accepted-connection and non-archived post counts to each user."""
        users = list(users)
        ids = [user.id for user in users]
        if not ids:
            return {}

        connection_counts: Dict[int, int] = {}
        for column in (Connection.follower_id, Connection.following_id):
            rows = self.db.execute(
                select(column, func.count(Connection.id))
                .where(column.in_(ids), Connection.pending.is_(False))
                .group_by(column)
            )
            for uid, count in rows:
                connection_counts[uid] = connection_counts.get(uid, 0) + count

        posts_counts = dict(self.db.execute(
            select(Post.user_id, func.count(Post.id))
            .where(Post.user_id.in_(ids), Post.status != ContentStatus.ARCHIVED)
            .group_by(Post.user_id)
        ).all())

        return {
            user.id: ConnectionUser(
                id=user.id,
                username=user.username,
                full_name=user.full_name,
                profile_image=user.profile_image,
                connection_count=connection_counts.get(user.id, 0),
                posts_count=posts_counts.get(user.id, 0),
            )
            for user in users
        }

    # -----------------------------------------------------------------
    # Mutations
    # -----------------------------------------------------------------

    def request_connection(self, follower_id: int, following_id: int) -> Connection:
        """
        Create a pending follow request from `follower_id` to `following_id`.

        Raises:
            ConflictError: Self-request, or any row already links the pair
            NotFoundError: Either user does not exist
        """
        if follower_id == following_id:
            raise ConflictError("You cannot connect with yourself")

        for uid in (follower_id, following_id):
            if self.db.get(Users, uid) is None:
                raise NotFoundError(f"User {uid} not found")

        if self.find_between(follower_id, following_id) is not None:
            raise ConflictError("A connection between these users already exists")

        connection = Connection(follower_id=follower_id, following_id=following_id, pending=True)
        self.db.add(connection)
        try:
            self.db.commit()
        except IntegrityError:
            # Lost a race against a concurrent request for the same pair
            self.db.rollback()
            raise ConflictError("A connection between these users already exists")

        self.db.refresh(connection)
        logger.info(f"Connection requested: {follower_id} -> {following_id}")
        return connection

    def accept_connection(self, follower_id: int, following_id: int) -> Connection:
        """
        Accept the pending request sent by `follower_id` to `following_id`.

        Raises:
            NotFoundError: No such pending request
        """
        connection = self.db.scalar(
            select(Connection).where(
                Connection.follower_id == follower_id,
                Connection.following_id == following_id,
                Connection.pending.is_(True),
            )
        )
        if connection is None:
            raise NotFoundError("Connection request not found")

        connection.pending = False
        self.db.commit()
        self.db.refresh(connection)
        logger.info(f"Connection accepted: {follower_id} -> {following_id}")

        if self.fanout is not None:
            self.fanout.notify_new_follower(connection)

        return connection

    def remove_connection(self, user_id: int, other_id: int) -> None:
        """
        Delete the row linking the two users, whichever ordering it has.

        Used both for unfollowing and for rejecting a request.

        Raises:
            NotFoundError: The users are not linked
        """
        connection = self.find_between(user_id, other_id)
        if connection is None:
            raise NotFoundError("Connection not found")

        self.db.delete(connection)
        self.db.commit()
        logger.info(f"Connection removed between {user_id} and {other_id}")

"""
Content Service

Posts, comments, likes and reports. Every mutation that concerns another user
commits first and then hands the event to the notification fan-out.
"""
import logging
from typing import Any, Dict, List, Optional, TYPE_CHECKING

from sqlalchemy import func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from config.settings import LATEST_COMMENTS_PER_POST
from model.enums import ContentStatus
from model.social.models import Comment, Like, Post, Report
from schema.connection import UserDetails
from schema.social import CommentOut, LikeOut, PostOut
from src.errors import ConflictError, ForbiddenError, NotFoundError
from src.social.connection_graph import ConnectionGraph
from src.social.privacy import PrivacyGate
from src.social.user_directory import UserDirectory

if TYPE_CHECKING:
    from src.social.notifications import NotificationFanout

logger = logging.getLogger(__name__)

POST_FIELDS = ("title", "content", "image")


def _newest_first(items):
    return sorted(items, key=lambda item: (item.created_at, item.id), reverse=True)


def to_post_out(post: Post, comments_limit: int = LATEST_COMMENTS_PER_POST) -> PostOut:
    """Post with its author, latest non-archived comments and likes."""
    comments = [c for c in post.comments if c.status != ContentStatus.ARCHIVED]
    return PostOut(
        id=post.id,
        title=post.title,
        content=post.content,
        image=post.image,
        status=post.status,
        created_at=post.created_at,
        updated_at=post.updated_at,
        user_id=post.user_id,
        user=UserDetails.model_validate(post.user),
        comments=[CommentOut.model_validate(c) for c in _newest_first(comments)[:comments_limit]],
        likes=[LikeOut.model_validate(like) for like in post.likes],
    )


class ContentService:

    def __init__(self, db: Session, fanout: Optional["NotificationFanout"] = None):
        self.db = db
        self.fanout = fanout
        self.directory = UserDirectory(db)
        self.privacy = PrivacyGate(self.directory, ConnectionGraph(db))

    # -----------------------------------------------------------------
    # Lookups
    # -----------------------------------------------------------------

    def get_post(self, post_id: int) -> Post:
        post = self.db.get(Post, post_id)
        if not post:
            raise NotFoundError(f"Post {post_id} not found")
        return post

    def get_comment(self, comment_id: int) -> Comment:
        comment = self.db.get(Comment, comment_id)
        if not comment:
            raise NotFoundError(f"Comment {comment_id} not found")
        return comment

    def _posts_query(self):
        return (
            select(Post)
            .where(Post.status != ContentStatus.ARCHIVED)
            .options(selectinload(Post.user), selectinload(Post.comments), selectinload(Post.likes))
            .order_by(Post.created_at.desc(), Post.id.desc())
        )

    # -----------------------------------------------------------------
    # Posts
    # -----------------------------------------------------------------

    def create_post(self, user_id: int, title: str, content: str, image: Optional[str] = None) -> Post:
        self.directory.get_user(user_id)
        post = Post(user_id=user_id, title=title or "", content=content, image=image, status=ContentStatus.ACTIVE)
        self.db.add(post)
        self.db.commit()
        self.db.refresh(post)
        logger.info(f"Post {post.id} created by user {user_id}")
        return post

    def update_post(self, user_id: int, post_id: int, changes: Dict[str, Any]) -> Post:
        post = self.get_post(post_id)
        if post.user_id != user_id:
            raise ForbiddenError("You can only edit your own posts")
        for field, value in changes.items():
            if field in POST_FIELDS and value is not None:
                setattr(post, field, value)
        self.db.commit()
        self.db.refresh(post)
        return post

    def delete_post(self, user_id: int, post_id: int, is_admin: bool = False) -> None:
        post = self.get_post(post_id)
        if post.user_id != user_id and not is_admin:
            raise ForbiddenError("You can only delete your own posts")
        self.db.delete(post)
        self.db.commit()
        logger.info(f"Post {post_id} deleted by user {user_id}")

    def get_user_posts(self, owner_id: int, viewer_id: Optional[int]) -> List[PostOut]:
        """Non-archived posts of `owner_id`, or nothing if the viewer may not see them."""
        self.directory.get_user(owner_id)
        if not self.privacy.can_view_posts(owner_id, viewer_id):
            return []
        posts = self.db.scalars(self._posts_query().where(Post.user_id == owner_id))
        return [to_post_out(post) for post in posts]

    def get_feed(self, viewer_id: int, search: Optional[str] = None) -> List[PostOut]:
        """Non-archived posts of every owner whose posts the viewer may see."""
        query = self._posts_query()
        if search:
            needle = search.lower()
            query = query.where(or_(
                func.lower(Post.title).contains(needle, autoescape=True),
                func.lower(Post.content).contains(needle, autoescape=True),
            ))

        visible: Dict[int, bool] = {}
        feed = []
        for post in self.db.scalars(query):
            if post.user_id not in visible:
                visible[post.user_id] = self.privacy.can_view_posts(post.user_id, viewer_id)
            if visible[post.user_id]:
                feed.append(to_post_out(post))
        return feed

    # -----------------------------------------------------------------
    # Likes
    # -----------------------------------------------------------------

    def has_liked(self, user_id: int, post_id: int) -> bool:
        return self.db.scalar(
            select(Like.id).where(Like.user_id == user_id, Like.post_id == post_id)
        ) is not None

    def get_post_likes(self, post_id: int) -> List[Like]:
        self.get_post(post_id)
        return list(self.db.scalars(select(Like).where(Like.post_id == post_id).order_by(Like.id)))

    def like_post(self, user_id: int, post_id: int) -> Like:
        """
        Like a post once.

        Raises:
            NotFoundError: Post or user does not exist
            ConflictError: The user already likes the post
        """
        post = self.get_post(post_id)
        liker = self.directory.get_user(user_id)
        if self.has_liked(user_id, post_id):
            raise ConflictError("You already like this post")

        like = Like(user_id=user_id, post_id=post_id)
        self.db.add(like)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise ConflictError("You already like this post")
        self.db.refresh(like)

        if self.fanout is not None:
            self.fanout.notify_post_liked(post, liker)
        return like

    def unlike_post(self, user_id: int, post_id: int) -> None:
        like = self.db.scalar(select(Like).where(Like.user_id == user_id, Like.post_id == post_id))
        if like is None:
            raise NotFoundError("Like not found")
        self.db.delete(like)
        self.db.commit()

    # -----------------------------------------------------------------
    # Comments
    # -----------------------------------------------------------------

    def get_post_comments(self, post_id: int) -> List[Comment]:
        self.get_post(post_id)
        return list(self.db.scalars(
            select(Comment)
            .where(Comment.post_id == post_id, Comment.status != ContentStatus.ARCHIVED)
            .order_by(Comment.created_at.desc(), Comment.id.desc())
        ))

    def add_comment(self, user_id: int, post_id: int, text: str) -> Comment:
        post = self.get_post(post_id)
        commenter = self.directory.get_user(user_id)

        comment = Comment(
            post_id=post.id,
            user_id=commenter.id,
            text=text,
            author=commenter.full_name,
            status=ContentStatus.ACTIVE,
        )
        self.db.add(comment)
        self.db.commit()
        self.db.refresh(comment)
        logger.info(f"Comment {comment.id} added to post {post_id} by user {user_id}")

        if self.fanout is not None:
            self.fanout.notify_new_comment(post, comment, commenter)
        return comment

    def update_comment(self, user_id: int, comment_id: int, text: str) -> Comment:
        comment = self.get_comment(comment_id)
        if comment.user_id != user_id:
            raise ForbiddenError("You can only edit your own comments")
        comment.text = text
        comment.is_edited = True
        self.db.commit()
        self.db.refresh(comment)
        return comment

    def delete_comment(self, user_id: int, comment_id: int, is_admin: bool = False) -> None:
        """Comment author, post owner or an admin may delete a comment."""
        comment = self.get_comment(comment_id)
        post_owner_id = self.get_post(comment.post_id).user_id
        if user_id not in (comment.user_id, post_owner_id) and not is_admin:
            raise ForbiddenError("You are not allowed to delete this comment")
        self.db.delete(comment)
        self.db.commit()

    # -----------------------------------------------------------------
    # Reports
    # -----------------------------------------------------------------

    def report_post(self, user_id: int, post_id: int, reason: str) -> Report:
        post = self.get_post(post_id)
        self.directory.get_user(user_id)

        report = Report(user_id=user_id, post_id=post.id, comment_id=None, reason=reason)
        self.db.add(report)
        self.db.commit()
        self.db.refresh(report)
        logger.info(f"Post {post_id} reported by user {user_id}")

        if self.fanout is not None:
            self.fanout.notify_post_reported(post, report)
        return report

    def report_comment(self, user_id: int, comment_id: int, reason: str) -> Report:
        comment = self.get_comment(comment_id)
        self.directory.get_user(user_id)

        report = Report(user_id=user_id, post_id=comment.post_id, comment_id=comment.id, reason=reason)
        self.db.add(report)
        self.db.commit()
        self.db.refresh(report)
        logger.info(f"Comment {comment_id} reported by user {user_id}")

        if self.fanout is not None:
            self.fanout.notify_comment_reported(comment, report)
        return report

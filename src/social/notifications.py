"""
Notification Fanout and Inbox

Creates notification records in reaction to social events:
- Post liked / commented / reported / moderated
- Comment mentions, reports and moderation
- New follower (connection accepted)
- System announcements and account warnings

Fan-out runs after the triggering write has been committed and never raises:
a failure is logged and only the notification rows are rolled back.
"""
import logging
import math
import re
from typing import Callable, Iterable, List, Optional

from sqlalchemy import func, select, update
from sqlalchemy.orm import Session

from config.settings import NOTIFICATIONS_PAGE_SIZE, UNREAD_NOTIFICATIONS_LIMIT
from model.connection import Connection
from model.enums import ContentStatus, NotificationType
from model.notification import Notification
from model.social.models import Comment, Post, Report
from model.user import Users
from src.errors import ForbiddenError, InvalidStateError, NotFoundError
from src.social.user_directory import UserDirectory

logger = logging.getLogger(__name__)

MENTION_PATTERN = re.compile(r"@(\w+)")


def extract_mentions(text: Optional[str]) -> List[str]:
    """Distinct @username tokens, in order of first appearance."""
    seen = []
    for token in MENTION_PATTERN.findall(text or ""):
        if token not in seen:
            seen.append(token)
    return seen


class NotificationFanout:
    """
    Service translating social events into Notification rows.

    Notification Types:
    - POST_LIKED, POST_COMMENTED, MENTIONED_IN_COMMENT
    - POST_REPORTED, COMMENT_REPORTED
    - POST_ARCHIVED, POST_APPROVED, COMMENT_ARCHIVED, COMMENT_APPROVED
    - NEW_FOLLOWER, SYSTEM_ANNOUNCEMENT, ACCOUNT_WARNING
    """

    def __init__(self, db: Session):
        self.db = db
        self.directory = UserDirectory(db)

    # -----------------------------------------------------------------
    # Delivery
    # -----------------------------------------------------------------

    @staticmethod
    def build(user_id: int, type: NotificationType, message: str, data: Optional[dict] = None) -> Notification:
        return Notification(user_id=user_id, type=type, message=message, data=data, read=False)

    def _deliver(self, event: str, build: Callable[[], Iterable[Notification]]) -> List[Notification]:
        """Build and store the notifications for one event; log and swallow any failure."""
        try:
            notifications = list(build())
            if not notifications:
                return []
            self.db.add_all(notifications)
            self.db.commit()
            logger.info(f"🔔 {event}: created {len(notifications)} notification(s)")
            return notifications
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to create {event} notifications: {e}", exc_info=True)
            return []

    # -----------------------------------------------------------------
    # Engagement
    # -----------------------------------------------------------------

    def notify_post_liked(self, post: Post, liker: Users) -> List[Notification]:
        def build():
            if post.user_id == liker.id:
                return []
            return [self.build(
                post.user_id,
                NotificationType.POST_LIKED,
                f'{liker.full_name} liked your post "{post.title}"',
                {
                    "post_id": post.id,
                    "post_title": post.title,
                    "liker_id": liker.id,
                    "liker_name": liker.full_name,
                },
            )]

        return self._deliver("post_liked", build)

    def notify_new_comment(self, post: Post, comment: Comment, commenter: Users) -> List[Notification]:
        """
        Notify the post owner and every existing user mentioned in the comment.

        The commenter is never notified. A post owner who is also mentioned
        receives the mention only.
        """
        def build():
            data = {
                "post_id": post.id,
                "post_title": post.title,
                "comment_id": comment.id,
                "commenter_id": commenter.id,
                "commenter_name": commenter.full_name,
            }
            mentioned = [
                user for user in self.directory.find_by_usernames(extract_mentions(comment.text))
                if user.id != commenter.id
            ]
            mentioned_ids = {user.id for user in mentioned}

            notifications = []
            if post.user_id != commenter.id and post.user_id not in mentioned_ids:
                notifications.append(self.build(
                    post.user_id,
                    NotificationType.POST_COMMENTED,
                    f'{commenter.full_name} commented on your post "{post.title}"',
                    data,
                ))
            for user in mentioned:
                notifications.append(self.build(
                    user.id,
                    NotificationType.MENTIONED_IN_COMMENT,
                    f"{commenter.full_name} mentioned you in a comment",
                    data,
                ))
            return notifications

        return self._deliver("new_comment", build)

    def notify_new_follower(self, connection: Connection) -> List[Notification]:
        def build():
            if connection.pending:
                return []
            follower = self.directory.get_user(connection.follower_id)
            return [self.build(
                connection.following_id,
                NotificationType.NEW_FOLLOWER,
                f"{follower.full_name} is now following you",
                {
                    "follower_id": follower.id,
                    "follower_name": follower.full_name,
                    "follower_username": follower.username,
                },
            )]

        return self._deliver("new_follower", build)

    # -----------------------------------------------------------------
    # Reports
    # -----------------------------------------------------------------

    def notify_post_reported(self, post: Post, report: Report) -> List[Notification]:
        def build():
            author = self.directory.get_user(post.user_id)
            notifications = [self.build(
                post.user_id,
                NotificationType.POST_REPORTED,
                "Your post has been reported and is under review",
                {"post_id": post.id, "report_id": report.id, "post_title": post.title},
            )]
            for admin in self.directory.get_admins():
                notifications.append(self.build(
                    admin.id,
                    NotificationType.POST_REPORTED,
                    f'New post report: "{post.title}"',
                    {
                        "post_id": post.id,
                        "report_id": report.id,
                        "post_title": post.title,
                        "author_id": author.id,
                        "author_name": author.full_name,
                        "reason": report.reason,
                    },
                ))
            return notifications

        return self._deliver("post_reported", build)

    def notify_comment_reported(self, comment: Comment, report: Report) -> List[Notification]:
        def build():
            author = self.directory.get_user(comment.user_id)
            notifications = [self.build(
                comment.user_id,
                NotificationType.COMMENT_REPORTED,
                "Your comment has been reported and is under review",
                {"post_id": comment.post_id, "comment_id": comment.id, "report_id": report.id},
            )]
            for admin in self.directory.get_admins():
                notifications.append(self.build(
                    admin.id,
                    NotificationType.COMMENT_REPORTED,
                    f"New comment report on post #{comment.post_id}",
                    {
                        "post_id": comment.post_id,
                        "comment_id": comment.id,
                        "report_id": report.id,
                        "author_id": author.id,
                        "author_name": author.full_name,
                        "reason": report.reason,
                    },
                ))
            return notifications

        return self._deliver("comment_reported", build)

    # -----------------------------------------------------------------
    # Moderation
    # -----------------------------------------------------------------

    def notify_post_status_change(
        self, post: Post, new_status: ContentStatus, reason: Optional[str] = None
    ) -> List[Notification]:
        messages = {
            ContentStatus.ARCHIVED: (
                NotificationType.POST_ARCHIVED,
                f'Your post "{post.title}" has been archived. Reason: {reason}',
            ),
            ContentStatus.ACTIVE: (
                NotificationType.POST_APPROVED,
                f'Your post "{post.title}" has been approved and is now visible',
            ),
            ContentStatus.REPORTED: (
                NotificationType.POST_REPORTED,
                f'Your post "{post.title}" has been reported and is under review',
            ),
        }
        entry = messages.get(_as_status(new_status))
        if entry is None:
            return []
        notification_type, message = entry

        return self._deliver("post_status_change", lambda: [self.build(
            post.user_id,
            notification_type,
            message,
            {"post_id": post.id, "post_title": post.title, "reason": reason},
        )])

    def notify_comment_status_change(
        self, comment: Comment, new_status: ContentStatus, reason: Optional[str] = None
    ) -> List[Notification]:
        messages = {
            ContentStatus.ARCHIVED: (
                NotificationType.COMMENT_ARCHIVED,
                f"Your comment has been archived. Reason: {reason}",
            ),
            ContentStatus.ACTIVE: (
                NotificationType.COMMENT_APPROVED,
                "Your comment has been approved and is now visible",
            ),
            ContentStatus.REPORTED: (
                NotificationType.COMMENT_REPORTED,
                "Your comment has been reported and is under review",
            ),
        }
        entry = messages.get(_as_status(new_status))
        if entry is None:
            return []
        notification_type, message = entry

        return self._deliver("comment_status_change", lambda: [self.build(
            comment.user_id,
            notification_type,
            message,
            {"post_id": comment.post_id, "comment_id": comment.id, "reason": reason},
        )])

    # -----------------------------------------------------------------
    # System
    # -----------------------------------------------------------------

    def notify_system_announcement(self, message: str, user_ids: Optional[List[int]] = None) -> List[Notification]:
        return self._deliver("system_announcement", lambda: [
            self.build(user.id, NotificationType.SYSTEM_ANNOUNCEMENT, message, {"announcement": True})
            for user in self.directory.get_users(user_ids)
        ])

    def notify_account_warning(self, user_id: int, reason: str) -> List[Notification]:
        return self._deliver("account_warning", lambda: [self.build(
            user_id,
            NotificationType.ACCOUNT_WARNING,
            f"Account Warning: {reason}",
            {"warning": True, "reason": reason},
        )])


def _as_status(value) -> Optional[ContentStatus]:
    try:
        return ContentStatus(value)
    except ValueError:
        return None


class NotificationInbox:
    """Owner-side notification lifecycle: created -> read -> deleted."""

    def __init__(self, db: Session):
        self.db = db

    def _get_owned(self, user_id: int, notification_id: int) -> Notification:
        notification = self.db.get(Notification, notification_id)
        if notification is None:
            raise NotFoundError("Notification not found")
        if notification.user_id != user_id:
            raise ForbiddenError("You can only manage your own notifications")
        return notification

    def get_page(self, user_id: int, page: int = 1, limit: int = NOTIFICATIONS_PAGE_SIZE) -> dict:
        page = max(page, 1)
        limit = max(limit, 1)
        total = self.db.scalar(
            select(func.count(Notification.id)).where(Notification.user_id == user_id)
        ) or 0
        notifications = list(self.db.scalars(
            select(Notification)
            .where(Notification.user_id == user_id)
            .order_by(Notification.created_at.desc(), Notification.id.desc())
            .offset((page - 1) * limit)
            .limit(limit)
        ))
        return {
            "notifications": notifications,
            "pages": math.ceil(total / limit),
            "total": total,
        }

    def unread(self, user_id: int) -> List[Notification]:
        return list(self.db.scalars(
            select(Notification)
            .where(Notification.user_id == user_id, Notification.read.is_(False))
            .order_by(Notification.created_at.desc(), Notification.id.desc())
            .limit(UNREAD_NOTIFICATIONS_LIMIT)
        ))

    def unread_count(self, user_id: int) -> int:
        return self.db.scalar(
            select(func.count(Notification.id))
            .where(Notification.user_id == user_id, Notification.read.is_(False))
        ) or 0

    def mark_as_read(self, user_id: int, notification_id: int) -> Notification:
        notification = self._get_owned(user_id, notification_id)
        notification.read = True
        self.db.commit()
        self.db.refresh(notification)
        return notification

    def mark_all_as_read(self, user_id: int) -> int:
        result = self.db.execute(
            update(Notification)
            .where(Notification.user_id == user_id, Notification.read.is_(False))
            .values(read=True)
        )
        self.db.commit()
        return result.rowcount or 0

    def delete(self, user_id: int, notification_id: int) -> None:
        notification = self._get_owned(user_id, notification_id)
        if not notification.read:
            raise InvalidStateError("Cannot delete unread notifications")
        self.db.delete(notification)
        self.db.commit()

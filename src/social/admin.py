"""
Admin Service

Dashboard statistics and moderation actions. Moderation changes are committed
first; the affected owner is then notified through the fan-out.
"""
import logging
from datetime import datetime
from typing import List, Optional, Sequence, Tuple, TYPE_CHECKING

from sqlalchemy import func, select
from sqlalchemy.orm import Session, selectinload

from config.settings import GROWTH_MONTHS, RECENT_ITEMS
from model.connection import Connection
from model.enums import ContentStatus, Role
from model.social.models import Comment, Like, Post, Report
from model.user import Users
from schema.admin import DashboardStatsOut, GrowthStat, RecentPostOut, RecentUserOut
from src.errors import BadRequestError, NotFoundError
from src.social.user_directory import UserDirectory

if TYPE_CHECKING:
    from src.social.notifications import NotificationFanout

logger = logging.getLogger(__name__)

MONTH_LABELS = ("JAN", "FEB", "MAR", "APR", "MAY", "JUN", "JUL", "AUG", "SEP", "OCT", "NOV", "DEC")


def shift_month(year: int, month: int, delta: int) -> Tuple[int, int]:
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


def month_windows(now: datetime, months: int) -> List[Tuple[str, datetime, datetime]]:
    """(label, start, end) for the last `months` calendar months, oldest first, ending with the current one."""
    windows = []
    for back in range(months - 1, -1, -1):
        year, month = shift_month(now.year, now.month, -back)
        next_year, next_month = shift_month(year, month, 1)
        windows.append((
            MONTH_LABELS[month - 1],
            datetime(year, month, 1),
            datetime(next_year, next_month, 1),
        ))
    return windows


def average_growth_rate(counts: Sequence[int]) -> float:
    """
    Mean month-over-month percentage change over the last three transitions.

    A zero baseline counts as 100% when the current month has users and 0%
    otherwise. Fewer than four months of data yields 0.
    """
    if len(counts) < 4:
        return 0.0

    rates = []
    for i in range(len(counts) - 3, len(counts)):
        previous, current = counts[i - 1], counts[i]
        if previous > 0:
            rates.append((current - previous) / previous * 100)
        elif current > 0:
            rates.append(100.0)
        else:
            rates.append(0.0)
    return sum(rates) / len(rates)


class AdminService:

    def __init__(self, db: Session, fanout: Optional["NotificationFanout"] = None):
        self.db = db
        self.fanout = fanout
        self.directory = UserDirectory(db)

    # -----------------------------------------------------------------
    # Dashboard
    # -----------------------------------------------------------------

    def _count(self, model) -> int:
        return self.db.scalar(select(func.count(model.id))) or 0

    def user_growth(self, now: Optional[datetime] = None, months: int = GROWTH_MONTHS) -> List[GrowthStat]:
        now = now or datetime.utcnow()
        growth = []
        for label, start, end in month_windows(now, months):
            count = self.db.scalar(
                select(func.count(Users.id)).where(Users.created_at >= start, Users.created_at < end)
            ) or 0
            growth.append(GrowthStat(name=label, count=count))
        return growth

    def dashboard_stats(self, now: Optional[datetime] = None) -> DashboardStatsOut:
        recent_users = self.db.scalars(
            select(Users).order_by(Users.created_at.desc(), Users.id.desc()).limit(RECENT_ITEMS)
        )
        recent_posts = self.db.scalars(
            select(Post)
            .options(selectinload(Post.user))
            .order_by(Post.created_at.desc(), Post.id.desc())
            .limit(RECENT_ITEMS)
        )
        growth = self.user_growth(now)

        return DashboardStatsOut(
            total_users=self._count(Users),
            total_posts=self._count(Post),
            total_connections=self._count(Connection),
            total_likes=self._count(Like),
            total_comments=self._count(Comment),
            total_reports=self._count(Report),
            recent_users=[RecentUserOut.model_validate(user) for user in recent_users],
            recent_posts=[RecentPostOut.model_validate(post) for post in recent_posts],
            user_growth=growth,
            avg_growth_rate=average_growth_rate([stat.count for stat in growth]),
        )

    # -----------------------------------------------------------------
    # Users
    # -----------------------------------------------------------------

    def update_user_role(self, user_id: int, role: str) -> Users:
        try:
            new_role = Role(str(role).upper())
        except ValueError:
            raise BadRequestError(f"Invalid role: {role}")

        user = self.directory.get_user(user_id)
        user.role = new_role
        self.db.commit()
        self.db.refresh(user)
        logger.info(f"Role of user {user_id} set to {new_role.value}")
        return user

    def warn_user(self, user_id: int, reason: str) -> None:
        self.directory.get_user(user_id)
        logger.info(f"⚠️ Warning issued to user {user_id}")
        if self.fanout is not None:
            self.fanout.notify_account_warning(user_id, reason)

    def announce(self, message: str, user_ids: Optional[List[int]] = None) -> int:
        """Send a system announcement; returns the number of recipients notified."""
        if self.fanout is None:
            return 0
        return len(self.fanout.notify_system_announcement(message, user_ids))

    # -----------------------------------------------------------------
    # Moderation
    # -----------------------------------------------------------------

    def update_post_status(self, post_id: int, status: ContentStatus, reason: Optional[str] = None) -> Post:
        post = self.db.get(Post, post_id)
        if post is None:
            raise NotFoundError(f"Post {post_id} not found")

        post.status = ContentStatus(status)
        self.db.commit()
        self.db.refresh(post)
        logger.info(f"Post {post_id} status set to {post.status.value}")

        if self.fanout is not None:
            self.fanout.notify_post_status_change(post, post.status, reason)
        return post

    def update_comment_status(self, comment_id: int, status: ContentStatus, reason: Optional[str] = None) -> Comment:
        comment = self.db.get(Comment, comment_id)
        if comment is None:
            raise NotFoundError(f"Comment {comment_id} not found")

        comment.status = ContentStatus(status)
        self.db.commit()
        self.db.refresh(comment)
        logger.info(f"Comment {comment_id} status set to {comment.status.value}")

        if self.fanout is not None:
            self.fanout.notify_comment_status_change(comment, comment.status, reason)
        return comment

    def get_post_reports(self, post_id: int) -> List[Report]:
        if self.db.get(Post, post_id) is None:
            raise NotFoundError(f"Post {post_id} not found")
        return list(self.db.scalars(
            select(Report)
            .where(Report.post_id == post_id, Report.comment_id.is_(None))
            .order_by(Report.created_at.desc(), Report.id.desc())
        ))

    def get_comment_reports(self, comment_id: int) -> List[Report]:
        if self.db.get(Comment, comment_id) is None:
            raise NotFoundError(f"Comment {comment_id} not found")
        return list(self.db.scalars(
            select(Report)
            .where(Report.comment_id == comment_id)
            .order_by(Report.created_at.desc(), Report.id.desc())
        ))

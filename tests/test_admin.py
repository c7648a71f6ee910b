"""
Test the admin service

Tests:
- Average growth rate rule
- Month windows and dashboard totals
- Role updates
- Content moderation with owner notification
- Report listings, warnings and announcements
"""
from datetime import datetime

import pytest

from model.enums import ContentStatus, NotificationType, Role
from model.notification import Notification
from src.errors import BadRequestError, NotFoundError
from src.social.admin import AdminService, average_growth_rate, month_windows, shift_month
from src.social.connection_graph import ConnectionGraph
from src.social.content import ContentService
from src.social.notifications import NotificationFanout


@pytest.fixture
def fanout(db_session):
    return NotificationFanout(db_session)


@pytest.fixture
def service(db_session, fanout):
    return AdminService(db_session, fanout=fanout)


@pytest.fixture
def content(db_session):
    return ContentService(db_session)


# ===================================================================
# Growth rule
# ===================================================================

class TestAverageGrowthRate:

    def test_fewer_than_four_months(self):
        assert average_growth_rate([1, 2, 3]) == 0

    def test_uses_last_three_transitions(self):
        # 10 -> 20 (+100%), 20 -> 10 (-50%), 10 -> 15 (+50%); the first month is ignored
        assert average_growth_rate([999, 10, 20, 10, 15]) == pytest.approx(100 / 3)

    def test_zero_baseline_with_growth_is_hundred_percent(self):
        assert average_growth_rate([0, 0, 0, 4]) == pytest.approx(100 / 3)

    def test_zero_to_zero_is_flat(self):
        assert average_growth_rate([0, 0, 0, 0, 0]) == 0

    def test_decline_to_zero(self):
        assert average_growth_rate([0, 5, 5, 0]) == pytest.approx((100 + 0 - 100) / 3)


class TestMonthWindows:

    def test_shift_month_across_years(self):
        assert shift_month(2024, 1, -1) == (2023, 12)
        assert shift_month(2024, 12, 1) == (2025, 1)
        assert shift_month(2024, 3, -14) == (2023, 1)

    def test_last_five_months_oldest_first(self):
        windows = month_windows(datetime(2024, 2, 15), 5)

        assert [label for label, _, _ in windows] == ["OCT", "NOV", "DEC", "JAN", "FEB"]
        assert windows[0][1] == datetime(2023, 10, 1)
        assert windows[-1][2] == datetime(2024, 3, 1)


# ===================================================================
# Dashboard
# ===================================================================

class TestDashboardStats:

    def test_totals_and_recent_items(self, db_session, service, content, alice, bob):
        post = content.create_post(bob.id, "Trip", "photos")
        content.like_post(alice.id, post.id)
        content.add_comment(alice.id, post.id, "nice")
        content.report_post(alice.id, post.id, "spam")
        ConnectionGraph(db_session).request_connection(alice.id, bob.id)

        stats = service.dashboard_stats()

        assert stats.total_users == 2
        assert stats.total_posts == 1
        assert stats.total_connections == 1
        assert stats.total_likes == 1
        assert stats.total_comments == 1
        assert stats.total_reports == 1
        assert {u.username for u in stats.recent_users} == {"alice", "bob"}
        assert [p.user.username for p in stats.recent_posts] == ["bob"]
        assert len(stats.user_growth) == 5

    def test_growth_counts_users_per_month(self, db_session, service, make_user):
        for username, created in (
            ("jan", datetime(2024, 1, 10)),
            ("feb1", datetime(2024, 2, 1)),
            ("feb2", datetime(2024, 2, 28, 23, 59)),
            ("old", datetime(2023, 6, 1)),
        ):
            user = make_user(username)
            user.created_at = created
        db_session.commit()

        growth = service.user_growth(now=datetime(2024, 2, 20))

        assert [(g.name, g.count) for g in growth] == [
            ("OCT", 0), ("NOV", 0), ("DEC", 0), ("JAN", 1), ("FEB", 2),
        ]

    def test_recent_items_are_capped(self, service, make_user):
        for i in range(7):
            make_user(f"user{i}")
        assert len(service.dashboard_stats().recent_users) == 5


# ===================================================================
# Users
# ===================================================================

class TestUserAdministration:

    def test_update_role(self, service, alice):
        assert service.update_user_role(alice.id, "admin").role == Role.ADMIN

    def test_invalid_role(self, service, alice):
        with pytest.raises(BadRequestError):
            service.update_user_role(alice.id, "superuser")

    def test_role_of_missing_user(self, service):
        with pytest.raises(NotFoundError):
            service.update_user_role(404, "USER")

    def test_warn_user(self, db_session, service, alice):
        service.warn_user(alice.id, "spam")

        [notification] = db_session.query(Notification).all()
        assert notification.user_id == alice.id
        assert notification.type == NotificationType.ACCOUNT_WARNING

    def test_announce(self, service, alice, bob):
        assert service.announce("hello all") == 2
        assert service.announce("just bob", user_ids=[bob.id]) == 1


# ===================================================================
# Moderation
# ===================================================================

class TestModeration:

    def test_archive_post_notifies_owner_and_hides_it(self, db_session, service, content, alice, bob):
        post = content.create_post(bob.id, "Trip", "photos")

        service.update_post_status(post.id, ContentStatus.ARCHIVED, reason="off topic")

        [notification] = db_session.query(Notification).filter_by(user_id=bob.id).all()
        assert notification.type == NotificationType.POST_ARCHIVED
        assert "off topic" in notification.message
        assert content.get_feed(alice.id) == []

    def test_approve_comment(self, db_session, service, content, alice, bob):
        post = content.create_post(bob.id, "Trip", "photos")
        comment = content.add_comment(alice.id, post.id, "hmm")

        updated = service.update_comment_status(comment.id, "ACTIVE")

        assert updated.status == ContentStatus.ACTIVE
        [notification] = db_session.query(Notification).filter_by(user_id=alice.id).all()
        assert notification.type == NotificationType.COMMENT_APPROVED

    def test_missing_post(self, service):
        with pytest.raises(NotFoundError):
            service.update_post_status(1, ContentStatus.ARCHIVED)

    def test_report_listings(self, service, content, alice, bob, carol):
        post = content.create_post(bob.id, "Trip", "photos")
        comment = content.add_comment(carol.id, post.id, "rude")
        post_report = content.report_post(alice.id, post.id, "spam")
        comment_report = content.report_comment(alice.id, comment.id, "abuse")

        assert [r.id for r in service.get_post_reports(post.id)] == [post_report.id]
        assert [r.id for r in service.get_comment_reports(comment.id)] == [comment_report.id]

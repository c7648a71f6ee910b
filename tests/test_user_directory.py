"""
Test the user directory settings handling

Tests:
- First read creates the settings row with defaults
- Updates land on the existing row, including when a concurrent insert wins
- privacy_for() does not create a row and rejects unknown fields
"""
import pytest

from model.enums import PrivacyOption, Theme
from model.user import UserSettings
from src.errors import BadRequestError, NotFoundError
from src.social.user_directory import UserDirectory


@pytest.fixture
def directory(db_session):
    return UserDirectory(db_session)


# ===================================================================
# Lazy settings
# ===================================================================

class TestUserSettings:

    def test_first_read_creates_defaults(self, directory, db_session, alice):
        assert db_session.query(UserSettings).count() == 0

        settings = directory.get_settings(alice.id)

        assert settings.user_id == alice.id
        assert settings.theme == Theme.DARK
        assert settings.language == "en"
        assert settings.details_privacy == PrivacyOption.PUBLIC
        assert settings.connections_privacy == PrivacyOption.PUBLIC
        assert settings.posts_privacy == PrivacyOption.PUBLIC
        assert db_session.query(UserSettings).count() == 1

    def test_second_read_reuses_row(self, directory, db_session, alice):
        first = directory.get_settings(alice.id)
        assert directory.get_settings(alice.id).id == first.id
        assert db_session.query(UserSettings).count() == 1

    def test_unknown_user(self, directory):
        with pytest.raises(NotFoundError):
            directory.get_settings(999)

    def test_upsert_ignores_unknown_fields(self, directory, alice):
        settings = directory.upsert_settings(alice.id, {"posts_privacy": PrivacyOption.PRIVATE, "role": "admin"})
        assert settings.posts_privacy == PrivacyOption.PRIVATE
        assert settings.details_privacy == PrivacyOption.PUBLIC

    def test_upsert_after_concurrent_insert(self, directory, db_session, alice, monkeypatch):
        existing = directory.get_settings(alice.id)

        # The first lookup misses, as if another request inserted the row meanwhile
        real_find = directory._find_settings
        calls = []

        def stale_find(user_id):
            calls.append(user_id)
            return None if len(calls) == 1 else real_find(user_id)

        monkeypatch.setattr(directory, "_find_settings", stale_find)

        settings = directory.upsert_settings(alice.id, {"theme": Theme.LIGHT})

        assert len(calls) == 2
        assert settings.id == existing.id
        assert settings.theme == Theme.LIGHT
        assert settings.posts_privacy == PrivacyOption.PUBLIC
        assert db_session.query(UserSettings).count() == 1


# ===================================================================
# Privacy lookup
# ===================================================================

class TestPrivacyFor:

    def test_missing_row_is_public_and_not_created(self, directory, db_session, alice):
        assert directory.privacy_for(alice.id, "posts_privacy") == PrivacyOption.PUBLIC
        assert db_session.query(UserSettings).count() == 0

    def test_stored_value(self, directory, private_user):
        assert directory.privacy_for(private_user.id, "posts_privacy") == PrivacyOption.PRIVATE

    def test_unknown_field(self, directory, alice):
        with pytest.raises(BadRequestError) as exc:
            directory.privacy_for(alice.id, "email_privacy")
        assert exc.value.status_code == 400

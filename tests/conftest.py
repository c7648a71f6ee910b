"""
Shared fixtures: an in-memory SQLite database and a handful of users.
"""
import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from model import load_all_models
from model.base import Base
from model.enums import PrivacyOption, Role
from model.user import Users, UserSettings

load_all_models()


# ===================================================================
# Database
# ===================================================================

@pytest.fixture(scope='function')
def engine():
    """In-memory SQLite shared by every connection of one test."""
    engine = create_engine(
        'sqlite:///:memory:',
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture(scope='function')
def db_session(engine):
    Session = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)
    session = Session()
    yield session
    session.close()


# ===================================================================
# Users
# ===================================================================

def create_user(db_session, username, role=Role.USER, **privacy):
    user = Users(
        username=username,
        full_name=f"{username.capitalize()} Tester",
        email=f"{username}@example.com",
        role=role,
    )
    db_session.add(user)
    db_session.commit()
    if privacy:
        db_session.add(UserSettings(user_id=user.id, theme="dark", language="en", **privacy))
        db_session.commit()
    return user


@pytest.fixture
def make_user(db_session):
    """Factory: make_user("alice", posts_privacy=PrivacyOption.PRIVATE)."""
    def _make(username, role=Role.USER, **privacy):
        return create_user(db_session, username, role=role, **privacy)
    return _make


@pytest.fixture
def alice(make_user):
    return make_user("alice")


@pytest.fixture
def bob(make_user):
    return make_user("bob")


@pytest.fixture
def carol(make_user):
    return make_user("carol")


@pytest.fixture
def admin(make_user):
    return make_user("admin", role=Role.ADMIN)


@pytest.fixture
def private_user(make_user):
    return make_user(
        "priv",
        details_privacy=PrivacyOption.PRIVATE,
        connections_privacy=PrivacyOption.PRIVATE,
        posts_privacy=PrivacyOption.PRIVATE,
    )

# config/dependencies.py
"""Request-scoped service providers. Each service shares the request's Session."""

from fastapi import Depends
from sqlalchemy.orm import Session

from config.db import get_db
from src.social.admin import AdminService
from src.social.connection_graph import ConnectionGraph
from src.social.content import ContentService
from src.social.notifications import NotificationFanout, NotificationInbox
from src.social.privacy import PrivacyGate
from src.social.profiles import ProfileService
from src.social.suggestions import SuggestionEngine
from src.social.user_directory import UserDirectory


def get_directory(db: Session = Depends(get_db)) -> UserDirectory:
    return UserDirectory(db)


def get_fanout(db: Session = Depends(get_db)) -> NotificationFanout:
    return NotificationFanout(db)


def get_inbox(db: Session = Depends(get_db)) -> NotificationInbox:
    return NotificationInbox(db)


def get_graph(
    db: Session = Depends(get_db),
    fanout: NotificationFanout = Depends(get_fanout),
) -> ConnectionGraph:
    return ConnectionGraph(db, fanout=fanout)


def get_privacy(
    directory: UserDirectory = Depends(get_directory),
    graph: ConnectionGraph = Depends(get_graph),
) -> PrivacyGate:
    return PrivacyGate(directory, graph)


def get_suggestions(
    directory: UserDirectory = Depends(get_directory),
    graph: ConnectionGraph = Depends(get_graph),
) -> SuggestionEngine:
    return SuggestionEngine(directory, graph)


def get_content(
    db: Session = Depends(get_db),
    fanout: NotificationFanout = Depends(get_fanout),
) -> ContentService:
    return ContentService(db, fanout=fanout)


def get_profiles(db: Session = Depends(get_db)) -> ProfileService:
    return ProfileService(db)


def get_admin(
    db: Session = Depends(get_db),
    fanout: NotificationFanout = Depends(get_fanout),
) -> AdminService:
    return AdminService(db, fanout=fanout)

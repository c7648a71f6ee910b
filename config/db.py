# config/db.py
from typing import Iterator

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from config.settings import DB_URL, DB_ECHO


def _engine_kwargs(url: str) -> dict:
    kwargs = {"echo": DB_ECHO, "pool_pre_ping": True}
    if url.startswith("sqlite"):
        # FastAPI runs sync endpoints in a threadpool
        kwargs["connect_args"] = {"check_same_thread": False}
    return kwargs


engine = create_engine(DB_URL, **_engine_kwargs(DB_URL))
SessionLocal = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


def get_db() -> Iterator[Session]:
    """Request-scoped session; always closed when the request finishes."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

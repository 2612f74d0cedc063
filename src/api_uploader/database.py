"""
Engine and session wiring for video records.

Upload pipelines run in the threadpool with the request's session, so a sqlite
connection is used from a thread other than the one that opened it. Other
backends get `pool_pre_ping`, because a request can sit on one connection
through a long remux and the server may drop idle connections meanwhile.
"""

from typing import Generator

from sqlalchemy import create_engine
from sqlalchemy.engine import make_url
from sqlalchemy.orm import declarative_base, sessionmaker, Session

from api_uploader.config.base_config import settings

Base = declarative_base()


def build_engine(database_url: str):
    if make_url(database_url).get_backend_name() == "sqlite":
        return create_engine(database_url, connect_args={"check_same_thread": False})
    return create_engine(database_url, pool_pre_ping=True)


engine = build_engine(settings.DATABASE_URL)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session

from lms.core.config import settings


def build_engine(database_url: str) -> Engine:
    return create_engine(
        database_url,
        connect_args={"check_same_thread": False} if "sqlite" in database_url else {},
    )


def build_session_factory(bind: Engine) -> sessionmaker[Session]:
    return sessionmaker(autocommit=False, autoflush=False, bind=bind)


SQLALCHEMY_DATABASE_URL = settings.database_url

engine = build_engine(SQLALCHEMY_DATABASE_URL)

SessionLocal = build_session_factory(engine)

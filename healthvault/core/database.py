from sqlalchemy import create_engine
from sqlalchemy.engine import make_url
from sqlalchemy.orm import sessionmaker, DeclarativeBase

from healthvault.core.config import build_database_url


def make_engine(url):
    url = make_url(url)

    if url.get_backend_name() == "sqlite":
        # Sessions are handed to FastAPI's threadpool
        return create_engine(
            url,
            connect_args={"check_same_thread": False},
            pool_pre_ping=True,
            future=True,
        )

    return create_engine(
        url,
        pool_size=10,
        max_overflow=10,
        pool_recycle=30,
        connect_args={"connect_timeout": 2},
        pool_pre_ping=True,
        future=True,
    )


def make_sessionmaker(bind):
    return sessionmaker(
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
        bind=bind,
        future=True,
    )


engine = make_engine(build_database_url())

SessionLocal = make_sessionmaker(engine)


class Base(DeclarativeBase):
    pass


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

from functools import lru_cache

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base

Base = declarative_base()


@lru_cache(maxsize=None)
def get_engine(database_url: str):
    """One engine per database URL, created on first use."""
    return create_engine(database_url, future=True)


@lru_cache(maxsize=None)
def get_session_factory(database_url: str) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=get_engine(database_url), future=True)


def init_db(bind):
    """Create report tables on the given engine."""
    from app.models.community_report import CommunityReport  # noqa: F401 registers the table
    Base.metadata.create_all(bind=bind)

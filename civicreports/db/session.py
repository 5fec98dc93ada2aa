"""Database session management."""

from __future__ import annotations

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from civicreports.core.config import settings


def make_engine(database_url: str, echo: bool = False) -> Engine:
    """Engine for ``database_url``; SQLite connections may cross threads."""
    connect_args = {}
    if database_url.startswith("sqlite"):
        connect_args["check_same_thread"] = False
    return create_engine(
        database_url,
        pool_pre_ping=True,
        echo=echo,
        connect_args=connect_args,
    )


engine = make_engine(settings.database_url, echo=settings.debug)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def init_db(bind: Engine = engine) -> None:
    """Create the report tables if they do not exist yet."""
    from civicreports.db.base import Base
    from civicreports import models  # noqa: F401 - register for create_all

    Base.metadata.create_all(bind=bind)

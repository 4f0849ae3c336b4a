# server/database.py

import os
from fastapi import Request
from sqlalchemy import create_engine
from sqlalchemy.engine import make_url
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from models import Base


def build_engine(database_url: str):
    if not database_url.startswith("sqlite"):
        return create_engine(database_url, pool_pre_ping=True)

    path = make_url(database_url).database
    if not path or path == ":memory:":
        # one shared connection, otherwise every session sees an empty database
        return create_engine(
            database_url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool
        )

    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    return create_engine(
        database_url,
        connect_args={"check_same_thread": False}
    )


def build_session_factory(engine):
    return sessionmaker(
        autocommit=False,
        autoflush=False,
        bind=engine
    )


def init_db(engine):
    # importing the models registers their tables on Base.metadata
    import models.user, models.honk, models.follow, models.session  # noqa: F401
    Base.metadata.create_all(bind=engine)


def get_db(request: Request):
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()

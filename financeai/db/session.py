"""Engine/session helpers for the SQL backend."""
from __future__ import annotations

import json
from contextlib import contextmanager
from functools import lru_cache
from typing import Callable, Iterator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker, Session

from financeai.core.config import get_settings

Base = declarative_base()

SessionFactory = Callable[[], Session]


def build_engine(url: str) -> Engine:
    url = (url or "").strip()
    if not url:
        raise RuntimeError("DATABASE_URL must be configured to use the SQL backend.")
    connect_args = {}
    if url.startswith("sqlite"):
        # handlers run on the threadpool, connections are shared across threads
        connect_args["check_same_thread"] = False
    return create_engine(
        url,
        future=True,
        pool_pre_ping=True,
        connect_args=connect_args,
        json_serializer=lambda obj: json.dumps(obj, ensure_ascii=False),
    )


def build_sessionmaker(engine: Engine) -> sessionmaker:
    return sessionmaker(bind=engine, autoflush=False, autocommit=False, expire_on_commit=False, future=True)


@lru_cache
def get_engine() -> Engine:
    return build_engine(get_settings().database_url)


@lru_cache
def _get_sessionmaker() -> sessionmaker:
    return build_sessionmaker(get_engine())


@contextmanager
def session_scope(factory: SessionFactory) -> Iterator[Session]:
    session: Session = factory()
    try:
        yield session
    finally:
        session.close()


@contextmanager
def get_session() -> Iterator[Session]:
    with session_scope(_get_sessionmaker()) as session:
        yield session

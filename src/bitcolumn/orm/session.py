"""SQLAlchemy engine factory and pre-configured session.

This module provides:

* ``create_bitcolumn_engine``    -- Create a SA engine from a URL (or settings).
* ``BitColumnSession``           -- A ``Session`` subclass with ``expire_on_commit=False``.
* ``bitcolumn_session_factory``  -- ``sessionmaker`` producing ``BitColumnSession``.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import create_engine as _sa_create_engine
from sqlalchemy import event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from bitcolumn.core.settings import get_settings


def create_bitcolumn_engine(
    url: str | None = None,
    *,
    echo: bool | None = None,
    **kwargs: Any,
) -> Engine:
    """Create a SQLAlchemy engine with sane defaults.

    Parameters
    ----------
    url:
        Database URL; defaults to ``BITCOLUMN_DATABASE_URL``.
    echo:
        If ``True``, log all SQL; defaults to ``BITCOLUMN_DATABASE_ECHO``.
    **kwargs:
        Extra arguments forwarded to ``sqlalchemy.create_engine``.
    """
    settings = get_settings()
    url = url or settings.database_url
    echo = settings.database_echo if echo is None else echo

    if not url.startswith("sqlite"):
        return _sa_create_engine(url, echo=echo, **kwargs)

    kwargs.setdefault("connect_args", {"check_same_thread": False})
    engine = _sa_create_engine(url, echo=echo, **kwargs)

    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_connection: Any, _rec: Any) -> None:
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    return engine


class BitColumnSession(Session):
    """Pre-configured session with ``expire_on_commit=False``.

    Flag accessors read the raw attribute; keeping it loaded after commit
    avoids a lazy refresh on every flag read.
    """

    def __init__(self, bind: Engine | None = None, **kwargs: Any) -> None:
        kwargs.setdefault("expire_on_commit", False)
        super().__init__(bind=bind, **kwargs)


def bitcolumn_session_factory(engine: Engine) -> sessionmaker[BitColumnSession]:
    """Return a ``sessionmaker`` bound to *engine* that produces ``BitColumnSession`` instances."""
    return sessionmaker(bind=engine, class_=BitColumnSession)


__all__ = [
    "BitColumnSession",
    "bitcolumn_session_factory",
    "create_bitcolumn_engine",
]

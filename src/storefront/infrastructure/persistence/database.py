"""Engine creation for the relational store."""

from __future__ import annotations

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool

from storefront.infrastructure.persistence.schema import metadata


def make_engine(database_url: str, create_schema: bool = True) -> Engine:
    """Create an engine and, by default, any missing tables.

    SQLite ignores ``SELECT ... FOR UPDATE``; its transactions are
    started with ``BEGIN IMMEDIATE`` instead so writers serialize the
    same way row locks would serialize them.
    """
    if database_url.startswith("sqlite"):
        kwargs: dict = {"connect_args": {"check_same_thread": False}}
        if database_url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
        engine = create_engine(database_url, **kwargs)
        _serialize_sqlite_writers(engine)
    else:
        engine = create_engine(database_url, pool_pre_ping=True)

    if create_schema:
        metadata.create_all(engine)
    return engine


def _serialize_sqlite_writers(engine: Engine) -> None:

    @event.listens_for(engine, "connect")
    def _disable_pysqlite_transactions(dbapi_connection, connection_record) -> None:
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _begin_immediate(conn) -> None:
        conn.exec_driver_sql("BEGIN IMMEDIATE")

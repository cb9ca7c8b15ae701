"""Database engine and helpers.

The engine is built explicitly by the application factory and kept on
``app.state.engine`` for the lifetime of the process. Request handlers
receive a short-lived `Session` through the `get_session` dependency.
"""

from fastapi import Request
from sqlalchemy import event
from sqlalchemy.engine import Engine
from sqlmodel import SQLModel, Session, create_engine


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def build_engine(database_url: str, echo: bool = False) -> Engine:
    """Create the SQLAlchemy engine for `database_url`.

    SQLite connections are shared across FastAPI worker threads, so
    `check_same_thread` is disabled and foreign key enforcement is turned
    on for every new connection (SQLite leaves it off by default).
    """
    is_sqlite = database_url.startswith("sqlite")
    connect_args = {"check_same_thread": False} if is_sqlite else {}
    engine = create_engine(database_url, echo=echo, connect_args=connect_args)
    if is_sqlite:
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
    return engine


def create_db_and_tables(engine: Engine):
    """Create the `students`, `teachers` and `students_teachers` tables.

    This is intended for local development and tests; production
    deployments should rely on a proper migration tool (alembic) instead.
    """
    # models must be imported so their tables are registered on the metadata
    from . import models  # noqa: F401

    SQLModel.metadata.create_all(engine)


def get_session(request: Request):
    """Yield a database `Session` for FastAPI dependency injection.

    The generator yields a session bound to the application's engine and
    ensures it is closed when the request scope finishes.
    """
    with Session(request.app.state.engine) as session:
        yield session

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from rentshop.core.config import DB_ECHO, DB_URL
from rentshop.models import Base

log = logging.getLogger(__name__)

# Keep SQLAlchemy quiet unless DB_ECHO is set
logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)

_engine: Optional[AsyncEngine] = None
_session_factory: Optional[async_sessionmaker] = None


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    # SQLite ignores ON DELETE clauses unless this is switched on per connection
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


async def init_db(db_url: str = DB_URL, create_schema: bool = True) -> AsyncEngine:
    """Creates the engine and session factory, and the tables when asked to."""
    global _engine, _session_factory
    try:
        _engine = create_async_engine(db_url, echo=DB_ECHO)
        if _engine.dialect.name == "sqlite":
            event.listen(_engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
        _session_factory = async_sessionmaker(_engine, expire_on_commit=False)

        if create_schema:
            async with _engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
        log.info("Database connection established at %s.", _engine.url.render_as_string(hide_password=True))
    except Exception as e:
        log.error(f"FATAL ERROR: Could not connect to database at {db_url}. Error: {e}")
        # Re-raise to prevent the application from starting without a database
        raise
    return _engine


async def close_db():
    """Disposes the engine and forgets the session factory."""
    global _engine, _session_factory
    if _engine is not None:
        await _engine.dispose()
        log.info("Database connections closed.")
    _engine = None
    _session_factory = None


@asynccontextmanager
async def in_transaction(conn: Optional[AsyncSession] = None) -> AsyncIterator[AsyncSession]:
    """
    Yields a session bound to a single transaction: committed on normal exit,
    rolled back if the block raises.

    Passing an existing session joins the caller's transaction instead, so services
    can be composed (e.g. a sale recording its own payment) without nesting commits.
    """
    if conn is not None:
        yield conn
        return

    if _session_factory is None:
        raise RuntimeError("Database is not initialised; call init_db() first.")

    async with _session_factory() as session:
        async with session.begin():
            yield session

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from teamdocs.core.config import Settings


def create_engine(settings: Settings) -> AsyncEngine:
    """Асинхронный движок для выбранной БД"""
    kwargs = {"echo": settings.sql_echo}
    is_sqlite = settings.database_url.startswith("sqlite")
    # In-memory SQLite живет только в одном соединении
    if is_sqlite and ":memory:" in settings.database_url:
        kwargs["poolclass"] = StaticPool
        kwargs["connect_args"] = {"check_same_thread": False}

    engine = create_async_engine(settings.database_url, **kwargs)
    if is_sqlite:
        _serialize_sqlite_transactions(engine)
    return engine


def _serialize_sqlite_transactions(engine: AsyncEngine) -> None:
    """SQLite не поддерживает SELECT ... FOR UPDATE: транзакция сразу берет блокировку записи"""

    @event.listens_for(engine.sync_engine, "connect")
    def do_connect(dbapi_connection, connection_record):
        # BEGIN выдает SQLAlchemy, а не драйвер
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def do_begin(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)

import sqlite3
from pathlib import Path

from aws_lambda_powertools import Logger
from sqlalchemy import event, text
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.pool import AsyncAdaptedQueuePool

from blog.settings import Settings
from blog.utils import utc_now

MIGRATIONS_PATH = Path(__file__).parent / "migrations"


def _split_statements(script: str) -> list[str]:
    """Splits a migration script into single statements.

    Semicolons inside string literals and comments do not end a statement.
    """
    statements, buffer = [], ""
    for chunk in script.split(";"):
        buffer = f"{buffer};{chunk}" if buffer else chunk
        if sqlite3.complete_statement(f"{buffer};"):
            statements.append(buffer.strip())
            buffer = ""
    if buffer.strip():
        statements.append(buffer.strip())
    return [statement for statement in statements if statement]


def _enable_transactional_ddl(engine: AsyncEngine):
    # pysqlite commits implicitly before DDL; hand transaction control to SQLAlchemy
    @event.listens_for(engine.sync_engine, "connect")
    def on_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def on_begin(conn):
        conn.exec_driver_sql("BEGIN")


class Database:
    """Owns the connection pool shared by every request.

    One instance is created per application and handed to repositories
    explicitly, it is never looked up globally.
    """

    def __init__(self, settings: Settings):
        self._logger = Logger(utc=True)
        self._settings = settings
        self._engine: AsyncEngine | None = None

    @property
    def engine(self) -> AsyncEngine:
        if self._engine is None:
            raise RuntimeError("Database is not connected")
        return self._engine

    async def connect(self):
        url = make_url(self._settings.database_url)
        if url.database and url.database != ":memory:":
            Path(url.database).parent.mkdir(parents=True, exist_ok=True)
        self._engine = create_async_engine(
            url,
            poolclass=AsyncAdaptedQueuePool,
            pool_size=self._settings.database_pool_size,
            max_overflow=0,
            pool_timeout=self._settings.database_acquire_timeout,
        )
        _enable_transactional_ddl(self._engine)
        self._logger.info(f"Database connected {url.database=}")

    async def dispose(self):
        if self._engine is not None:
            await self._engine.dispose()
            self._engine = None
            self._logger.info("Database connection pool disposed")

    async def ping(self) -> bool:
        async with self.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        return True

    async def migrate(self, path: Path = MIGRATIONS_PATH) -> list[str]:
        async with self.engine.begin() as conn:
            await conn.exec_driver_sql(
                "CREATE TABLE IF NOT EXISTS schema_migrations ("
                "version TEXT PRIMARY KEY, applied_at TEXT NOT NULL)"
            )
            result = await conn.execute(text("SELECT version FROM schema_migrations"))
            applied = {row.version for row in result}

        newly_applied = []
        for script in sorted(path.glob("*.sql")):
            version = script.stem
            if version in applied:
                continue
            async with self.engine.begin() as conn:
                for statement in _split_statements(script.read_text()):
                    await conn.exec_driver_sql(statement)
                await conn.execute(
                    text(
                        "INSERT INTO schema_migrations (version, applied_at) "
                        "VALUES (:version, :applied_at)"
                    ),
                    {"version": version, "applied_at": utc_now()},
                )
            self._logger.info(f"Applied migration {version=}")
            newly_applied.append(version)
        return newly_applied

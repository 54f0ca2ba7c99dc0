import argparse
import asyncio
from collections.abc import AsyncGenerator

from fastapi import Request
from sqlalchemy import event, inspect, text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from app import models  # noqa: F401
from app.config import settings
from app.models.base import Base
from app.utils.logger import setup_logger

logger = setup_logger("db")


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class Store:
    """
    Handle on the relational database: one engine plus a session factory.

    A store is created explicitly at process start (see the lifespan in
    main.py), handed to request handlers through ``get_app_db``, and closed
    explicitly at shutdown. Nothing else in the application holds a
    connection.
    """

    def __init__(self, database_url: str, *, echo: bool = False):
        self.database_url = database_url
        self.is_sqlite = database_url.startswith("sqlite")
        self.engine: AsyncEngine = self._create_engine(database_url, echo)
        self.session_factory = async_sessionmaker(
            autocommit=False,
            autoflush=False,
            bind=self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    def _create_engine(self, database_url: str, echo: bool) -> AsyncEngine:
        if self.is_sqlite:
            engine_kwargs = {"connect_args": {"check_same_thread": False}}
            if ":memory:" in database_url or database_url.endswith("://"):
                # Every session must see the same in-memory database
                engine_kwargs["poolclass"] = StaticPool
            engine = create_async_engine(database_url, echo=echo, **engine_kwargs)
            event.listen(engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
            return engine

        return create_async_engine(
            database_url,
            echo=echo,
            pool_pre_ping=True,
            pool_size=10,
            max_overflow=20,
            pool_timeout=60,
            pool_recycle=300,
        )

    def session(self) -> AsyncSession:
        return self.session_factory()

    async def init(self) -> None:
        """Create all tables that do not exist yet."""
        logger.debug(
            f"Tables registered in Base.metadata: {list(Base.metadata.tables.keys())}"
        )
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database schema initialized.")

    async def reset(self) -> None:
        """Drop and recreate every table. Destroys all data."""
        logger.warning("Resetting the application database. All data will be lost.")
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)
        await self.init()

    async def list_tables(self) -> list[str]:
        async with self.engine.connect() as conn:
            table_names = await conn.run_sync(
                lambda sync_conn: inspect(sync_conn).get_table_names()
            )
        logger.debug(f"Tables in database: {table_names}")
        return sorted(table_names)

    async def check_connection(self) -> bool:
        """Performs a simple query to check actual DB connectivity."""
        async with self.session() as session:
            try:
                result = await session.execute(text("SELECT 1"))
                if result.scalar_one() != 1:
                    raise RuntimeError("Test query returned an unexpected result.")
                logger.info("Successfully connected to the database.")
                return True
            except Exception as e:
                logger.error(f"Failed to execute test query: {e}", exc_info=True)
                raise RuntimeError("Database connectivity check failed.") from e

    async def close(self) -> None:
        logger.info("Closing database connections.")
        await self.engine.dispose()
        logger.info("Database connections closed.")


# --- Dependency for FastAPI ---
async def get_app_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    store: Store = request.app.state.store
    async with store.session() as session:
        yield session


async def _run_cli(action: str, database_url: str) -> None:
    store = Store(database_url)
    try:
        if action == "init":
            await store.init()
        elif action == "reset":
            await store.reset()
        elif action == "list-tables":
            for name in await store.list_tables():
                print(name)
        elif action == "check":
            await store.check_connection()
    finally:
        await store.close()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(
        description="Shadow Ledger database utility"
    )
    parser.add_argument(
        "action",
        choices=["init", "reset", "list-tables", "check"],
        help="'init' creates missing tables, 'reset' drops and recreates them, "
        "'list-tables' prints the tables present, 'check' runs a connectivity test.",
    )
    parser.add_argument(
        "--database-url",
        default=settings.app_database_url,
        help="Override SHADOW_LEDGER_DATABASE_URL for this run.",
    )
    args = parser.parse_args()

    if args.action == "reset":
        confirm = input(
            "WARNING: This will delete all data in the application database. "
            "Are you sure? (yes/no): "
        )
        if confirm.lower() != "yes":
            logger.info("Database reset cancelled by user.")
            raise SystemExit(0)

    asyncio.run(_run_cli(args.action, args.database_url))
    logger.info("Database utility script finished.")

import logging
from dataclasses import dataclass
from typing import Any, List, Optional, Union

from sqlmodel import SQLModel
from sqlalchemy import event
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import models  # noqa: F401  registers the tables on SQLModel.metadata

logger = logging.getLogger(__name__)

# PostgreSQL SQLSTATE codes and SQLite extended result names
UNIQUE_CODES = {"23505", "SQLITE_CONSTRAINT_UNIQUE", "SQLITE_CONSTRAINT_PRIMARYKEY"}
FOREIGN_KEY_CODES = {"23503", "SQLITE_CONSTRAINT_FOREIGNKEY"}


@dataclass(frozen=True)
class Unique:
    """A unique constraint rejected the statement."""


@dataclass(frozen=True)
class ForeignKey:
    """A foreign key constraint rejected the statement."""


@dataclass(frozen=True)
class Other:
    detail: str


Failure = Union[Unique, ForeignKey, Other]


class StoreFailure(Exception):
    """A statement failed inside the store.

    `failure` is the classified variant, `code` the raw driver code when the
    driver exposed one.
    """

    def __init__(self, failure: Failure, message: str, code: Optional[str] = None):
        super().__init__(message)
        self.failure = failure
        self.message = message
        self.code = code


def driver_code(exc: BaseException) -> Optional[str]:
    orig = getattr(exc, "orig", None) or exc
    for attr in ("sqlstate", "pgcode", "sqlite_errorname"):
        code = getattr(orig, attr, None)
        if code:
            return str(code)
    return None


def classify(exc: BaseException) -> StoreFailure:
    """Map a driver/SQLAlchemy exception onto a StoreFailure."""
    code = driver_code(exc)
    message = str(getattr(exc, "orig", None) or exc)

    # SQLite reports RESTRICT violations as SQLITE_CONSTRAINT_TRIGGER and older
    # sqlite3 builds carry no error name, so its message decides
    sqlite = code is None or code.startswith("SQLITE_")

    if code in UNIQUE_CODES:
        failure: Failure = Unique()
    elif code in FOREIGN_KEY_CODES:
        failure = ForeignKey()
    elif sqlite and "UNIQUE constraint failed" in message:
        failure = Unique()
    elif sqlite and "FOREIGN KEY constraint failed" in message:
        failure = ForeignKey()
    else:
        failure = Other(detail=message)

    return StoreFailure(failure, message, code)


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


class Store:
    """Handle on the relational store: one engine, one session factory.

    Built explicitly at startup and disposed at shutdown. Every call runs a
    single statement in its own session.
    """

    def __init__(
        self,
        database_url: str,
        echo: bool = False,
        pool_size: int = 5,
        max_overflow: int = 10,
    ):
        self.database_url = database_url
        if database_url.startswith("sqlite"):
            # In-memory SQLite needs every session on the same connection
            self.engine = create_async_engine(
                database_url,
                echo=echo,
                connect_args={"check_same_thread": False},
                poolclass=StaticPool,
            )
            event.listen(self.engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
        else:
            self.engine = create_async_engine(
                database_url,
                echo=echo,
                pool_size=pool_size,
                max_overflow=max_overflow,
                pool_pre_ping=True,
            )
        self._sessions = sessionmaker(
            self.engine, class_=AsyncSession, expire_on_commit=False
        )

    async def init(self, create_tables: bool = True) -> None:
        if create_tables:
            async with self.engine.begin() as conn:
                # This creates the tables if they don't exist
                await conn.run_sync(SQLModel.metadata.create_all)
        logger.info("Store ready", extra={"create_tables": create_tables})

    async def dispose(self) -> None:
        await self.engine.dispose()
        logger.info("Store connections closed")

    async def fetch_all(self, statement) -> List[Any]:
        async with self._sessions() as session:
            try:
                result = await session.execute(statement)
                rows = list(result.scalars().all())
                await session.commit()
            except (SQLAlchemyError, OSError) as exc:
                await session.rollback()
                raise classify(exc) from exc
        return rows

    async def fetch_one(self, statement) -> Optional[Any]:
        """Run the statement and return its first row, or None when it matched nothing."""
        rows = await self.fetch_all(statement)
        return rows[0] if rows else None

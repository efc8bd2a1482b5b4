# labreserve/db.py
from __future__ import annotations

from sqlalchemy.engine.url import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from labreserve.core.config import DEFAULT_DATABASE_URL
from labreserve.infra.unit_of_work import SqlAlchemyUnitOfWork


def _apply_asyncpg_scheme(database_url: str) -> str:
    if database_url.startswith("postgresql+psycopg://"):
        return database_url.replace("postgresql+psycopg://", "postgresql+asyncpg://", 1)
    if database_url.startswith("postgresql+psycopg2://"):
        return database_url.replace("postgresql+psycopg2://", "postgresql+asyncpg://", 1)
    if database_url.startswith("postgresql://"):
        return database_url.replace("postgresql://", "postgresql+asyncpg://", 1)
    if database_url.startswith("postgres://"):
        return database_url.replace("postgres://", "postgresql+asyncpg://", 1)
    return database_url


def _create_engine(database_url: str, **engine_kwargs) -> AsyncEngine:
    url = make_url(database_url)
    connect_args = {}

    if url.get_backend_name() == "postgresql" and url.get_driver_name() == "asyncpg":
        query = dict(url.query)
        if "sslmode" in query:
            # asyncpg takes the mode through the `ssl` connect argument
            connect_args["ssl"] = query.pop("sslmode")
        if "channel_binding" in query:
            # not supported by asyncpg
            query.pop("channel_binding")
        url = url._replace(query=query)

    engine_kwargs.setdefault("pool_pre_ping", True)
    return create_async_engine(url, connect_args=connect_args, **engine_kwargs)


class Database:
    """Explicit storage handle: one engine plus its session factory.

    Built once by ``create_app`` and kept on ``app.state``; services receive
    Unit-of-Work factories derived from it.
    """

    def __init__(self, database_url: str | None = None, **engine_kwargs) -> None:
        self.url = _apply_asyncpg_scheme(database_url or DEFAULT_DATABASE_URL)
        self.engine: AsyncEngine = _create_engine(self.url, **engine_kwargs)
        self.session_factory: async_sessionmaker[AsyncSession] = async_sessionmaker(
            bind=self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )

    def unit_of_work(self) -> SqlAlchemyUnitOfWork:
        return SqlAlchemyUnitOfWork(self.session_factory)

    async def dispose(self) -> None:
        await self.engine.dispose()

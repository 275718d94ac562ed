"""Database base and session setup."""
import logging

from sqlalchemy import event, select, text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

import config

logger = logging.getLogger("poolleague.db")


class Base(DeclarativeBase):
    """Base class for all models."""
    pass


engine = create_async_engine(
    config.DATABASE_URL,
    echo=config.SQL_ECHO,
)

if engine.dialect.name == "sqlite":
    # SQLite only enforces foreign keys when asked, per connection.
    @event.listens_for(engine.sync_engine, "connect")
    def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)


async def get_async_session():
    """Async generator yielding database sessions. Used as a FastAPI dependency."""
    async with async_session_factory() as session:
        yield session


async def _seed_defaults(session: AsyncSession) -> None:
    """Insert the fixed roles and, if configured, the bootstrap admin."""
    from league.models.user import Role, User

    result = await session.execute(select(Role))
    existing = {r.name: r for r in result.scalars().all()}
    for name in (config.ADMIN_ROLE_NAME, config.PLAYER_ROLE_NAME):
        if name not in existing:
            role = Role(name=name)
            session.add(role)
            existing[name] = role
    await session.flush()

    if config.INITIAL_ADMIN_GOOGLE_ID:
        result = await session.execute(
            select(User).where(User.google_id == config.INITIAL_ADMIN_GOOGLE_ID)
        )
        if result.scalar_one_or_none() is None:
            logger.info("Creating initial admin user for %s", config.INITIAL_ADMIN_GOOGLE_ID)
            session.add(
                User(
                    google_id=config.INITIAL_ADMIN_GOOGLE_ID,
                    email=config.INITIAL_ADMIN_EMAIL or None,
                    display_name="System Administrator",
                    role_id=existing[config.ADMIN_ROLE_NAME].id,
                )
            )
    await session.commit()


async def init_db() -> None:
    """Create all tables and seed roles."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    async with async_session_factory() as session:
        await _seed_defaults(session)


async def check_connection() -> None:
    """Run a trivial query; raises if the database is unreachable."""
    async with engine.connect() as conn:
        await conn.execute(text("SELECT 1"))

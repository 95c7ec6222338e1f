from pathlib import Path
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.orm import DeclarativeBase
from nomadmatch.config import get_settings

settings = get_settings()

SQLITE_PREFIX = "sqlite:///"


def to_async_url(url: str) -> str:
    """Convert sqlite:/// to sqlite+aiosqlite:///"""
    return url.replace(SQLITE_PREFIX, "sqlite+aiosqlite:///")


engine = create_async_engine(to_async_url(settings.database_url), echo=False)
async_session = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


class Base(DeclarativeBase):
    pass


async def init_db():
    if settings.database_url.startswith(SQLITE_PREFIX):
        Path(settings.database_url[len(SQLITE_PREFIX):]).parent.mkdir(parents=True, exist_ok=True)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

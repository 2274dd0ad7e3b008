from contextlib import asynccontextmanager
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession
from sqlalchemy.orm import sessionmaker, declarative_base

from storefront.core.config import DATABASE_URL

# asyncpg держит соединения в пуле, sqlite открывает файл на каждое
_engine_options = {} if DATABASE_URL.startswith("sqlite") else {"pool_pre_ping": True}

engine = create_async_engine(DATABASE_URL, echo=False, future=True, **_engine_options)
AsyncSessionLocal = sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)
Base = declarative_base()


async def create_tables(bind=engine):
    """Создаёт таблицы магазинов, каталога, библиотеки изображений и админ-панелей"""
    import storefront.models  # noqa: F401

    async with bind.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


@asynccontextmanager
async def get_session():
    """Сессия на одно действие пользователя: загрузка или одна запись"""
    async with AsyncSessionLocal() as session:
        yield session

from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.orm import DeclarativeBase
from app.core.config import settings

engine = create_async_engine(settings.DATABASE_URL, echo=settings.DB_ECHO)

# Keep loaded attributes usable after commit, async sessions cannot lazy-refresh them
AsyncSessionLocal = async_sessionmaker(
    bind=engine, class_=AsyncSession, expire_on_commit=False
)


# One session per request, the pool behind the engine is the only shared state
async def get_db():
    async with AsyncSessionLocal() as session:
        yield session


# All the models are "stored" in the Base class will be processed by the Engine
class Base(DeclarativeBase):
    pass

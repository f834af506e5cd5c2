from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession
from sqlalchemy.orm import sessionmaker
from dotenv import load_dotenv
from quizlink.core.config import settings

load_dotenv()

engine = create_async_engine(settings.DATABASE_URL, echo=False, future=True)

# Sessions outlive their commits: the websocket handler keeps using the
# resolved link and assessment after the request-scoped work is done
AsyncSessionLocal = sessionmaker(
    bind=engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
)


async def get_db():
    async with AsyncSessionLocal() as session:
        yield session

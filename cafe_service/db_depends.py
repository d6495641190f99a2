from cafe_service.db import AsyncSessionLocal


async def get_db():
    """
    FastAPI dependency: one AsyncSession per request.
    usage:
        async def handler(db: AsyncSession = Depends(get_db)):
            ...
    """
    async with AsyncSessionLocal() as session:
        yield session

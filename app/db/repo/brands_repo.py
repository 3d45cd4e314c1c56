from __future__ import annotations

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models.brands import Brand


class BrandsRepo:
    @staticmethod
    async def get_by_id(session: AsyncSession, brand_id: int) -> Brand | None:
        return await session.get(Brand, brand_id)

    @staticmethod
    async def get_by_id_for_update(session: AsyncSession, brand_id: int) -> Brand | None:
        stmt = select(Brand).where(Brand.id == brand_id).with_for_update()
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    async def get_by_slug(session: AsyncSession, slug: str) -> Brand | None:
        stmt = select(Brand).where(Brand.slug == slug)
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    async def list_all(session: AsyncSession) -> list[Brand]:
        stmt = select(Brand).order_by(Brand.name.asc(), Brand.id.asc())
        result = await session.execute(stmt)
        return list(result.scalars().all())

    @staticmethod
    async def create(session: AsyncSession, *, brand: Brand) -> Brand:
        session.add(brand)
        await session.flush()
        return brand

    @staticmethod
    async def delete_by_id(session: AsyncSession, brand_id: int) -> int:
        result = await session.execute(delete(Brand).where(Brand.id == brand_id))
        return int(getattr(result, "rowcount", 0) or 0)

    @staticmethod
    async def count_all(session: AsyncSession) -> int:
        result = await session.execute(select(func.count(Brand.id)))
        return int(result.scalar_one() or 0)

from __future__ import annotations

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models.winners import Winner


class WinnersRepo:
    @staticmethod
    async def create(session: AsyncSession, *, winner: Winner) -> Winner:
        session.add(winner)
        await session.flush()
        return winner

    @staticmethod
    async def get_by_voucher_id(session: AsyncSession, voucher_id: int) -> Winner | None:
        stmt = select(Winner).where(Winner.voucher_id == voucher_id)
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    async def count_all(session: AsyncSession) -> int:
        result = await session.execute(select(func.count(Winner.id)))
        return int(result.scalar_one() or 0)

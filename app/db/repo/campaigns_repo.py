from __future__ import annotations

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models.campaigns import Campaign


class CampaignsRepo:
    @staticmethod
    async def get_by_id(session: AsyncSession, campaign_id: int) -> Campaign | None:
        return await session.get(Campaign, campaign_id)

    @staticmethod
    async def get_by_id_for_update(session: AsyncSession, campaign_id: int) -> Campaign | None:
        stmt = select(Campaign).where(Campaign.id == campaign_id).with_for_update()
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    async def get_active(session: AsyncSession) -> Campaign | None:
        stmt = (
            select(Campaign)
            .where(Campaign.is_active.is_(True))
            .order_by(Campaign.start_at.desc(), Campaign.id.desc())
            .limit(1)
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    async def list_all(session: AsyncSession, *, limit: int = 100) -> list[Campaign]:
        stmt = select(Campaign).order_by(Campaign.created_at.desc(), Campaign.id.desc()).limit(limit)
        result = await session.execute(stmt)
        return list(result.scalars().all())

    @staticmethod
    async def create(session: AsyncSession, *, campaign: Campaign) -> Campaign:
        session.add(campaign)
        await session.flush()
        return campaign

    @staticmethod
    async def count_active(session: AsyncSession) -> int:
        stmt = select(func.count(Campaign.id)).where(Campaign.is_active.is_(True))
        result = await session.execute(stmt)
        return int(result.scalar_one() or 0)

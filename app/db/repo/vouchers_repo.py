from __future__ import annotations

from datetime import datetime

from sqlalchemy import func, select
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models.brands import Brand
from app.db.models.vouchers import Voucher


class VouchersRepo:
    @staticmethod
    async def get_by_code(session: AsyncSession, code: str) -> Voucher | None:
        stmt = select(Voucher).where(Voucher.code == code)
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    async def get_by_code_for_update(session: AsyncSession, code: str) -> Voucher | None:
        stmt = select(Voucher).where(Voucher.code == code).with_for_update()
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    async def code_exists(session: AsyncSession, code: str) -> bool:
        stmt = select(Voucher.id).where(Voucher.code == code).limit(1)
        result = await session.execute(stmt)
        return result.scalar_one_or_none() is not None

    @staticmethod
    async def create_once(
        session: AsyncSession,
        *,
        code: str,
        campaign_id: int,
        brand_id: int,
        created_at: datetime,
    ) -> Voucher | None:
        stmt = (
            insert(Voucher)
            .values(
                code=code,
                campaign_id=campaign_id,
                brand_id=brand_id,
                user_id=None,
                status="FREE",
                activated_at=None,
                created_at=created_at,
                updated_at=created_at,
            )
            .on_conflict_do_nothing(index_elements=[Voucher.code])
            .returning(Voucher)
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    async def list_activated_for_user_for_update(
        session: AsyncSession,
        *,
        user_id: int,
    ) -> list[Voucher]:
        stmt = (
            select(Voucher)
            .where(Voucher.user_id == user_id, Voucher.status == "ACTIVATED")
            .order_by(Voucher.id.asc())
            .with_for_update()
        )
        result = await session.execute(stmt)
        return list(result.scalars().all())

    @staticmethod
    async def list_activated_brands_for_user(
        session: AsyncSession,
        *,
        user_id: int,
        campaign_id: int,
    ) -> list[tuple[int, str]]:
        stmt = (
            select(Voucher.brand_id, Brand.name)
            .join(Brand, Brand.id == Voucher.brand_id)
            .where(
                Voucher.user_id == user_id,
                Voucher.campaign_id == campaign_id,
                Voucher.status == "ACTIVATED",
            )
            .order_by(Voucher.id.asc())
        )
        result = await session.execute(stmt)
        return [(int(brand_id), str(brand_name)) for brand_id, brand_name in result.all()]

    @staticmethod
    async def list_activated_brands_for_campaign(
        session: AsyncSession,
        *,
        campaign_id: int,
    ) -> list[tuple[int, int, str]]:
        stmt = (
            select(Voucher.user_id, Voucher.brand_id, Brand.name)
            .join(Brand, Brand.id == Voucher.brand_id)
            .where(
                Voucher.campaign_id == campaign_id,
                Voucher.status == "ACTIVATED",
                Voucher.user_id.is_not(None),
            )
            .order_by(Voucher.user_id.asc(), Voucher.id.asc())
        )
        result = await session.execute(stmt)
        return [
            (int(user_id), int(brand_id), str(brand_name))
            for user_id, brand_id, brand_name in result.all()
        ]

    @staticmethod
    async def count_by_campaign(session: AsyncSession, campaign_id: int) -> int:
        stmt = select(func.count(Voucher.id)).where(Voucher.campaign_id == campaign_id)
        result = await session.execute(stmt)
        return int(result.scalar_one() or 0)

    @staticmethod
    async def count_by_brand(session: AsyncSession, brand_id: int) -> int:
        stmt = select(func.count(Voucher.id)).where(Voucher.brand_id == brand_id)
        result = await session.execute(stmt)
        return int(result.scalar_one() or 0)

    @staticmethod
    async def count_by_status(session: AsyncSession) -> dict[str, int]:
        stmt = select(Voucher.status, func.count(Voucher.id)).group_by(Voucher.status)
        result = await session.execute(stmt)
        return {str(status): int(count) for status, count in result.all()}

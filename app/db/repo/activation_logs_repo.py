from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models.activation_logs import ActivationLog


class ActivationLogsRepo:
    @staticmethod
    async def create(session: AsyncSession, *, entry: ActivationLog) -> ActivationLog:
        session.add(entry)
        await session.flush()
        return entry

    @staticmethod
    async def list_for_code(session: AsyncSession, code: str) -> list[ActivationLog]:
        stmt = (
            select(ActivationLog)
            .where(ActivationLog.code == code)
            .order_by(ActivationLog.created_at.asc(), ActivationLog.id.asc())
        )
        result = await session.execute(stmt)
        return list(result.scalars().all())

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy import func, or_, select, update
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.models.users import User


class UsersRepo:
    @staticmethod
    async def get_by_id(session: AsyncSession, user_id: int) -> User | None:
        return await session.get(User, user_id)

    @staticmethod
    async def get_by_external_handle(session: AsyncSession, external_handle: str) -> User | None:
        stmt = select(User).where(User.external_handle == external_handle)
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    async def list_by_ids(session: AsyncSession, user_ids: Sequence[int]) -> list[User]:
        ids = tuple({int(user_id) for user_id in user_ids})
        if not ids:
            return []
        stmt = select(User).where(User.id.in_(ids)).order_by(User.id.asc())
        result = await session.execute(stmt)
        return list(result.scalars().all())

    @staticmethod
    async def create_once(
        session: AsyncSession,
        *,
        external_handle: str,
        display_name: str | None,
        phone: str | None,
        language_code: str,
    ) -> bool:
        stmt = (
            insert(User)
            .values(
                external_handle=external_handle,
                display_name=display_name,
                phone=phone,
                language_code=language_code,
            )
            .on_conflict_do_nothing(index_elements=[User.external_handle])
            .returning(User.id)
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none() is not None

    @staticmethod
    async def fill_blank_fields(
        session: AsyncSession,
        *,
        external_handle: str,
        values: dict[str, str],
    ) -> int:
        updated = 0
        for field_name, value in values.items():
            column = getattr(User, field_name)
            stmt = (
                update(User)
                .where(
                    User.external_handle == external_handle,
                    or_(column.is_(None), column == ""),
                )
                .values({field_name: value})
            )
            result = await session.execute(stmt)
            updated += int(getattr(result, "rowcount", 0) or 0)
        return updated

    @staticmethod
    async def set_language(session: AsyncSession, *, external_handle: str, language_code: str) -> int:
        stmt = (
            update(User)
            .where(User.external_handle == external_handle)
            .values(language_code=language_code)
        )
        result = await session.execute(stmt)
        return int(getattr(result, "rowcount", 0) or 0)

    @staticmethod
    async def set_bot_step(session: AsyncSession, *, external_handle: str, bot_step: str | None) -> int:
        stmt = update(User).where(User.external_handle == external_handle).values(bot_step=bot_step)
        result = await session.execute(stmt)
        return int(getattr(result, "rowcount", 0) or 0)

    @staticmethod
    async def count_all(session: AsyncSession) -> int:
        result = await session.execute(select(func.count(User.id)))
        return int(result.scalar_one() or 0)

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import get_settings
from app.db.models.users import User
from app.db.repo.users_repo import UsersRepo


def first_write_wins_updates(
    *,
    current_display_name: str | None,
    current_phone: str | None,
    display_name: str | None,
    phone: str | None,
) -> dict[str, str]:
    updates: dict[str, str] = {}
    if display_name and not current_display_name:
        updates["display_name"] = display_name
    if phone and not current_phone:
        updates["phone"] = phone
    return updates


class UserOnboardingService:
    @staticmethod
    async def get_by_external_handle(session: AsyncSession, external_handle: str) -> User | None:
        return await UsersRepo.get_by_external_handle(session, external_handle)

    @staticmethod
    async def resolve_user(
        session: AsyncSession,
        *,
        external_handle: str,
        display_name: str | None = None,
        phone: str | None = None,
    ) -> User:
        created = await UsersRepo.create_once(
            session,
            external_handle=external_handle,
            display_name=display_name,
            phone=phone,
            language_code=get_settings().default_language,
        )
        user = await UsersRepo.get_by_external_handle(session, external_handle)
        if user is None:
            raise RuntimeError("user vanished after create_once")
        if created:
            return user

        updates = first_write_wins_updates(
            current_display_name=user.display_name,
            current_phone=user.phone,
            display_name=display_name,
            phone=phone,
        )
        if not updates:
            return user
        # no row lock: a concurrent writer that filled the field first keeps it
        updated = await UsersRepo.fill_blank_fields(
            session,
            external_handle=external_handle,
            values=updates,
        )
        if updated:
            await session.refresh(user)
        return user

    @staticmethod
    async def update_language(
        session: AsyncSession,
        *,
        external_handle: str,
        language_code: str,
    ) -> bool:
        updated = await UsersRepo.set_language(
            session,
            external_handle=external_handle,
            language_code=language_code.upper(),
        )
        return updated > 0

    @staticmethod
    async def update_bot_step(
        session: AsyncSession,
        *,
        external_handle: str,
        bot_step: str | None,
    ) -> bool:
        updated = await UsersRepo.set_bot_step(
            session,
            external_handle=external_handle,
            bot_step=bot_step,
        )
        return updated > 0
